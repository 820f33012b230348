import logging
import os

from PyQt6.QtWidgets import (QMainWindow, QFileDialog, QMessageBox, QVBoxLayout, QWidget, QLabel,
                             QSplitter, QTextEdit)
from PyQt6.QtGui import QAction
from PyQt6.QtCore import Qt

from ..main import load_graph_file
from .graph_widget import GraphWidget
from .preferences import ForceSettingsDialog

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, engine):
        super().__init__()
        self.setWindowTitle("FeedGraph - Article Similarity Map")
        self.resize(1200, 800)

        self.engine = engine

        self.init_ui()

    def init_ui(self):
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)

        self.main_layout = QVBoxLayout(self.central_widget)
        self.main_layout.setContentsMargins(0, 0, 0, 0)

        self.info_label = QLabel(self.graph_summary())
        self.info_label.setStyleSheet("padding: 5px; background-color: #252526; color: #ccc; border-bottom: 1px solid #3e3e3e;")
        self.main_layout.addWidget(self.info_label)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_layout.addWidget(self.splitter)

        self.details_panel = QTextEdit()
        self.details_panel.setReadOnly(True)
        self.details_panel.setText("Select an article to view details.")
        self.splitter.addWidget(self.details_panel)

        self.graph_widget = GraphWidget(self.engine)
        self.graph_widget.nodeClicked.connect(self.on_node_clicked)
        self.splitter.addWidget(self.graph_widget)

        self.splitter.setStretchFactor(0, 25)
        self.splitter.setStretchFactor(1, 75)

        self.create_menu()

    def create_menu(self):
        menu = self.menuBar()
        menu.clear()

        file_menu = menu.addMenu("&File")

        open_action = QAction("&Open Graph...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        exit_action = QAction("E&xit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        layout_menu = menu.addMenu("&Layout")
        settings_action = QAction("Force &Settings...", self)
        settings_action.triggered.connect(self.open_force_settings)
        layout_menu.addAction(settings_action)

        restart_action = QAction("&Restart Layout", self)
        restart_action.setShortcut("Ctrl+R")
        restart_action.triggered.connect(self.graph_widget.start)
        layout_menu.addAction(restart_action)

        view_menu = menu.addMenu("&View")
        reset_action = QAction("Reset &View", self)
        reset_action.triggered.connect(self.graph_widget.reset_view)
        view_menu.addAction(reset_action)

        labels_action = QAction("Show &Labels", self)
        labels_action.setCheckable(True)
        labels_action.toggled.connect(self.toggle_labels)
        view_menu.addAction(labels_action)

    def graph_summary(self):
        return f"{len(self.engine.nodes)} articles, {len(self.engine.edges)} links"

    def toggle_labels(self, checked):
        self.graph_widget.show_labels = checked
        self.graph_widget.update()

    def open_force_settings(self):
        dlg = ForceSettingsDialog(self.engine.settings, self)
        dlg.settings_applied.connect(self.apply_force_settings)
        dlg.exec()

    def apply_force_settings(self, values):
        self.engine.update_settings(values)
        logger.info(f"Force settings updated: {values}")
        self.graph_widget.start()

    def on_node_clicked(self, uid):
        node = self.engine.get_node(uid)
        if node is None:
            return

        title = node.data.get("title") or node.label
        text = f"<h2>{title}</h2>"
        text += f"<p>Degree: {node.degree:.2f}</p>"

        text += "<h3>Linked articles</h3><ul>"
        neighbors = self.engine.neighbors(uid)
        if neighbors:
            for other in neighbors:
                other_node = self.engine.get_node(other)
                text += f"<li>{other_node.label}</li>"
        else:
            text += "<li><i>None</i></li>"
        text += "</ul>"

        self.details_panel.setHtml(text)

    def open_file_dialog(self):
        fname, _ = QFileDialog.getOpenFileName(self, "Open Graph", "", "Graph JSON (*.json);;All Files (*)")
        if fname:
            self.load_graph(fname)

    def load_graph(self, path):
        self.info_label.setText(f"Loading {os.path.basename(path)}...")
        try:
            graph = load_graph_file(path)
            self.engine.load_from_networkx(graph)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {path}: {e}")
            QMessageBox.critical(self, "Error", f"Failed to load graph:\n{e}")
            self.info_label.setText("Error")
            return

        self.info_label.setText(f"{os.path.basename(path)}: {self.graph_summary()}")
        self.graph_widget.reset_view()
        self.graph_widget.start()
