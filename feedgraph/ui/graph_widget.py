import logging

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QTransform

from ..force_atlas import LayoutValidationError

logger = logging.getLogger(__name__)

TICK_MS = 16  # ~60 FPS


class GraphWidget(QWidget):
    nodeClicked = pyqtSignal(object)

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine

        # Rendering settings
        self.node_radius = 5
        self.node_color = QColor("#00bcd4")
        self.label_color = QColor("#cccccc")
        self.edge_color = QColor("#888888")
        self.bg_color = QColor("#121212")
        self.show_labels = False

        # Camera
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = 1.0
        self.min_scale = 0.1
        self.max_scale = 5.0

        # Interaction
        self.dragging_node = None
        self.drag_pos = None
        self.panning = False
        self.last_mouse_pos = QPointF()

        # Physics Timer
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.physics_loop)

        self.setMouseTracking(True)

    def start(self):
        self.engine.restart()
        self.timer.start(TICK_MS)

    def stop(self):
        self.timer.stop()

    def physics_loop(self):
        if not self.engine.running and self.dragging_node is None:
            self.timer.stop()
            return

        try:
            self.engine.step()
        except LayoutValidationError:
            logger.exception("Layout tick failed, stopping the simulation")
            self.timer.stop()
            return

        if self.dragging_node is not None and self.drag_pos is not None:
            # Pinned under the cursor while dragged
            self.dragging_node.x = self.drag_pos.x()
            self.dragging_node.y = self.drag_pos.y()
            self.dragging_node.vx = 0.0
            self.dragging_node.vy = 0.0

        self.update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        size = event.size()
        if size.width() > 0 and size.height() > 0:
            self.engine.resize(size.width(), size.height())

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        painter.fillRect(self.rect(), self.bg_color)

        transform = QTransform()
        transform.translate(self.offset_x, self.offset_y)
        transform.scale(self.scale, self.scale)
        painter.setTransform(transform)

        nodes = self.engine.nodes

        # Edges, fainter for weaker links
        for edge in self.engine.edges:
            n1 = nodes[edge.source]
            n2 = nodes[edge.target]
            color = QColor(self.edge_color)
            color.setAlphaF(max(0.05, min(1.0, abs(edge.weight))) * 0.4)
            painter.setPen(QPen(color, 0.5))
            painter.drawLine(QPointF(n1.x, n1.y), QPointF(n2.x, n2.y))

        painter.setFont(QFont("Segoe UI", 8))
        for node in nodes:
            color = node.data.get("color")
            brush = QBrush(QColor(color) if color else self.node_color)
            painter.setBrush(brush)
            painter.setPen(Qt.PenStyle.NoPen)

            r = self.node_radius
            painter.drawEllipse(QRectF(node.x - r, node.y - r, r * 2, r * 2))

            if self.show_labels:
                painter.setPen(self.label_color)
                painter.drawText(QRectF(node.x - 60, node.y + r + 2, 120, 14),
                                 Qt.AlignmentFlag.AlignCenter, node.label[:30])

    def node_at(self, world_pos):
        for node in reversed(self.engine.nodes):
            dx = world_pos.x() - node.x
            dy = world_pos.y() - node.y
            if dx * dx + dy * dy <= self.node_radius * self.node_radius:
                return node
        return None

    def mousePressEvent(self, event):
        mouse_pos = event.position()

        if event.button() == Qt.MouseButton.RightButton:
            self.panning = True
            self.last_mouse_pos = mouse_pos
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            return

        if event.button() == Qt.MouseButton.LeftButton:
            world_pos = self.screen_to_world(mouse_pos)
            node = self.node_at(world_pos)
            if node is not None:
                self.dragging_node = node
                self.drag_pos = world_pos
                self.setCursor(Qt.CursorShape.PointingHandCursor)
                self.nodeClicked.emit(node.id)
                # Reheat so the neighbours follow the drag
                self.engine.restart(0.3)
                if not self.timer.isActive():
                    self.timer.start(TICK_MS)

    def mouseMoveEvent(self, event):
        mouse_pos = event.position()

        if self.panning:
            delta = mouse_pos - self.last_mouse_pos
            self.offset_x += delta.x()
            self.offset_y += delta.y()
            self.last_mouse_pos = mouse_pos
            self.update()

        elif self.dragging_node is not None:
            self.drag_pos = self.screen_to_world(mouse_pos)
            self.dragging_node.x = self.drag_pos.x()
            self.dragging_node.y = self.drag_pos.y()
            self.dragging_node.vx = 0.0
            self.dragging_node.vy = 0.0
            self.update()

    def mouseReleaseEvent(self, event):
        self.dragging_node = None
        self.drag_pos = None
        self.panning = False
        self.setCursor(Qt.CursorShape.ArrowCursor)

    def wheelEvent(self, event):
        angle = event.angleDelta().y()
        factor = 1.1 if angle > 0 else 0.9

        new_scale = self.scale * factor
        if self.min_scale <= new_scale <= self.max_scale:
            self.scale = new_scale
            self.update()

    def screen_to_world(self, screen_pos):
        # screen = world * scale + offset
        wx = (screen_pos.x() - self.offset_x) / self.scale
        wy = (screen_pos.y() - self.offset_y) / self.scale
        return QPointF(wx, wy)

    def center_on_node(self, uid):
        node = self.engine.get_node(uid)
        if node is None:
            return
        self.offset_x = self.width() / 2 - node.x * self.scale
        self.offset_y = self.height() / 2 - node.y * self.scale
        self.update()

    def reset_view(self):
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = 1.0
        self.update()
