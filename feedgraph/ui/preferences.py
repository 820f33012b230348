from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QCheckBox,
                             QDoubleSpinBox, QPushButton)
from PyQt6.QtCore import pyqtSignal

# field -> (label, minimum, maximum, decimals, step)
NUMERIC_FIELDS = {
    "gravity": ("Gravity", 0.0, 100.0, 2, 0.1),
    "scaling_ratio": ("Scaling ratio", 0.0, 100.0, 2, 0.1),
    "edge_weight_influence": ("Edge weight influence", 0.0, 5.0, 2, 0.1),
    "barnes_hut_theta": ("Barnes-Hut theta", 0.0, 5.0, 2, 0.1),
    "repulsion_strength": ("Repulsion strength", 0.0, 1000000.0, 0, 500.0),
    "cooling_rate": ("Cooling rate", 0.0, 1.0, 3, 0.01),
    "max_velocity": ("Max velocity", 0.0, 100.0, 2, 0.5),
}

BOOL_FIELDS = {
    "dissuade_hubs": "Dissuade hubs",
    "prevent_overlap": "Prevent overlap",
}


class ForceSettingsDialog(QDialog):
    settings_applied = pyqtSignal(dict)

    def __init__(self, settings, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Force Settings")
        self.resize(320, 300)

        self.layout = QVBoxLayout(self)
        form = QFormLayout()

        self.spin_boxes = {}
        for name, (label, minimum, maximum, decimals, step) in NUMERIC_FIELDS.items():
            box = QDoubleSpinBox()
            box.setRange(minimum, maximum)
            box.setDecimals(decimals)
            box.setSingleStep(step)
            box.setValue(getattr(settings, name))
            form.addRow(label, box)
            self.spin_boxes[name] = box

        self.check_boxes = {}
        for name, label in BOOL_FIELDS.items():
            box = QCheckBox()
            box.setChecked(getattr(settings, name))
            form.addRow(label, box)
            self.check_boxes[name] = box

        self.layout.addLayout(form)

        # Buttons
        btn_layout = QHBoxLayout()
        self.btn_save = QPushButton("Apply")
        self.btn_save.clicked.connect(self.on_save)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self.close)

        btn_layout.addStretch()
        btn_layout.addWidget(self.btn_cancel)
        btn_layout.addWidget(self.btn_save)
        self.layout.addLayout(btn_layout)

        self.setStyleSheet("""
            QDialog { background-color: #2d2d2d; color: white; }
            QLabel { color: white; }
            QDoubleSpinBox { background-color: #3e3e3e; color: white; padding: 3px; border: 1px solid #555; }
            QPushButton { background-color: #0d47a1; color: white; padding: 5px 15px; border: none; }
            QPushButton:hover { background-color: #1565c0; }
        """)

    def values(self):
        result = {name: box.value() for name, box in self.spin_boxes.items()}
        result.update({name: box.isChecked() for name, box in self.check_boxes.items()})
        return result

    def on_save(self):
        self.settings_applied.emit(self.values())
        self.accept()
