"""Settings dialog."""

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QLabel, QDialogButtonBox
)
from ..utils.config import Config


class SettingsDialog(QDialog):
    """Dialog for the template path setting."""

    def __init__(self, config: Config = None, parent=None):
        super().__init__(parent)
        self.config = config or Config()
        self.setup_ui()
        self.load_config()

    def setup_ui(self):
        """Initialize the UI components."""
        self.setWindowTitle("Crude CSV Settings")
        layout = QVBoxLayout(self)

        form = QFormLayout()
        self.template_path_input = QLineEdit()
        self.template_path_input.setPlaceholderText("templates/template.csv or templates/")
        form.addRow("Template path:", self.template_path_input)
        layout.addLayout(form)

        description = QLabel(
            "Optional explicit path to a CSV template file, "
            "or a folder that contains template.csv"
        )
        description.setWordWrap(True)
        description.setStyleSheet("color: #666;")
        layout.addWidget(description)

        button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok |
            QDialogButtonBox.StandardButton.Cancel
        )
        button_box.accepted.connect(self.save_config)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    def load_config(self):
        """Load current configuration."""
        self.template_path_input.setText(self.config.get_template_path())

    def save_config(self):
        """Save configuration and close dialog."""
        self.config.set_template_path(self.template_path_input.text())
        self.accept()
