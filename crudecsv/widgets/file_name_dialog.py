"""Dialog asking for the name of a new CSV file."""

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton
)
from PyQt6.QtCore import Qt


class FileNameDialog(QDialog):
    """Asks for a file name; Enter creates, Escape cancels"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.result_name = ""
        self._setup_ui()

    def _setup_ui(self):
        """Set up the dialog UI"""
        self.setWindowTitle("Create New CSV File")
        self.setMinimumWidth(300)
        layout = QVBoxLayout(self)

        layout.addWidget(QLabel("File name:"))
        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("Enter filename (without .csv extension)")
        self.name_input.returnPressed.connect(self.submit)
        layout.addWidget(self.name_input)

        self.message_label = QLabel("")
        self.message_label.setStyleSheet("color: #a33;")
        layout.addWidget(self.message_label)

        button_layout = QHBoxLayout()
        button_layout.addStretch()

        self.create_btn = QPushButton("Create")
        self.create_btn.setAutoDefault(False)  # Enter is handled by the line edit
        self.create_btn.clicked.connect(self.submit)
        button_layout.addWidget(self.create_btn)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.setAutoDefault(False)
        cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(cancel_btn)

        layout.addLayout(button_layout)
        self.name_input.setFocus(Qt.FocusReason.OtherFocusReason)

    def submit(self):
        """Accept a non-empty name, otherwise ask again"""
        value = self.name_input.text().strip()
        if not value:
            self.message_label.setText("Please enter a filename")
            return
        self.result_name = value
        self.accept()

    def get_file_name(self) -> str:
        return self.result_name
