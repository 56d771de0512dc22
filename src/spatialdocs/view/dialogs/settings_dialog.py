"""
Settings Dialog
Edits the assistant preferences stored in AppSettings.
"""
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QComboBox, QDialogButtonBox, QLabel, QWidget,
)

from spatialdocs.model.settings import AppSettings, DEFAULT_MODEL

logger = logging.getLogger(__name__)

MODEL_CHOICES = [DEFAULT_MODEL, "gemini-2.5-flash", "gemini-2.5-pro"]


class SettingsDialog(QDialog):
    def __init__(self, settings: AppSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.settings = settings
        self.setWindowTitle("Settings")
        self.setMinimumWidth(420)

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.api_key_edit = QLineEdit(settings.api_key)
        self.api_key_edit.setEchoMode(QLineEdit.Password)
        self.api_key_edit.setPlaceholderText("Leave empty to remove the stored key")
        form.addRow("API key:", self.api_key_edit)

        self.model_combo = QComboBox()
        self.model_combo.setEditable(True)
        self.model_combo.addItems(MODEL_CHOICES)
        self.model_combo.setCurrentText(settings.model)
        form.addRow("Model:", self.model_combo)

        layout.addLayout(form)
        hint = QLabel("The key is stored in the local settings file only.")
        hint.setStyleSheet("color: gray;")
        layout.addWidget(hint)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def accept(self) -> None:
        self.settings.api_key = self.api_key_edit.text()
        self.settings.model = self.model_combo.currentText().strip()
        self.settings.sync()
        logger.info("Settings saved.")
        super().accept()
