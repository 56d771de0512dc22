"""
Input Overlay
A single line prompt floating at the bottom of the board (opened with Space).
The text and the current board snapshot are handed to whoever listens to
`submitted`; the assistant itself lives outside this application.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLineEdit, QWidget

from spatialdocs.controller.board import Board

logger = logging.getLogger(__name__)

OVERLAY_WIDTH = 560
OVERLAY_HEIGHT = 48
OVERLAY_BOTTOM_MARGIN = 32


class InputOverlay(QFrame):
    submitted = Signal(str, object)  # (text, board snapshot)

    def __init__(self, board: Board, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.board = board
        self.setObjectName("inputOverlay")
        self.setStyleSheet(
            "#inputOverlay { background: white; border: 1px solid #BBB; border-radius: 8px; }"
            "QLineEdit { border: none; font-size: 14px; }"
        )
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 6, 12, 6)
        self.line_edit = QLineEdit()
        self.line_edit.setPlaceholderText("Ask about the documents on the board...")
        self.line_edit.returnPressed.connect(self._on_return)
        layout.addWidget(self.line_edit)
        self.hide()

        board.store.input_overlay_changed.connect(self._on_overlay_changed)

    def place(self, width: int, height: int) -> None:
        """Center horizontally near the bottom of a width x height area."""
        w = min(OVERLAY_WIDTH, max(width - 40, 100))
        self.setGeometry((width - w) // 2, height - OVERLAY_HEIGHT - OVERLAY_BOTTOM_MARGIN, w, OVERLAY_HEIGHT)

    def _on_overlay_changed(self, visible: bool) -> None:
        if visible:
            self.line_edit.clear()
            self.show()
            self.raise_()
            self.line_edit.setFocus()
        else:
            self.hide()
            if self.parentWidget() is not None:
                self.parentWidget().setFocus()

    def _on_return(self) -> None:
        text = self.line_edit.text().strip()
        if not text:
            return
        snapshot = self.board.snapshot()
        logger.info(f"Prompt submitted with {len(snapshot)} document(s) on the board.")
        self.submitted.emit(text, snapshot)
        self.board.close_input_overlay()

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key_Escape:
            self.board.escape()
            event.accept()
            return
        super().keyPressEvent(event)
