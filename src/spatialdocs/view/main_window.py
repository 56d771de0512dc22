"""
Main Application Window
=======================
Hosts the board and stacks the library sidebar, the viewer overlay and the
input overlay over it as child widgets, so all of them share the board's
viewport coordinates.

Window-level keys
-----------------
* Escape: close the topmost overlay, or cancel a pending action prompt.
* Space: open the input overlay (refused while the viewer is open).
* Return: read the centered tile.
"""
import logging
import os
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QFileDialog, QMessageBox

from spatialdocs.application import VISIBLE_APP_NAME
from spatialdocs.config import LIBRARY_PANEL_WIDTH, CACHE_PATH
from spatialdocs.controller.actions import PendingActionDrop
from spatialdocs.controller.board import Board
from spatialdocs.model.geometry import Rect
from spatialdocs.model.io import DocumentCache, load_data_file, normalize_dimensions
from spatialdocs.model.settings import AppSettings
from spatialdocs.view.board_view import BoardView
from spatialdocs.view.dialogs.action_dialog import ask_action_outcome
from spatialdocs.view.dialogs.settings_dialog import SettingsDialog
from spatialdocs.view.input_overlay import InputOverlay
from spatialdocs.view.library_panel import LibraryPanel
from spatialdocs.view.viewer_overlay import ViewerOverlay

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, board: Board, settings: Optional[AppSettings] = None, cache: Optional[DocumentCache] = None) -> None:
        super().__init__()
        self.board = board
        self.settings = settings if settings is not None else AppSettings()
        self.cache = cache if cache is not None else DocumentCache(CACHE_PATH)

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- Board + overlays (children of the board view) ---
        self.board_view = BoardView(board)
        self.board_view.setFocusPolicy(Qt.StrongFocus)
        self.setCentralWidget(self.board_view)

        self.library_panel = LibraryPanel(board, self.board_view)
        self.viewer_overlay = ViewerOverlay(board.viewer, self.board_view)
        self.input_overlay = InputOverlay(board, self.board_view)
        self.board_view.resized.connect(self._layout_overlays)

        # --- Store signals ---
        board.store.action_prompt.connect(self._on_action_prompt)
        board.store.action_confirmed.connect(self._on_action_confirmed)
        self.input_overlay.submitted.connect(self._on_prompt_submitted)

        self._create_actions()
        self._create_menus()
        self.statusBar().showMessage("Double click a document to focus it, again to read it.", 5000)
        self.board_view.setFocus()

    def _create_actions(self) -> None:
        self.act_open = QAction("Import Documents...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_clear_cache = QAction("Clear Local Cache", self)
        self.act_clear_cache.triggered.connect(self.on_clear_cache)

        self.act_settings = QAction("Settings...", self)
        self.act_settings.setShortcut("Ctrl+,")
        self.act_settings.triggered.connect(self.on_settings)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_clear_cache)
        file_menu.addSeparator()
        file_menu.addAction(self.act_settings)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

    # --- Layout ---

    def _layout_overlays(self, width: int, height: int) -> None:
        panel_width = int(min(LIBRARY_PANEL_WIDTH, width / 3))
        self.library_panel.setGeometry(0, 0, panel_width, height)
        self.board.set_library_rect(Rect(0.0, 0.0, float(panel_width), float(height)))
        self.viewer_overlay.setGeometry(0, 0, width, height)
        self.input_overlay.place(width, height)

    # --- Keys ---

    def keyPressEvent(self, event) -> None:
        key = event.key()
        if key == Qt.Key_Escape:
            self.board.escape()
        elif key == Qt.Key_Space:
            self.board.open_input_overlay()
        elif key in (Qt.Key_Return, Qt.Key_Enter):
            self._open_centered_tile()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def _open_centered_tile(self) -> None:
        for tile in self.board.store.tiles:
            if self.board.docking.is_centered(tile.tile_id):
                self.board.open_viewer(tile.tile_id)
                return
        logger.debug("No centered tile to open.")

    # --- Store slots ---

    def _on_action_prompt(self, pending: PendingActionDrop) -> None:
        # Let the drop animation start before the modal loop takes over
        QTimer.singleShot(0, lambda: self._ask_action(pending))

    def _ask_action(self, pending: PendingActionDrop) -> None:
        if self.board.actions.pending is not pending:
            return  # superseded meanwhile
        self.board.actions.resolve(ask_action_outcome(pending, self))

    def _on_action_confirmed(self, action_label: str, record_label: str) -> None:
        self.statusBar().showMessage(f"'{record_label}' sent to {action_label}.", 4000)

    def _on_prompt_submitted(self, text: str, snapshot) -> None:
        logger.debug(f"Prompt: {text!r}")
        self.statusBar().showMessage(f"Asked about {len(snapshot)} document(s).", 4000)

    # --- File slots ---

    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(
            self, "Import Documents", "", "JSON Files (*.json)"
        )
        if not fname:
            return
        records = normalize_dimensions(load_data_file(fname))
        if not records:
            QMessageBox.critical(self, "Error", f"No documents could be read from:\n{fname}")
            return
        if not self.board.reload(records):
            QMessageBox.warning(self, "Busy", "Close the viewer before importing documents.")
            return
        self.library_panel.refresh()
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{os.path.basename(fname)}]")

    def on_clear_cache(self) -> None:
        if self.cache.clear():
            self.statusBar().showMessage("Local cache cleared.", 4000)
        else:
            QMessageBox.critical(self, "Error", f"Could not remove the cache file:\n{self.cache.filepath}")

    def on_settings(self) -> None:
        SettingsDialog(self.settings, self).exec()

    def closeEvent(self, event, /) -> None:
        """Remember the layout and the reading zoom; both are best effort."""
        self.cache.save(self.board.layout_snapshot())
        self.settings.viewer_zoom = self.board.viewer.last_zoom
        self.settings.sync()
        event.accept()
