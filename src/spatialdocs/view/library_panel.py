"""
Library Sidebar
Lists the records that are not on the board. Dropping a tile over the panel
removes it from the board and its record shows up here again; double clicking
an entry puts it back.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QListWidget, QListWidgetItem, QWidget, QAbstractItemView

from spatialdocs.controller.board import Board

logger = logging.getLogger(__name__)


class LibraryPanel(QListWidget):
    def __init__(self, board: Board, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.board = board
        self.store = board.store
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setStyleSheet(
            "QListWidget { background: rgba(255, 255, 255, 215); border: none; border-right: 1px solid #CCC; }"
            "QListWidget::item { padding: 8px; }"
        )

        self.store.record_removed.connect(self._on_record_removed)
        self.store.record_placed.connect(self._on_record_placed)
        self.itemDoubleClicked.connect(self._on_item_double_clicked)
        self.refresh()

    def refresh(self) -> None:
        self.clear()
        for record in self.store.library_records():
            self.addItem(self._make_item(record.name))

    def _make_item(self, name: str) -> QListWidgetItem:
        record = self.store.records[name]
        item = QListWidgetItem(record.label or record.name)
        item.setData(Qt.UserRole, record.name)
        item.setToolTip(f"{len(record.page_sources())} page(s)")
        return item

    def _row_of(self, name: str) -> int:
        for row in range(self.count()):
            if self.item(row).data(Qt.UserRole) == name:
                return row
        return -1

    def _on_record_removed(self, name: str) -> None:
        if name not in self.store.records or self._row_of(name) >= 0:
            return
        # Keep id order so a returning record lands where it was
        record_id = self.store.records[name].id
        row = 0
        while row < self.count():
            other = self.store.records.get(self.item(row).data(Qt.UserRole))
            if other is not None and other.id > record_id:
                break
            row += 1
        item = self._make_item(name)
        self.insertItem(row, item)
        self.setCurrentItem(item)
        self.scrollToItem(item, QAbstractItemView.PositionAtCenter)

    def _on_record_placed(self, name: str) -> None:
        row = self._row_of(name)
        if row >= 0:
            self.takeItem(row)

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        name = item.data(Qt.UserRole)
        if self.board.place_record(name) is None:
            logger.debug(f"Could not place '{name}' back on the board.")
