"""
Board State (Data Model)
========================
This module defines the central data structure for the running board.

Why is this file needed?
------------------------
1. State Management: It holds every known DocumentRecord, the tiles currently
   on the board and the viewport size in one place.
2. Decoupling: Views subscribe to its signals; controllers write to it. No
   application state is ever looked up through the rendering tree.
3. Sinks: `record_removed` / `record_placed` tell the library sidebar which
   records can be offered again, `action_confirmed` carries outward actions.

Classes:
    BoardStore: The main container class (QObject with signals).
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from PySide6.QtCore import QObject, Signal

from spatialdocs.model.geometry import Viewport
from spatialdocs.model.records import DocumentRecord
from spatialdocs.model.registry import TileRegistry
from spatialdocs.model.tile import Tile

logger = logging.getLogger(__name__)


class BoardStore(QObject):
    """Central state store with signals for board/view sync."""
    tile_added = Signal(int)
    tile_removed = Signal(int)
    tile_changed = Signal(int)
    viewport_changed = Signal(object)

    # Library (deletion sink)
    record_placed = Signal(str)
    record_removed = Signal(str)

    # Overlays and prompts
    tray_changed = Signal(bool)
    viewer_changed = Signal(object)
    action_prompt = Signal(object)
    action_confirmed = Signal(str, str)  # (action label, record label)
    input_overlay_changed = Signal(bool)

    def __init__(self, viewport: Viewport | None = None) -> None:
        super().__init__()
        self.viewport: Viewport = viewport or Viewport(1280.0, 800.0)
        self.tiles = TileRegistry()
        self.records: dict[str, DocumentRecord] = {}

    # --- Records ---

    def load_records(self, records: Iterable[DocumentRecord]) -> None:
        """Register the documents known to the application (not placed yet)."""
        for record in records:
            if record.name in self.records:
                logger.warning(f"Duplicate record name '{record.name}', keeping the first one.")
                continue
            self.records[record.name] = record

    def library_records(self) -> list[DocumentRecord]:
        """Known records that are not on the board, in id order."""
        on_board = self.tiles.names()
        return sorted((r for r in self.records.values() if r.name not in on_board), key=lambda r: r.id)

    # --- Tiles ---

    def place_record(
        self,
        record: DocumentRecord,
        anchor_left: Optional[float] = None,
        anchor_top: Optional[float] = None,
    ) -> Optional[Tile]:
        """Put a record on the board at its stored position (or the one given)."""
        self.records.setdefault(record.name, record)
        tile = self.tiles.add(
            record,
            record.x if anchor_left is None else anchor_left,
            record.y if anchor_top is None else anchor_top,
        )
        if tile is None:
            return None
        tile.layout(self.viewport)
        logger.debug(f"Placed '{record.name}' as tile {tile.tile_id}.")
        self.tile_added.emit(tile.tile_id)
        self.record_placed.emit(record.name)
        return tile

    def remove_tile(self, tile_id: int) -> Optional[Tile]:
        tile = self.tiles.remove(tile_id)
        if tile is None:
            return None
        logger.info(f"Removed '{tile.record.name}' from the board.")
        self.tile_removed.emit(tile_id)
        self.record_removed.emit(tile.record.name)
        return tile

    def touch(self, tile_id: int) -> None:
        """Publish a tile mutation to the views."""
        if tile_id in self.tiles:
            self.tile_changed.emit(tile_id)

    def set_viewport(self, viewport: Viewport) -> None:
        if viewport == self.viewport:
            return
        self.viewport = viewport
        self.viewport_changed.emit(viewport)

    def reset(self) -> None:
        """Clear the board (records stay known and go back to the library)."""
        for tile in list(self.tiles):
            self.remove_tile(tile.tile_id)
        logger.info("Board has been reset.")
