"""
Board Controller
================
Single entry point for the view: it routes pointer gestures, double
activations, keys and resizes to the specialised controllers and enforces who
may write the shared tile state at any moment.

Ownership rules
---------------
* A tile being dragged belongs to the drag; transitions skip it.
* While the viewer is open the board ignores new drags and double activations,
  and the input overlay refuses to open.
* Escape closes the topmost overlay (the input overlay sits above the
  viewer); with none open it cancels a pending action prompt.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Iterable, Optional

from spatialdocs.controller.actions import ActionController, ActionOutcome
from spatialdocs.controller.docking import DockingController
from spatialdocs.controller.drag import DragController
from spatialdocs.controller.scheduler import Scheduler
from spatialdocs.controller.transitions import TransitionManager
from spatialdocs.controller.viewer import ViewerController
from spatialdocs.model.geometry import Point, Rect, Viewport
from spatialdocs.model.records import DocumentRecord
from spatialdocs.model.state import BoardStore

logger = logging.getLogger(__name__)


class ReleaseOutcome(Enum):
    NONE = "none"
    SETTLED = "settled"
    ACTION_DROP = "action-drop"
    LIBRARY = "library"


class Board:
    def __init__(self, store: BoardStore, scheduler: Scheduler, default_zoom: float = 1.0) -> None:
        self.store = store
        self.scheduler = scheduler
        self.transitions = TransitionManager(store, scheduler)
        self.drag = DragController(store, self.transitions)
        self.docking = DockingController(store, self.transitions)
        self.viewer = ViewerController(store, scheduler, default_zoom=default_zoom)
        self.actions = ActionController(store, self.transitions)

        self.library_rect: Optional[Rect] = None
        self._input_open: bool = False

        self.store.tile_removed.connect(self._on_tile_removed)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def populate(self, records: Iterable[DocumentRecord]) -> None:
        """Register records and place every one of them at its stored position."""
        records = list(records)
        self.store.load_records(records)
        for record in records:
            self.store.place_record(self.store.records[record.name])

    def reload(self, records: Iterable[DocumentRecord]) -> bool:
        """Replace every known record (e.g. after importing a data file)."""
        if self.viewer.is_open or self.drag.session is not None:
            logger.debug("Reload refused: the board is busy.")
            return False
        self.store.reset()
        self.store.records.clear()
        self.populate(records)
        return True

    def place_record(
        self,
        name: str,
        anchor_left: Optional[float] = None,
        anchor_top: Optional[float] = None,
    ) -> Optional[int]:
        """Bring a library record (back) onto the board."""
        record = self.store.records.get(name)
        if record is None:
            logger.debug(f"Unknown record '{name}'.")
            return None
        tile = self.store.place_record(record, anchor_left, anchor_top)
        return tile.tile_id if tile is not None else None

    def set_library_rect(self, rect: Optional[Rect]) -> None:
        self.library_rect = rect

    def resize(self, viewport: Viewport) -> None:
        self.store.set_viewport(viewport)
        # Centered and docked tiles follow the viewport center and edges
        for tile in self.store.tiles:
            self.docking.recommit(tile.tile_id)
        self.relayout()
        self.viewer.resize()

    def relayout(self) -> None:
        for tile in self.store.tiles:
            if tile.layout(self.store.viewport):
                self.store.touch(tile.tile_id)

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------

    def pointer_press(self, tile_id: int, pointer: Point) -> bool:
        if self.viewer.is_open:
            return False
        self.actions.supersede(tile_id)
        return self.drag.start(tile_id, pointer)

    def pointer_move(self, pointer: Point, delta: Optional[Point] = None) -> bool:
        tile_id = self.drag.tile_id
        if not self.drag.move(pointer, delta):
            return False
        self.actions.update_tray(tile_id, pointer)
        return True

    def pointer_release(self, pointer: Point) -> ReleaseOutcome:
        tile_id = self.drag.tile_id
        target = self.actions.target_at(tile_id, pointer) if tile_id is not None else None
        tile_id = self.drag.end()
        self.actions.hide_tray()
        if tile_id is None:
            return ReleaseOutcome.NONE

        if target is not None and self.actions.drop(tile_id, target):
            return ReleaseOutcome.ACTION_DROP

        if self.library_rect is not None and self.library_rect.contains(pointer):
            self.store.remove_tile(tile_id)
            return ReleaseOutcome.LIBRARY

        # Plain settle: stacking follows the settled scale again
        tile = self.store.tiles.get(tile_id)
        if tile is not None:
            tile.layout(self.store.viewport)
            self.store.touch(tile_id)
        return ReleaseOutcome.SETTLED

    def double_activate(self, tile_id: int) -> bool:
        """Center a tile (docking the rest); on an already centered tile, read it."""
        if self.viewer.is_open or self.drag.session is not None:
            return False
        if self.docking.is_centered(tile_id):
            return self.open_viewer(tile_id)
        return self.docking.focus(tile_id) is not None

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------

    def open_viewer(self, tile_id: int) -> bool:
        return self.viewer.open(tile_id)

    def open_input_overlay(self) -> bool:
        if self.viewer.is_open:
            logger.debug("Input overlay refused: viewer is open.")
            return False
        if self._input_open:
            return False
        self._input_open = True
        self.store.input_overlay_changed.emit(True)
        return True

    def close_input_overlay(self) -> bool:
        if not self._input_open:
            return False
        self._input_open = False
        self.store.input_overlay_changed.emit(False)
        return True

    @property
    def input_overlay_open(self) -> bool:
        return self._input_open

    def escape(self) -> bool:
        """Close whatever is on top. Returns False when there was nothing to close."""
        if self._input_open:
            return self.close_input_overlay()
        if self.viewer.is_open:
            return self.viewer.close()
        if self.actions.pending is not None:
            return self.actions.resolve(ActionOutcome.CANCEL)
        return False

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def snapshot(self) -> list[dict[str, str]]:
        """Documents on the board, as handed to the chat assistant."""
        result = []
        for tile in sorted(self.store.tiles, key=lambda t: t.record.id):
            record = tile.record
            result.append({
                "name": record.name,
                "label": record.label or record.name,
                "text": record.text or "",
            })
        return result

    def layout_snapshot(self) -> list[DocumentRecord]:
        """All known records, with on-board ones carrying their current resting position."""
        records = []
        for record in sorted(self.store.records.values(), key=lambda r: r.id):
            tile = self.store.tiles.by_name(record.name)
            if tile is not None:
                record = replace(record, x=tile.anchor_left + tile.tx, y=tile.anchor_top + tile.ty)
            records.append(record)
        return records

    def _on_tile_removed(self, tile_id: int) -> None:
        if self.drag.tile_id == tile_id:
            self.drag.session = None
            self.actions.hide_tray()
        self.actions.supersede(tile_id)
        self.transitions.finish(tile_id)
