"""
Action Targets
==============
Secondary outcome of a drag: releasing a tile over one of its record's action
targets (e.g. "Send to Slack channel").

* While dragging, the action tray slides in when the pointer is in the
  rightmost quarter of the viewport and the dragged record has any actions.
  This is presentation only; it never touches the drag math.
* Dropping on a target snapshots the tile, shrinks it into a fixed horizontal
  band and raises a confirmation prompt.
* The prompt resolves to CANCEL (restore the snapshot exactly), CONFIRM_KEEP
  (leave the tile shrunk) or CONFIRM_REMOVE (take the tile off the board, like
  dropping it on the library).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from spatialdocs.config import (
    ACTION_ZONE_FRACTION, ACTION_DROP_SCALE, ACTION_BAND_X_FRACTION,
    ACTION_TARGET_WIDTH, ACTION_TARGET_HEIGHT, ACTION_TARGET_SPACING,
)
from spatialdocs.controller.transitions import TransitionManager
from spatialdocs.model.geometry import Point, Rect
from spatialdocs.model.state import BoardStore
from spatialdocs.model.tile import TileSnapshot

logger = logging.getLogger(__name__)


class ActionOutcome(Enum):
    CANCEL = "cancel"
    CONFIRM_KEEP = "confirm-keep"
    CONFIRM_REMOVE = "confirm-remove"


@dataclass(frozen=True)
class ActionTarget:
    label: str
    rect: Rect


@dataclass(frozen=True)
class PendingActionDrop:
    tile_id: int
    action_label: str
    record_label: str
    snapshot: TileSnapshot


class ActionController:
    def __init__(self, store: BoardStore, transitions: TransitionManager) -> None:
        self.store = store
        self.transitions = transitions
        self.tray_visible: bool = False
        self.pending: Optional[PendingActionDrop] = None

    # --- Tray ---

    def targets_for(self, tile_id: Optional[int]) -> list[ActionTarget]:
        """Targets of a tile's record, stacked and centered in the rightmost quarter."""
        tile = self.store.tiles.get(tile_id)
        if tile is None or not tile.record.actions:
            return []
        viewport = self.store.viewport
        zone_left = viewport.width * ACTION_ZONE_FRACTION
        zone_width = viewport.width - zone_left
        left = zone_left + (zone_width - ACTION_TARGET_WIDTH) / 2.0

        count = len(tile.record.actions)
        total = count * ACTION_TARGET_HEIGHT + (count - 1) * ACTION_TARGET_SPACING
        top = (viewport.height - total) / 2.0
        targets = []
        for label in tile.record.actions:
            targets.append(ActionTarget(label, Rect(left, top, ACTION_TARGET_WIDTH, ACTION_TARGET_HEIGHT)))
            top += ACTION_TARGET_HEIGHT + ACTION_TARGET_SPACING
        return targets

    def in_zone(self, pointer: Point) -> bool:
        return pointer.x >= self.store.viewport.width * ACTION_ZONE_FRACTION

    def update_tray(self, tile_id: Optional[int], pointer: Point) -> bool:
        visible = self.in_zone(pointer) and bool(self.targets_for(tile_id))
        self._set_tray(visible)
        return visible

    def hide_tray(self) -> None:
        self._set_tray(False)

    def target_at(self, tile_id: int, pointer: Point) -> Optional[ActionTarget]:
        if not self.tray_visible:
            return None
        for target in self.targets_for(tile_id):
            if target.rect.contains(pointer):
                return target
        return None

    def _set_tray(self, visible: bool) -> None:
        if visible != self.tray_visible:
            self.tray_visible = visible
            self.store.tray_changed.emit(visible)

    # --- Drop & confirmation ---

    def drop(self, tile_id: int, target: ActionTarget) -> bool:
        tile = self.store.tiles.get(tile_id)
        if tile is None or tile.dragging:
            return False
        if self.pending is not None:
            logger.debug(f"Pending action on tile {self.pending.tile_id} superseded by a new drop.")
            self.pending = None

        snapshot = tile.snapshot()
        band_x = self.store.viewport.width * ACTION_BAND_X_FRACTION
        tile.tx = band_x - tile.anchor_left - tile.record.width / 2.0
        tile.release()
        tile.pinned_scale = ACTION_DROP_SCALE
        tile.scale = ACTION_DROP_SCALE
        self.transitions.begin(tile_id)
        self.store.touch(tile_id)

        self.pending = PendingActionDrop(
            tile_id=tile_id,
            action_label=target.label,
            record_label=tile.record.label,
            snapshot=snapshot,
        )
        logger.info(f"'{tile.record.label}' dropped on action '{target.label}'.")
        self.store.action_prompt.emit(self.pending)
        return True

    def resolve(self, outcome: ActionOutcome) -> bool:
        pending = self.pending
        if pending is None:
            return False
        self.pending = None
        tile = self.store.tiles.get(pending.tile_id)
        logger.info(f"Action '{pending.action_label}' on '{pending.record_label}': {outcome.value}.")

        if outcome is ActionOutcome.CANCEL:
            if tile is not None:
                tile.restore(pending.snapshot)
                self.transitions.begin(tile.tile_id)
                self.store.touch(tile.tile_id)
            return True

        self.store.action_confirmed.emit(pending.action_label, pending.record_label)
        if outcome is ActionOutcome.CONFIRM_REMOVE and tile is not None:
            self.store.remove_tile(tile.tile_id)
        return True

    def supersede(self, tile_id: int) -> None:
        """A new gesture on the tile wins over its pending restore."""
        if self.pending is not None and self.pending.tile_id == tile_id:
            logger.debug(f"Pending action on tile {tile_id} dropped by a new drag.")
            self.pending = None
