"""
Drag Controller
===============
Pointer-gesture session that moves a tile while its scale keeps changing with
its height on the board.

The invariant of a gesture is that the point of the tile grabbed at gesture
start stays under the pointer. That point is stored once, as an offset from the
tile center in *unscaled* tile units:

    cursor_offset = (pointer - center) / scale

and every frame the tile center is placed at

    center = pointer - cursor_offset * scale

The catch is that `scale` depends on the center, which depends on `scale`.
Each move therefore does one fixed-point step:

1. estimate: advance the live offset by the raw pointer delta and take the
   scale at that estimated center (scale_for_center_y);
2. solve: place the center exactly from the pointer with that scale.

One step per frame is enough at interactive rates; the grabbed point is exact
by construction, only the scale lags the true fixed point by one frame.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from spatialdocs.controller.transitions import TransitionManager
from spatialdocs.model.geometry import Point, scale_for_center_y
from spatialdocs.model.state import BoardStore

logger = logging.getLogger(__name__)


class DragPhase(Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass
class DragSession:
    tile_id: int
    start_pointer: Point
    cursor_offset: Point  # pointer - center at gesture start, in unscaled units
    previous_scale: float
    last_pointer: Point
    moved: bool = False


class DragController:
    def __init__(self, store: BoardStore, transitions: TransitionManager) -> None:
        self.store = store
        self.transitions = transitions
        self.session: Optional[DragSession] = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.ACTIVE if self.session is not None else DragPhase.IDLE

    @property
    def tile_id(self) -> Optional[int]:
        return self.session.tile_id if self.session is not None else None

    def start(self, tile_id: int, pointer: Point) -> bool:
        if self.session is not None:
            logger.debug("Drag start ignored: a drag is already active.")
            return False
        tile = self.store.tiles.get(tile_id)
        if tile is None:
            logger.debug(f"Drag start ignored: no tile {tile_id}.")
            return False

        # The new gesture owns the transform from now on
        self.transitions.finish(tile_id)

        # Use the scale currently rendered, not a recomputed one, so nothing jumps
        scale = tile.scale if tile.scale > 0.0 else 1.0
        cursor_offset = (pointer - tile.center) / scale

        tile.dragging = True
        self.session = DragSession(
            tile_id=tile_id,
            start_pointer=pointer,
            cursor_offset=cursor_offset,
            previous_scale=scale,
            last_pointer=pointer,
        )
        logger.debug(f"Drag started on tile {tile_id} at ({pointer.x:.1f}, {pointer.y:.1f}).")
        self.store.touch(tile_id)
        return True

    def move(self, pointer: Point, delta: Optional[Point] = None) -> bool:
        session = self.session
        if session is None:
            return False
        tile = self.store.tiles.get(session.tile_id)
        if tile is None:
            self.session = None
            return False

        if not session.moved:
            # A press and release in place (the first half of a double click)
            # leaves a centered or docked tile as it is
            if pointer == session.start_pointer:
                return False
            session.moved = True
            tile.release()

        if delta is None:
            delta = pointer - session.last_pointer

        width = tile.record.width
        height = tile.record.height

        # 1. estimate
        estimated_center_y = tile.anchor_top + tile.ty + delta.y + height / 2.0
        new_scale = scale_for_center_y(estimated_center_y, width, self.store.viewport.height)

        # 2. solve
        new_center = pointer - session.cursor_offset * new_scale
        tx = new_center.x - tile.anchor_left - width / 2.0
        ty = new_center.y - tile.anchor_top - height / 2.0

        tile.set_transform(tx, ty, new_scale)
        session.previous_scale = new_scale
        session.last_pointer = pointer
        self.store.touch(tile.tile_id)
        return True

    def end(self) -> Optional[int]:
        """Finish the gesture. Returns the id of the released tile."""
        session = self.session
        if session is None:
            return None
        self.session = None
        tile = self.store.tiles.get(session.tile_id)
        if tile is None:
            return None
        tile.dragging = False
        logger.debug(f"Drag ended on tile {session.tile_id}.")
        return session.tile_id

    def grabbed_point(self) -> Optional[Point]:
        """World position of the point grabbed at gesture start."""
        session = self.session
        if session is None:
            return None
        tile = self.store.tiles.get(session.tile_id)
        if tile is None:
            return None
        return tile.center + session.cursor_offset * tile.scale
