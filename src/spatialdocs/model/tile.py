"""
Tile Model
==========
A tile is the on-board projection of one DocumentRecord.

Coordinate frame
----------------
* anchor (left, top): the resting frame, un-animated. Re-baselined when a
  tile is laid out, centered or docked.
* offset (tx, ty): live translation applied on top of the anchor.
* scale: applied around the tile center, after the translation.

So the rendered center is ``anchor + offset + size / 2`` and the rendered
rectangle is that center +/- ``size * scale / 2``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from spatialdocs.config import Z_PER_SCALE, DRAG_Z
from spatialdocs.model.geometry import Point, Rect, Size, Viewport, scale_for_center_y
from spatialdocs.model.records import DocumentRecord


class Edge(Enum):
    TOP = "top"
    BOTTOM = "bottom"


def z_for_scale(scale: float) -> int:
    """Stacking order of a resting tile: bigger tiles sit on top."""
    return int(round(scale * Z_PER_SCALE))


@dataclass(frozen=True)
class TileSnapshot:
    """Everything needed to put a tile back exactly where it was."""
    anchor_left: float
    anchor_top: float
    tx: float
    ty: float
    scale: float
    pinned_scale: Optional[float]
    centered: bool = False
    dock: Optional[Edge] = None


@dataclass(eq=False)
class Tile:
    tile_id: int
    record: DocumentRecord
    anchor_left: float = 0.0
    anchor_top: float = 0.0
    tx: float = 0.0
    ty: float = 0.0
    scale: float = 1.0

    dragging: bool = False
    # Scale held fixed by centering or an action drop; cleared by the next drag
    pinned_scale: Optional[float] = None
    # Resting state kept across viewport resizes; cleared once the tile is moved
    centered: bool = False
    dock: Optional[Edge] = None
    # Hidden while the viewer shows this tile's pages
    hidden: bool = False
    # An animated move is in flight (view animates instead of jumping)
    transition: bool = False

    # --- Derived geometry ---

    @property
    def size(self) -> Size:
        return Size(self.record.width, self.record.height)

    @property
    def center(self) -> Point:
        return Point(
            self.anchor_left + self.tx + self.record.width / 2.0,
            self.anchor_top + self.ty + self.record.height / 2.0,
        )

    @property
    def rendered_rect(self) -> Rect:
        return Rect.from_center(self.center, self.record.width * self.scale, self.record.height * self.scale)

    @property
    def z_order(self) -> int:
        if self.dragging:
            return DRAG_Z
        return z_for_scale(self.scale)

    # --- Mutations ---

    def layout(self, viewport: Viewport) -> bool:
        """
        Recompute scale from the current anchor + offset.

        Returns False (and leaves the tile untouched) while it is being dragged;
        the drag controller owns the transform then.
        """
        if self.dragging:
            return False
        if self.pinned_scale is not None:
            self.scale = self.pinned_scale
        else:
            self.scale = scale_for_center_y(self.center.y, self.record.width, viewport.height)
        return True

    def commit_anchor(self, new_anchor_top: float, new_anchor_left: float) -> None:
        """Re-baseline the resting frame and zero the live offset."""
        self.anchor_top = new_anchor_top
        self.anchor_left = new_anchor_left
        self.tx = 0.0
        self.ty = 0.0

    def set_transform(self, tx: float, ty: float, scale: float) -> None:
        self.tx = tx
        self.ty = ty
        self.scale = scale

    def release(self) -> None:
        """Forget pinned scale, centering and docking: the tile follows the mapper again."""
        self.pinned_scale = None
        self.centered = False
        self.dock = None

    def snapshot(self) -> TileSnapshot:
        return TileSnapshot(
            anchor_left=self.anchor_left,
            anchor_top=self.anchor_top,
            tx=self.tx,
            ty=self.ty,
            scale=self.scale,
            pinned_scale=self.pinned_scale,
            centered=self.centered,
            dock=self.dock,
        )

    def restore(self, snapshot: TileSnapshot) -> None:
        self.anchor_left = snapshot.anchor_left
        self.anchor_top = snapshot.anchor_top
        self.tx = snapshot.tx
        self.ty = snapshot.ty
        self.scale = snapshot.scale
        self.pinned_scale = snapshot.pinned_scale
        self.centered = snapshot.centered
        self.dock = snapshot.dock
