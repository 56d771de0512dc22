"""
Docking / Centering Transitions

Double activation on a tile centers it at full size and sends every other tile
to the nearer horizontal edge as an icon. The resting frame of each tile is
rewritten immediately; the movement itself is only animated by the view.
"""
from __future__ import annotations

import logging
from typing import Optional

from spatialdocs.config import MAX_SCALE
from spatialdocs.controller.transitions import TransitionManager
from spatialdocs.model.geometry import icon_scale
from spatialdocs.model.state import BoardStore
from spatialdocs.model.tile import Edge, Tile

logger = logging.getLogger(__name__)


def nearer_edge(center_y: float, viewport_height: float) -> Edge:
    """TOP only when strictly nearer to the top edge."""
    return Edge.TOP if center_y < viewport_height - center_y else Edge.BOTTOM


class DockingController:
    def __init__(self, store: BoardStore, transitions: TransitionManager) -> None:
        self.store = store
        self.transitions = transitions

    def center_tile(self, tile_id: int, animate: bool = True) -> bool:
        tile = self._idle_tile(tile_id)
        if tile is None:
            return False
        viewport = self.store.viewport
        tile.commit_anchor(
            (viewport.height - tile.record.height) / 2.0,
            (viewport.width - tile.record.width) / 2.0,
        )
        tile.pinned_scale = MAX_SCALE
        tile.scale = MAX_SCALE
        tile.centered = True
        tile.dock = None
        if animate:
            self.transitions.begin(tile_id)
        self.store.touch(tile_id)
        return True

    def dock_tile(self, tile_id: int, edge: Optional[Edge] = None, animate: bool = True) -> Optional[Edge]:
        """
        Snap a tile to an edge as an icon, half of it past the edge.

        The tile keeps its horizontal center. Its vertical center is put on the
        edge line itself, which is where scale_for_center_y yields the icon
        scale too, so relayout leaves a docked tile alone.
        """
        tile = self._idle_tile(tile_id)
        if tile is None:
            return None
        viewport = self.store.viewport
        if edge is None:
            edge = nearer_edge(tile.center.y, viewport.height)

        center_x = tile.center.x
        center_y = 0.0 if edge is Edge.TOP else viewport.height
        tile.commit_anchor(
            center_y - tile.record.height / 2.0,
            center_x - tile.record.width / 2.0,
        )
        tile.pinned_scale = None
        tile.scale = icon_scale(tile.record.width)
        tile.centered = False
        tile.dock = edge
        if animate:
            self.transitions.begin(tile_id)
        self.store.touch(tile_id)
        return edge

    def focus(self, tile_id: int) -> Optional[dict[int, Edge]]:
        """Center `tile_id`, dock all other tiles. Returns where each was docked, None if nothing moved."""
        if not self.center_tile(tile_id):
            return None
        docked: dict[int, Edge] = {}
        for other in self.store.tiles:
            if other.tile_id == tile_id:
                continue
            edge = self.dock_tile(other.tile_id)
            if edge is not None:
                docked[other.tile_id] = edge
        logger.info(f"Focused tile {tile_id}, docked {len(docked)} other tile(s).")
        return docked

    def is_centered(self, tile_id: int) -> bool:
        tile = self.store.tiles.get(tile_id)
        return tile is not None and tile.centered and not tile.dragging

    def recommit(self, tile_id: int) -> bool:
        """Put a centered or docked tile back on its spot after the viewport changed size."""
        tile = self.store.tiles.get(tile_id)
        if tile is None:
            return False
        if tile.centered:
            return self.center_tile(tile_id, animate=False)
        if tile.dock is not None:
            return self.dock_tile(tile_id, tile.dock, animate=False) is not None
        return False

    def _idle_tile(self, tile_id: int) -> Optional[Tile]:
        tile = self.store.tiles.get(tile_id)
        if tile is None:
            return None
        if tile.dragging:
            logger.debug(f"Tile {tile_id} is being dragged, transition skipped.")
            return None
        return tile
