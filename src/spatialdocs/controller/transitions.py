"""
Animated tile moves.

While `Tile.transition` is set the view animates the tile to its new transform
over TRANSITION_MS instead of jumping. The flag is cleared by whichever comes
first: the view's "animation finished" notification or a fallback timer of the
same duration. Each tile has at most one pending cleanup; starting another
transition or a drag on the tile cancels it.
"""
from __future__ import annotations

import logging

from spatialdocs.config import TRANSITION_MS
from spatialdocs.controller.scheduler import Scheduler, TimerHandle
from spatialdocs.model.state import BoardStore

logger = logging.getLogger(__name__)


class TransitionManager:
    def __init__(self, store: BoardStore, scheduler: Scheduler, duration_ms: int = TRANSITION_MS) -> None:
        self.store = store
        self.scheduler = scheduler
        self.duration_ms = duration_ms
        self._pending: dict[int, TimerHandle] = {}

    def begin(self, tile_id: int) -> None:
        tile = self.store.tiles.get(tile_id)
        if tile is None:
            return
        self._cancel_timer(tile_id)
        tile.transition = True
        self._pending[tile_id] = self.scheduler.call_later(self.duration_ms, lambda: self.finish(tile_id))

    def finish(self, tile_id: int) -> None:
        """Animation done (or superseded): drop the transition style."""
        self._cancel_timer(tile_id)
        tile = self.store.tiles.get(tile_id)
        if tile is None or not tile.transition:
            return
        tile.transition = False
        self.store.touch(tile_id)

    def is_pending(self, tile_id: int) -> bool:
        return tile_id in self._pending

    def _cancel_timer(self, tile_id: int) -> None:
        handle = self._pending.pop(tile_id, None)
        if handle is not None:
            handle.cancel()
