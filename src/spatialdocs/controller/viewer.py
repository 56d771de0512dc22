"""
Viewer Overlay
==============
Full-screen reading mode for one record. The pages grow out of the tile on the
board into a vertical stack, and shrink back into the tile on close.

Phases
------
CLOSED -> OPENING -> OPEN -> CLOSING -> CLOSED

* open(): the source tile's rectangle is captured before anything else moves.
  Every page starts pinned on that rectangle, so the overlay first appears
  exactly on top of the pile.
* The stacked layout needs each page's aspect ratio, which is only known once
  its image has decoded. The layout pass therefore waits until every page has
  reported loaded-or-failed (a failed page keeps its placeholder box), then
  runs one frame later and the view animates the pages into place.
* close(): the tile is read again, since it may have moved meanwhile, and the
  pages fly back onto it while fading out. Without a tile the overlay is torn
  down at once.

Invalid calls for the current phase are silent no-ops returning False.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from spatialdocs.config import (
    FRAME_MS, TRANSITION_MS, RESIZE_DEBOUNCE_MS,
    VIEWER_PAGE_WIDTH, VIEWER_SIDE_MARGIN, VIEWER_TOP_MARGIN, VIEWER_PAGE_SPACING,
    ZOOM_MIN, ZOOM_MAX, ZOOM_STEP,
)
from spatialdocs.controller.scheduler import Debouncer, Scheduler, TimerHandle
from spatialdocs.model.geometry import Rect, Viewport
from spatialdocs.model.records import DocumentRecord, PageKind, PageSource
from spatialdocs.model.state import BoardStore

logger = logging.getLogger(__name__)


class ViewerPhase(Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


class PageStatus(Enum):
    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class PageBox:
    index: int
    source: PageSource
    aspect: float  # width / height
    rect: Rect
    opacity: float = 1.0
    status: PageStatus = PageStatus.PENDING

    @property
    def settled(self) -> bool:
        return self.status is not PageStatus.PENDING


@dataclass
class ViewerState:
    phase: ViewerPhase = ViewerPhase.CLOSED
    record: Optional[DocumentRecord] = None
    source_tile_id: Optional[int] = None
    zoom: float = 1.0
    source_rect: Optional[Rect] = None
    source_scale: float = 1.0
    pages: list[PageBox] = field(default_factory=list)
    content_width: float = 0.0
    content_height: float = 0.0
    # Pages are moving; the view animates towards the page rects
    animating: bool = False

    @property
    def is_open(self) -> bool:
        return self.phase in (ViewerPhase.OPENING, ViewerPhase.OPEN)


def clamp_zoom(zoom: float) -> float:
    return min(max(zoom, ZOOM_MIN), ZOOM_MAX)


def base_page_width(viewport: Viewport) -> float:
    """Page width at zoom 1.0: fixed, but never wider than the viewport allows."""
    return max(min(VIEWER_PAGE_WIDTH, viewport.width - 2.0 * VIEWER_SIDE_MARGIN), 1.0)


def fit_zoom(viewport: Viewport) -> float:
    """Zoom at which a page exactly fills the viewport width minus the side margins."""
    available = max(viewport.width - 2.0 * VIEWER_SIDE_MARGIN, 1.0)
    return clamp_zoom(available / base_page_width(viewport))


def stack_pages(aspects: Sequence[float], viewport: Viewport, zoom: float) -> tuple[list[Rect], float, float]:
    """
    Vertical reading layout.

    Args:
        aspects: width/height of every page, in reading order.
        viewport: Current viewport.
        zoom: Zoom level (already clamped).

    Returns:
        (page rects, content width, content height). All pages share one width;
        heights follow the aspect ratios; pages are horizontally centered, or
        start at the side margin when wider than the viewport.
    """
    width = base_page_width(viewport) * zoom
    content_width = width + 2.0 * VIEWER_SIDE_MARGIN
    if len(aspects) == 0:
        return [], content_width, 2.0 * VIEWER_TOP_MARGIN

    ratios = np.asarray(aspects, dtype=float)
    ratios = np.where(ratios > 0.0, ratios, 1.0)
    heights = width / ratios
    tops = VIEWER_TOP_MARGIN + np.concatenate(([0.0], np.cumsum(heights + VIEWER_PAGE_SPACING)[:-1]))
    left = max((viewport.width - width) / 2.0, VIEWER_SIDE_MARGIN)

    rects = [Rect(left, float(top), width, float(height)) for top, height in zip(tops, heights)]
    content_height = float(tops[-1] + heights[-1]) + VIEWER_TOP_MARGIN
    return rects, content_width, content_height


class ViewerController:
    def __init__(self, store: BoardStore, scheduler: Scheduler, default_zoom: float = 1.0) -> None:
        self.store = store
        self.scheduler = scheduler
        self.default_zoom = clamp_zoom(default_zoom)
        self.state = ViewerState(zoom=self.default_zoom)
        self.last_zoom = self.default_zoom  # survives close, remembered across runs

        self._layout_handle: Optional[TimerHandle] = None
        self._phase_handle: Optional[TimerHandle] = None
        self._resize_debouncer = Debouncer(scheduler, RESIZE_DEBOUNCE_MS, self._on_resize_settled)

    @property
    def phase(self) -> ViewerPhase:
        return self.state.phase

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    # ------------------------------------------------------------------
    # Open
    # ------------------------------------------------------------------

    def open(self, tile_id: int) -> bool:
        if self.state.phase is not ViewerPhase.CLOSED:
            logger.debug("Viewer open ignored: already open.")
            return False
        tile = self.store.tiles.get(tile_id)
        if tile is None or tile.dragging:
            logger.debug(f"Viewer open ignored: tile {tile_id} unavailable.")
            return False

        # Capture before any mutation
        source_rect = tile.rendered_rect
        source_scale = tile.scale
        record = tile.record
        placeholder_aspect = tile.size.aspect

        pages = []
        for index, source in enumerate(record.page_sources()):
            # Text pages have nothing to decode
            status = PageStatus.LOADED if source.kind is PageKind.TEXT else PageStatus.PENDING
            pages.append(PageBox(index=index, source=source, aspect=placeholder_aspect, rect=source_rect, status=status))

        self.state = ViewerState(
            phase=ViewerPhase.OPENING,
            record=record,
            source_tile_id=tile_id,
            zoom=self.default_zoom,
            source_rect=source_rect,
            source_scale=source_scale,
            pages=pages,
        )
        tile.hidden = True
        self.store.touch(tile_id)
        logger.info(f"Opening viewer for '{record.name}' ({len(pages)} page(s)).")
        self._publish()
        self._schedule_layout_if_settled()
        return True

    def page_loaded(self, index: int, natural_width: float, natural_height: float) -> None:
        page = self._page(index)
        if page is None or page.settled:
            return
        if natural_width > 0.0 and natural_height > 0.0:
            page.aspect = natural_width / natural_height
        page.status = PageStatus.LOADED
        self._schedule_layout_if_settled()

    def page_failed(self, index: int) -> None:
        page = self._page(index)
        if page is None or page.settled:
            return
        logger.warning(f"Page {index} failed to load, keeping its placeholder box.")
        page.status = PageStatus.FAILED
        self._schedule_layout_if_settled()

    def _schedule_layout_if_settled(self) -> None:
        if self.state.phase is not ViewerPhase.OPENING or self._layout_handle is not None:
            return
        if all(page.settled for page in self.state.pages):
            # Give the view one frame to paint the pinned pages first
            self._layout_handle = self.scheduler.call_later(FRAME_MS, self._run_opening_layout)

    def _run_opening_layout(self) -> None:
        self._layout_handle = None
        if self.state.phase is not ViewerPhase.OPENING:
            return
        self._apply_layout()
        self.state.animating = True
        self._publish()
        self._phase_handle = self.scheduler.call_later(TRANSITION_MS, self.animation_finished)

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom(self, delta: float = ZOOM_STEP) -> Optional[float]:
        return self.set_zoom(self.state.zoom + delta)

    def set_zoom(self, level: float) -> Optional[float]:
        if self.state.phase is not ViewerPhase.OPEN:
            return None
        self.state.zoom = clamp_zoom(level)
        self.last_zoom = self.state.zoom
        self._apply_layout()
        self._publish()
        return self.state.zoom

    def fit_to_width(self) -> Optional[float]:
        return self.set_zoom(fit_zoom(self.store.viewport))

    def resize(self) -> None:
        """Viewport changed; relayout once the resize burst is over."""
        if self.state.phase is ViewerPhase.OPEN:
            self._resize_debouncer.trigger()

    def _on_resize_settled(self) -> None:
        if self.state.phase is not ViewerPhase.OPEN:
            return
        self._apply_layout()
        self._publish()

    # ------------------------------------------------------------------
    # Close
    # ------------------------------------------------------------------

    def close(self) -> bool:
        if not self.state.is_open:
            logger.debug("Viewer close ignored: not open.")
            return False
        self._cancel_timers()

        tile = self.store.tiles.get(self.state.source_tile_id)
        if tile is None:
            logger.info("Source tile is gone, closing viewer without animation.")
            self._teardown()
            return True

        # The tile may have moved since open: fly back to where it is now
        target = tile.rendered_rect
        for page in self.state.pages:
            page.rect = target
            page.opacity = 0.0
        self.state.phase = ViewerPhase.CLOSING
        self.state.animating = True
        self._publish()
        self._phase_handle = self.scheduler.call_later(TRANSITION_MS, self.animation_finished)
        return True

    def animation_finished(self) -> None:
        """The page animation ended (view notification or fallback timer)."""
        if self._phase_handle is not None:
            self._phase_handle.cancel()
            self._phase_handle = None
        if self.state.phase is ViewerPhase.OPENING and self.state.animating:
            self.state.phase = ViewerPhase.OPEN
            self.state.animating = False
            logger.debug("Viewer open.")
            self._publish()
        elif self.state.phase is ViewerPhase.CLOSING:
            self._teardown()

    def _teardown(self) -> None:
        self._cancel_timers()
        tile = self.store.tiles.get(self.state.source_tile_id)
        if tile is not None:
            tile.hidden = False
            self.store.touch(tile.tile_id)
        self.state = ViewerState(zoom=self.default_zoom)
        logger.info("Viewer closed.")
        self._publish()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_layout(self) -> None:
        pages = self.state.pages
        rects, content_width, content_height = stack_pages(
            [page.aspect for page in pages], self.store.viewport, self.state.zoom
        )
        for page, rect in zip(pages, rects):
            page.rect = rect
            page.opacity = 1.0
        self.state.content_width = content_width
        self.state.content_height = content_height

    def _page(self, index: int) -> Optional[PageBox]:
        if self.state.phase is not ViewerPhase.OPENING:
            return None
        if 0 <= index < len(self.state.pages):
            return self.state.pages[index]
        return None

    def _cancel_timers(self) -> None:
        for handle in (self._layout_handle, self._phase_handle):
            if handle is not None:
                handle.cancel()
        self._layout_handle = None
        self._phase_handle = None
        self._resize_debouncer.cancel()

    def _publish(self) -> None:
        self.store.viewer_changed.emit(self.state)
