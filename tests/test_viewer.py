"""Tests for the reading overlay state machine and its page layout."""

import pytest

from spatialdocs.config import FRAME_MS, RESIZE_DEBOUNCE_MS, TRANSITION_MS, ZOOM_MAX, ZOOM_MIN
from spatialdocs.controller.viewer import (
    PageStatus, ViewerPhase, base_page_width, clamp_zoom, fit_zoom, stack_pages,
)
from spatialdocs.model.geometry import Viewport
from spatialdocs.model.records import RecordKind


def open_fully(board, tile_id, scheduler):
    """Open the viewer and let every page load and the animation end."""
    assert board.viewer.open(tile_id)
    for page in board.viewer.state.pages:
        board.viewer.page_loaded(page.index, 600.0, 800.0)
    scheduler.advance(FRAME_MS + TRANSITION_MS)
    assert board.viewer.phase is ViewerPhase.OPEN


class TestStackPages:
    def test_vertical_stack(self):
        rects, content_width, content_height = stack_pages([0.5, 1.0], Viewport(1000.0, 1000.0), 1.0)
        assert [r.width for r in rects] == [800.0, 800.0]
        assert [r.height for r in rects] == pytest.approx([1600.0, 800.0])
        assert [r.top for r in rects] == pytest.approx([60.0, 60.0 + 1600.0 + 24.0])
        assert rects[0].left == pytest.approx(100.0)
        assert content_width == pytest.approx(880.0)
        assert content_height == pytest.approx(60.0 + 1600.0 + 24.0 + 800.0 + 60.0)

    def test_wide_pages_start_at_margin(self):
        rects, _, _ = stack_pages([1.0], Viewport(1000.0, 1000.0), 2.0)
        assert rects[0].left == 40.0

    def test_empty(self):
        rects, _, _ = stack_pages([], Viewport(1000.0, 1000.0), 1.0)
        assert rects == []

    def test_narrow_viewport_limits_base_width(self):
        assert base_page_width(Viewport(600.0, 800.0)) == 520.0
        assert base_page_width(Viewport(1600.0, 800.0)) == 800.0

    def test_clamp_zoom(self):
        assert clamp_zoom(0.1) == ZOOM_MIN
        assert clamp_zoom(9.0) == ZOOM_MAX
        assert clamp_zoom(1.2) == 1.2

    @pytest.mark.parametrize("width", [600.0, 1000.0, 1400.0])
    def test_fit_zoom_fills_width(self, width):
        viewport = Viewport(width, 800.0)
        rects, _, _ = stack_pages([0.7], viewport, fit_zoom(viewport))
        assert rects[0].width == pytest.approx(width - 80.0)


class TestOpening:
    def test_pages_start_on_source_rect(self, board, tile_ids):
        tile = board.store.tiles.get(tile_ids["invoice"])
        source = tile.rendered_rect
        assert board.viewer.open(tile.tile_id)
        state = board.viewer.state
        assert state.phase is ViewerPhase.OPENING
        assert state.source_rect == source
        assert all(page.rect == source for page in state.pages)
        assert tile.hidden

    def test_waits_for_every_page(self, board, tile_ids, scheduler):
        board.viewer.open(tile_ids["invoice"])
        board.viewer.page_loaded(0, 600.0, 800.0)
        scheduler.advance(FRAME_MS + TRANSITION_MS)
        assert board.viewer.phase is ViewerPhase.OPENING
        assert not board.viewer.state.animating

        board.viewer.page_failed(1)
        scheduler.advance(FRAME_MS)
        assert board.viewer.state.animating
        scheduler.advance(TRANSITION_MS)
        assert board.viewer.phase is ViewerPhase.OPEN

    def test_failed_page_keeps_placeholder_aspect(self, board, tile_ids, scheduler):
        tile = board.store.tiles.get(tile_ids["invoice"])
        board.viewer.open(tile.tile_id)
        board.viewer.page_loaded(0, 1000.0, 500.0)
        board.viewer.page_failed(1)
        pages = board.viewer.state.pages
        assert pages[0].aspect == pytest.approx(2.0)
        assert pages[1].aspect == pytest.approx(tile.size.aspect)
        assert pages[1].status is PageStatus.FAILED

    def test_view_notification_ends_opening(self, board, tile_ids, scheduler):
        board.viewer.open(tile_ids["invoice"])
        for page in board.viewer.state.pages:
            board.viewer.page_loaded(page.index, 600.0, 800.0)
        scheduler.advance(FRAME_MS)
        board.viewer.animation_finished()
        assert board.viewer.phase is ViewerPhase.OPEN
        assert scheduler.pending == []

    def test_text_record_lays_out_without_loading(self, board, scheduler, record_factory):
        board.store.place_record(record_factory(9, "pasted", pages=[], kind=RecordKind.PASTED_TEXT, text="hello"))
        tile = board.store.tiles.by_name("pasted")
        board.viewer.open(tile.tile_id)
        assert len(board.viewer.state.pages) == 1
        scheduler.advance(FRAME_MS + TRANSITION_MS)
        assert board.viewer.phase is ViewerPhase.OPEN

    def test_second_open_ignored(self, board, tile_ids):
        assert board.viewer.open(tile_ids["invoice"])
        assert not board.viewer.open(tile_ids["lease"])
        assert board.viewer.state.record.name == "invoice"

    def test_phase_sequence(self, board, tile_ids, scheduler, spy):
        changes = spy(board.store.viewer_changed)
        open_fully(board, tile_ids["invoice"], scheduler)
        board.viewer.close()
        scheduler.advance(TRANSITION_MS)
        phases = [args[0].phase for args in changes.calls]
        # Each published state is the live object; compare the distinct steps
        assert phases[-1] is ViewerPhase.CLOSED
        assert len(changes) >= 4


class TestZoom:
    def test_zoom_only_when_open(self, board, tile_ids):
        assert board.viewer.zoom(0.5) is None
        board.viewer.open(tile_ids["invoice"])
        assert board.viewer.zoom(0.5) is None

    def test_zoom_clamped(self, board, tile_ids, scheduler):
        open_fully(board, tile_ids["invoice"], scheduler)
        assert board.viewer.set_zoom(10.0) == ZOOM_MAX
        assert board.viewer.set_zoom(0.0) == ZOOM_MIN
        assert board.viewer.zoom(0.25) == pytest.approx(ZOOM_MIN + 0.25)

    def test_zoom_rescales_pages(self, board, tile_ids, scheduler):
        open_fully(board, tile_ids["invoice"], scheduler)
        width = board.viewer.state.pages[0].rect.width
        board.viewer.set_zoom(2.0)
        assert board.viewer.state.pages[0].rect.width == pytest.approx(2.0 * width)

    def test_fit_to_width(self, board, tile_ids, scheduler):
        board.resize(Viewport(600.0, 1000.0))
        open_fully(board, tile_ids["invoice"], scheduler)
        board.viewer.fit_to_width()
        assert board.viewer.state.pages[0].rect.width == pytest.approx(600.0 - 80.0)
        assert board.viewer.last_zoom == board.viewer.state.zoom

    def test_explicit_zoom_matches_fit_when_fit_is_one(self, board, tile_ids, scheduler):
        viewport = Viewport(880.0, 1000.0)
        assert fit_zoom(viewport) == pytest.approx(1.0)
        board.resize(viewport)
        open_fully(board, tile_ids["invoice"], scheduler)
        board.viewer.set_zoom(0.4)
        board.viewer.set_zoom(1.0)
        width = board.viewer.state.pages[0].rect.width
        board.viewer.fit_to_width()
        assert board.viewer.state.pages[0].rect.width == pytest.approx(width)
        assert width == pytest.approx(880.0 - 80.0)

    def test_last_zoom_survives_close(self, board, tile_ids, scheduler):
        open_fully(board, tile_ids["invoice"], scheduler)
        board.viewer.set_zoom(1.5)
        board.viewer.close()
        scheduler.advance(TRANSITION_MS)
        assert board.viewer.last_zoom == 1.5
        assert board.viewer.state.zoom == board.viewer.default_zoom


class TestResize:
    def test_relayout_is_debounced(self, board, tile_ids, scheduler):
        open_fully(board, tile_ids["invoice"], scheduler)
        left = board.viewer.state.pages[0].rect.left
        for width in (900.0, 850.0, 800.0):
            board.resize(Viewport(width, 1000.0))
            scheduler.advance(RESIZE_DEBOUNCE_MS // 2)
        assert board.viewer.state.pages[0].rect.left == left
        scheduler.advance(RESIZE_DEBOUNCE_MS)
        assert board.viewer.state.pages[0].rect.left == pytest.approx((800.0 - 720.0) / 2.0)


class TestClosing:
    def test_round_trip(self, board, tile_ids, scheduler):
        tile = board.store.tiles.get(tile_ids["invoice"])
        open_fully(board, tile.tile_id, scheduler)
        assert board.viewer.close()
        state = board.viewer.state
        assert state.phase is ViewerPhase.CLOSING
        assert all(page.rect == tile.rendered_rect for page in state.pages)
        assert all(page.opacity == 0.0 for page in state.pages)
        scheduler.advance(TRANSITION_MS)
        assert board.viewer.phase is ViewerPhase.CLOSED
        assert not tile.hidden

    def test_close_targets_moved_tile(self, board, tile_ids, scheduler):
        tile = board.store.tiles.get(tile_ids["invoice"])
        open_fully(board, tile.tile_id, scheduler)
        tile.commit_anchor(400.0, 300.0)
        tile.layout(board.store.viewport)
        board.viewer.close()
        assert board.viewer.state.pages[0].rect == tile.rendered_rect

    def test_close_during_opening(self, board, tile_ids, scheduler):
        board.viewer.open(tile_ids["invoice"])
        assert board.viewer.close()
        scheduler.run_all()
        assert board.viewer.phase is ViewerPhase.CLOSED

    def test_close_without_tile(self, board, tile_ids, scheduler):
        open_fully(board, tile_ids["invoice"], scheduler)
        board.store.remove_tile(tile_ids["invoice"])
        assert board.viewer.close()
        assert board.viewer.phase is ViewerPhase.CLOSED
        assert scheduler.pending == []

    def test_close_when_closed(self, board):
        assert not board.viewer.close()
