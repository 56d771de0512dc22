"""Tests for centering a tile and docking the others as icons."""

import pytest

from spatialdocs.config import MAX_SCALE, TRANSITION_MS
from spatialdocs.controller.board import Board, ReleaseOutcome
from spatialdocs.controller.docking import Edge, nearer_edge
from spatialdocs.model.geometry import Point, Viewport, icon_scale, scale_for_center_y


class TestNearerEdge:
    def test_top_and_bottom(self):
        assert nearer_edge(100.0, 1000.0) is Edge.TOP
        assert nearer_edge(900.0, 1000.0) is Edge.BOTTOM

    def test_tie_goes_to_bottom(self):
        assert nearer_edge(500.0, 1000.0) is Edge.BOTTOM


class TestFocus:
    def test_centers_target_at_max_scale(self, board, tile_ids):
        board.docking.focus(tile_ids["notes"])
        tile = board.store.tiles.get(tile_ids["notes"])
        assert tile.center == Point(500.0, 500.0)
        assert tile.scale == MAX_SCALE
        assert board.docking.is_centered(tile.tile_id)

    def test_docks_others_on_nearer_edge(self, board, tile_ids):
        docked = board.docking.focus(tile_ids["notes"])
        assert docked == {tile_ids["invoice"]: Edge.TOP, tile_ids["lease"]: Edge.BOTTOM}

        invoice = board.store.tiles.get(tile_ids["invoice"])
        assert invoice.center == Point(200.0, 0.0)  # horizontal position kept
        assert invoice.scale == pytest.approx(icon_scale(200.0))
        lease = board.store.tiles.get(tile_ids["lease"])
        assert lease.center.y == 1000.0

    def test_docked_icon_half_past_the_edge(self, board, tile_ids):
        board.docking.focus(tile_ids["notes"])
        rect = board.store.tiles.get(tile_ids["invoice"]).rendered_rect
        assert rect.width == pytest.approx(80.0)
        assert rect.top == pytest.approx(-rect.height / 2.0)
        assert rect.bottom == pytest.approx(rect.height / 2.0)

    def test_relayout_keeps_docked_and_centered_tiles(self, board, tile_ids):
        board.docking.focus(tile_ids["notes"])
        before = {tile.tile_id: tile.snapshot() for tile in board.store.tiles}
        board.relayout()
        after = {tile.tile_id: tile.snapshot() for tile in board.store.tiles}
        for tile_id, snapshot in before.items():
            assert after[tile_id].scale == pytest.approx(snapshot.scale)

    def test_transition_flags_cleared_after_duration(self, board, tile_ids, scheduler):
        board.docking.focus(tile_ids["notes"])
        assert all(tile.transition for tile in board.store.tiles)
        scheduler.advance(TRANSITION_MS)
        assert not any(tile.transition for tile in board.store.tiles)

    def test_refocus_keeps_one_cleanup_per_tile(self, board, tile_ids, scheduler):
        board.docking.focus(tile_ids["notes"])
        scheduler.advance(TRANSITION_MS // 2)
        board.docking.focus(tile_ids["lease"])
        assert len(scheduler.pending) == len(board.store.tiles)
        scheduler.advance(TRANSITION_MS // 2)
        # The first round of timers was cancelled, the second is still running
        assert all(tile.transition for tile in board.store.tiles)
        scheduler.advance(TRANSITION_MS)
        assert not any(tile.transition for tile in board.store.tiles)

    def test_dragged_tile_is_skipped(self, board, tile_ids):
        invoice = board.store.tiles.get(tile_ids["invoice"])
        board.drag.start(invoice.tile_id, invoice.center)
        frozen = invoice.snapshot()
        docked = board.docking.focus(tile_ids["notes"])
        assert invoice.tile_id not in docked
        assert invoice.snapshot() == frozen

    def test_focus_unknown_tile(self, board):
        assert board.docking.focus(999) is None

    def test_dock_explicit_edge(self, board, tile_ids):
        assert board.docking.dock_tile(tile_ids["invoice"], Edge.BOTTOM) is Edge.BOTTOM
        assert board.store.tiles.get(tile_ids["invoice"]).center.y == 1000.0


class TestDoubleActivation:
    def test_first_focuses_second_opens_viewer(self, board, tile_ids):
        assert board.double_activate(tile_ids["lease"])
        assert not board.viewer.is_open
        assert board.double_activate(tile_ids["lease"])
        assert board.viewer.is_open

    def test_click_then_double_click_opens_viewer(self, board, tile_ids):
        lease = board.store.tiles.get(tile_ids["lease"])
        assert board.double_activate(lease.tile_id)
        # A double click arrives as press, release, then the double click
        assert board.pointer_press(lease.tile_id, lease.center)
        assert board.pointer_release(lease.center) is ReleaseOutcome.SETTLED
        assert lease.scale == MAX_SCALE
        assert board.double_activate(lease.tile_id)
        assert board.viewer.is_open

    def test_dragged_away_tile_focuses_again(self, board, tile_ids):
        lease = board.store.tiles.get(tile_ids["lease"])
        board.double_activate(lease.tile_id)
        board.pointer_press(lease.tile_id, lease.center)
        board.pointer_move(Point(lease.center.x + 120.0, lease.center.y + 200.0))
        board.pointer_release(Point(lease.center.x, lease.center.y))
        assert not board.docking.is_centered(lease.tile_id)
        assert board.double_activate(lease.tile_id)
        assert not board.viewer.is_open
        assert board.docking.is_centered(lease.tile_id)

    def test_refused_while_dragging(self, board, tile_ids):
        invoice = board.store.tiles.get(tile_ids["invoice"])
        board.pointer_press(invoice.tile_id, invoice.center)
        assert not board.double_activate(tile_ids["lease"])


class TestResize:
    def test_docked_tiles_stay_on_their_edges(self, board, tile_ids):
        board.docking.focus(tile_ids["notes"])
        board.resize(Viewport(1000.0, 1400.0))
        lease = board.store.tiles.get(tile_ids["lease"])
        invoice = board.store.tiles.get(tile_ids["invoice"])
        assert lease.center == Point(600.0, 1400.0)
        assert lease.scale == pytest.approx(icon_scale(200.0))
        assert invoice.center == Point(200.0, 0.0)
        assert invoice.scale == pytest.approx(icon_scale(200.0))

    def test_centered_tile_follows_viewport_center(self, board, tile_ids):
        notes = board.store.tiles.get(tile_ids["notes"])
        board.docking.focus(notes.tile_id)
        board.resize(Viewport(1200.0, 1000.0))
        assert notes.center == Point(600.0, 500.0)
        assert notes.scale == MAX_SCALE
        assert board.double_activate(notes.tile_id)
        assert board.viewer.is_open

    def test_free_tiles_keep_their_anchor(self, board, tile_ids):
        invoice = board.store.tiles.get(tile_ids["invoice"])
        before = invoice.center
        board.resize(Viewport(1000.0, 1400.0))
        assert invoice.center == before
        assert invoice.scale == pytest.approx(scale_for_center_y(before.y, 200.0, 1400.0))


def test_two_tile_scenario(store, scheduler, record_factory):
    board = Board(store, scheduler)
    # Centers at y=50 (near top) and y=950 (near bottom)
    board.populate([
        record_factory(1, "a", x=100.0, y=50.0 - 140.0),
        record_factory(2, "b", x=600.0, y=950.0 - 140.0),
    ])
    a = store.tiles.by_name("a")
    b = store.tiles.by_name("b")
    assert a.center.y == 50.0 and b.center.y == 950.0

    assert board.double_activate(a.tile_id)
    assert a.scale == MAX_SCALE
    assert a.center == store.viewport.center
    assert b.center.y == store.viewport.height
    assert b.scale == pytest.approx(icon_scale(b.record.width))
