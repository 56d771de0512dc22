"""Tests for the tile frame, the registry and the board store."""

import pytest

from spatialdocs.config import DRAG_Z, MAX_SCALE
from spatialdocs.model.geometry import Point, Viewport
from spatialdocs.model.registry import TileRegistry
from spatialdocs.model.tile import Tile, z_for_scale


@pytest.fixture()
def tile(record_factory):
    return Tile(tile_id=1, record=record_factory(1, "invoice"), anchor_left=100.0, anchor_top=360.0)


class TestTileFrame:
    def test_center_includes_offset(self, tile):
        tile.tx, tile.ty = 10.0, -20.0
        assert tile.center == Point(100.0 + 10.0 + 100.0, 360.0 - 20.0 + 140.0)

    def test_rendered_rect_scales_around_center(self, tile):
        tile.scale = 0.5
        rect = tile.rendered_rect
        assert rect.center == tile.center
        assert rect.width == pytest.approx(100.0)
        assert rect.height == pytest.approx(140.0)

    def test_layout_uses_mapper(self, tile):
        # center y = 360 + 140 = 500, the middle of a 1000 px viewport
        assert tile.layout(Viewport(1000.0, 1000.0))
        assert tile.scale == MAX_SCALE

    def test_layout_skipped_while_dragging(self, tile):
        tile.dragging = True
        tile.scale = 1.3
        assert not tile.layout(Viewport(1000.0, 1000.0))
        assert tile.scale == 1.3

    def test_layout_respects_pinned_scale(self, tile):
        tile.pinned_scale = 0.5
        tile.layout(Viewport(1000.0, 1000.0))
        assert tile.scale == 0.5

    def test_commit_anchor_zeroes_offset(self, tile):
        tile.tx, tile.ty = 30.0, 40.0
        tile.commit_anchor(10.0, 20.0)
        assert (tile.anchor_top, tile.anchor_left, tile.tx, tile.ty) == (10.0, 20.0, 0.0, 0.0)

    def test_z_order_follows_scale(self, tile):
        tile.scale = 1.25
        assert tile.z_order == z_for_scale(1.25) == 1250
        tile.dragging = True
        assert tile.z_order == DRAG_Z

    def test_snapshot_restore(self, tile):
        tile.set_transform(5.0, 6.0, 0.8)
        snapshot = tile.snapshot()
        tile.commit_anchor(0.0, 0.0)
        tile.scale = 0.5
        tile.pinned_scale = 0.5
        tile.restore(snapshot)
        assert tile.snapshot() == snapshot
        assert tile.pinned_scale is None


class TestTileRegistry:
    def test_ids_are_not_reused(self, record_factory):
        registry = TileRegistry()
        first = registry.add(record_factory(1, "a"), 0.0, 0.0)
        registry.remove(first.tile_id)
        second = registry.add(record_factory(1, "a"), 0.0, 0.0)
        assert second.tile_id != first.tile_id
        assert registry.get(first.tile_id) is None

    def test_duplicate_name_rejected(self, record_factory):
        registry = TileRegistry()
        assert registry.add(record_factory(1, "a"), 0.0, 0.0) is not None
        assert registry.add(record_factory(2, "a"), 5.0, 5.0) is None
        assert len(registry) == 1

    def test_by_name(self, record_factory):
        registry = TileRegistry()
        tile = registry.add(record_factory(1, "a"), 0.0, 0.0)
        assert registry.by_name("a") is tile
        registry.remove(tile.tile_id)
        assert registry.by_name("a") is None
        assert "a" not in registry.names()

    def test_stacking_order(self, record_factory):
        registry = TileRegistry()
        small = registry.add(record_factory(1, "small"), 0.0, 0.0)
        big = registry.add(record_factory(2, "big"), 0.0, 0.0)
        small.scale, big.scale = 0.4, 2.0
        assert registry.stacking_order() == [small, big]

    def test_iteration_is_a_copy(self, record_factory):
        registry = TileRegistry()
        for i, name in enumerate("abc"):
            registry.add(record_factory(i, name), 0.0, 0.0)
        for tile in registry:
            registry.remove(tile.tile_id)
        assert len(registry) == 0


class TestBoardStore:
    def test_place_lays_out_and_signals(self, store, record_factory, spy):
        added = spy(store.tile_added)
        placed = spy(store.record_placed)
        tile = store.place_record(record_factory(1, "a", x=0.0, y=360.0))
        assert tile.scale == MAX_SCALE
        assert added.calls == [(tile.tile_id,)]
        assert placed.calls == [("a",)]

    def test_remove_signals_record(self, store, record_factory, spy):
        tile = store.place_record(record_factory(1, "a"))
        removed = spy(store.record_removed)
        assert store.remove_tile(tile.tile_id) is tile
        assert removed.calls == [("a",)]
        assert store.remove_tile(tile.tile_id) is None

    def test_library_records(self, store, record_factory):
        store.load_records([record_factory(2, "b"), record_factory(1, "a")])
        store.place_record(store.records["b"])
        assert [r.name for r in store.library_records()] == ["a"]

    def test_duplicate_record_keeps_first(self, store, record_factory):
        store.load_records([record_factory(1, "a", width=100.0), record_factory(2, "a", width=300.0)])
        assert store.records["a"].width == 100.0

    def test_set_viewport_signals_only_on_change(self, store, spy):
        changed = spy(store.viewport_changed)
        store.set_viewport(store.viewport)
        store.set_viewport(Viewport(640.0, 480.0))
        assert len(changed) == 1

    def test_reset_returns_records_to_library(self, store, record_factory):
        store.load_records([record_factory(1, "a"), record_factory(2, "b")])
        for record in list(store.records.values()):
            store.place_record(record)
        store.reset()
        assert len(store.tiles) == 0
        assert len(store.library_records()) == 2
