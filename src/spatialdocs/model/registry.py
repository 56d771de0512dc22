from __future__ import annotations

import logging
from typing import Iterator, Optional

from spatialdocs.model.records import DocumentRecord
from spatialdocs.model.tile import Tile

logger = logging.getLogger(__name__)


class TileRegistry:
    """
    Arena of tiles keyed by stable integer ids.

    Ids are never reused, so a view holding an id of a removed tile simply
    gets None back instead of a different tile.
    """
    def __init__(self) -> None:
        self._tiles: dict[int, Tile] = {}
        self._ids_by_name: dict[str, int] = {}
        self._next_id: int = 1

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(list(self._tiles.values()))

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._tiles

    def add(self, record: DocumentRecord, anchor_left: float, anchor_top: float) -> Optional[Tile]:
        """Place a record. Returns None if a record with that name is already on the board."""
        if record.name in self._ids_by_name:
            logger.debug(f"Record '{record.name}' is already on the board.")
            return None
        tile = Tile(tile_id=self._next_id, record=record, anchor_left=anchor_left, anchor_top=anchor_top)
        self._next_id += 1
        self._tiles[tile.tile_id] = tile
        self._ids_by_name[record.name] = tile.tile_id
        return tile

    def remove(self, tile_id: int) -> Optional[Tile]:
        tile = self._tiles.pop(tile_id, None)
        if tile is not None:
            self._ids_by_name.pop(tile.record.name, None)
        return tile

    def get(self, tile_id: Optional[int]) -> Optional[Tile]:
        if tile_id is None:
            return None
        return self._tiles.get(tile_id)

    def by_name(self, name: str) -> Optional[Tile]:
        tile_id = self._ids_by_name.get(name)
        return self._tiles.get(tile_id) if tile_id is not None else None

    def names(self) -> set[str]:
        return set(self._ids_by_name)

    def stacking_order(self) -> list[Tile]:
        """Tiles bottom to top; ties keep insertion order."""
        return sorted(self._tiles.values(), key=lambda t: t.z_order)
