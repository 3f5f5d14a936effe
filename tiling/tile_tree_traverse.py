"""
Child enumeration in a tile tree.
"""

from typing import Iterator

from tiling.subdivision_scheme import SubdivisionScheme
from tiling.tile_key import TileKey


class SubTiles:
    """Restartable iterable over the immediate children of a tile.

    Each ``iter()`` starts a fresh enumeration in row-major order, so the
    same instance can be iterated any number of times.
    """

    def __init__(self, tile_key: TileKey, subdivision_x: int, subdivision_y: int):
        self.tile_key = tile_key
        self.subdivision_x = subdivision_x
        self.subdivision_y = subdivision_y

    def __len__(self) -> int:
        return self.subdivision_x * self.subdivision_y

    def __iter__(self) -> Iterator[TileKey]:
        for index in range(len(self)):
            x = index % self.subdivision_x
            y = index // self.subdivision_x
            yield TileKey(
                self.tile_key.row * self.subdivision_y + y,
                self.tile_key.column * self.subdivision_x + x,
                self.tile_key.level + 1,
            )


class TileTreeTraverse:
    """Enumerates children according to a subdivision scheme."""

    def __init__(self, subdivision_scheme: SubdivisionScheme):
        self._subdivision_scheme = subdivision_scheme

    def sub_tiles(self, tile_key: TileKey) -> SubTiles:
        return SubTiles(
            tile_key,
            self._subdivision_scheme.get_subdivision_x(tile_key.level),
            self._subdivision_scheme.get_subdivision_y(tile_key.level),
        )
