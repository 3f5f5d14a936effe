"""
Depth-first traversal of a tiling scheme's tile tree.
"""

from typing import Callable

from geospatial.geo_box import GeoBox
from tiling.tile_key import TileKey

# accept(tile_key, geo_box) -> descend into the tile's children?
AcceptFunction = Callable[[TileKey, GeoBox], bool]


class QuadTree:
    """Pre-order visitor over the tiles of a tiling scheme.

    The traversal keeps no state between calls, so several traversals can
    run over the same scheme at once.

    Examples
    --------
    >>> tree = QuadTree(web_mercator_tiling_scheme)
    >>> visited = []
    >>> tree.visit(lambda key, box: visited.append(key) or key.level < 1)
    >>> len(visited)
    5
    """

    def __init__(self, tiling_scheme):
        self.tiling_scheme = tiling_scheme

    def visit(self, accept: AcceptFunction) -> None:
        self.visit_tile_key(TileKey(0, 0, 0), accept)

    def visit_tile_key(self, tile_key: TileKey, accept: AcceptFunction) -> None:
        """Visit ``tile_key`` and, if accepted, its descendants."""
        geo_box = self.tiling_scheme.get_geo_box(tile_key)
        if not accept(tile_key, geo_box):
            return
        for child in self.tiling_scheme.get_sub_tile_keys(tile_key):
            self.visit_tile_key(child, accept)
