"""
Tiling schemes.

A tiling scheme pairs a projection with a subdivision scheme and so defines
a complete global tile hierarchy. Schemes are immutable and shared as the
module-level instances below; ``get_tiling_scheme`` resolves them by name.
"""

from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from common.types import Box3
from geospatial.geo_box import GeoBox
from projections.base import Projection
from projections.mercator import mercator_projection, web_mercator_projection
from projections.planar import identity_projection, normalized_equirectangular_projection
from projections.transverse_mercator import transverse_mercator_projection
from tiling import tile_key_utils
from tiling.bounding_box_generator import FlatTileBoundingBoxGenerator
from tiling.subdivision_scheme import (
    SubdivisionScheme,
    half_quad_tree_subdivision_scheme,
    quad_tree_subdivision_scheme,
)
from tiling.tile_key import TileKey
from tiling.tile_tree_traverse import SubTiles, TileTreeTraverse


class TilingScheme:
    """A projection together with a subdivision scheme.

    Parameters
    ----------
    subdivision_scheme : SubdivisionScheme
        How tiles split at each level.
    projection : Projection
        Projection whose world extent is tiled.
    """

    def __init__(self, subdivision_scheme: SubdivisionScheme, projection: Projection):
        self._subdivision_scheme = subdivision_scheme
        self._projection = projection
        self._bounding_box_generator = FlatTileBoundingBoxGenerator(self)
        self._tile_tree_traverse = TileTreeTraverse(subdivision_scheme)

    @property
    def subdivision_scheme(self) -> SubdivisionScheme:
        return self._subdivision_scheme

    @property
    def projection(self) -> Projection:
        return self._projection

    @property
    def bounding_box_generator(self) -> FlatTileBoundingBoxGenerator:
        return self._bounding_box_generator

    @property
    def tile_tree_traverse(self) -> TileTreeTraverse:
        return self._tile_tree_traverse

    def __repr__(self) -> str:
        return f"TilingScheme({self._subdivision_scheme!r}, {self._projection!r})"

    def get_sub_tile_keys(self, tile_key: TileKey) -> SubTiles:
        """Immediate children of ``tile_key``; every iteration starts afresh."""
        return self._tile_tree_traverse.sub_tiles(tile_key)

    def get_tile_key(self, geo_point: Any, level: int) -> Optional[TileKey]:
        return tile_key_utils.geo_coordinates_to_tile_key(self, geo_point, level)

    def get_tile_keys(self, geo_box: GeoBox, level: int) -> List[TileKey]:
        return tile_key_utils.geo_rectangle_to_tile_keys(self, geo_box, level)

    def get_geo_box(self, tile_key: TileKey) -> GeoBox:
        return self._bounding_box_generator.get_geo_box(tile_key)

    def get_world_box(self, tile_key: TileKey) -> Box3:
        return self._bounding_box_generator.get_world_box(tile_key)


# Raster tile layout: row 0 at the north edge
web_mercator_tiling_scheme = TilingScheme(quad_tree_subdivision_scheme, web_mercator_projection)
mercator_tiling_scheme = TilingScheme(quad_tree_subdivision_scheme, mercator_projection)
here_tiling_scheme = TilingScheme(half_quad_tree_subdivision_scheme, normalized_equirectangular_projection)
transverse_mercator_tiling_scheme = TilingScheme(quad_tree_subdivision_scheme, transverse_mercator_projection)
identity_tiling_scheme = TilingScheme(quad_tree_subdivision_scheme, identity_projection)

TILING_SCHEMES: Mapping[str, TilingScheme] = MappingProxyType({
    "web_mercator": web_mercator_tiling_scheme,
    "mercator": mercator_tiling_scheme,
    "here": here_tiling_scheme,
    "transverse_mercator": transverse_mercator_tiling_scheme,
    "identity": identity_tiling_scheme,
})


def get_tiling_scheme(name: str) -> TilingScheme:
    """Look up a shared tiling scheme by name.

    Raises
    ------
    KeyError
        If no scheme has that name.
    """
    try:
        return TILING_SCHEMES[name]
    except KeyError:
        raise KeyError(
            f"Unknown tiling scheme '{name}'. Available: {sorted(TILING_SCHEMES)}"
        ) from None
