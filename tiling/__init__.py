"""
Tile addressing and tiling schemes.

This package provides:
- Tile keys with Morton code, quad key and HERE tile encodings
- Quadtree and half-quadtree subdivision schemes
- Tiling schemes pairing a projection with a subdivision scheme
- Point and rectangle to tile key lookups, offset key packing
- Recursive tile tree traversal
"""

from tiling.tile_key import TileKey

from tiling.subdivision_scheme import (
    SubdivisionScheme,
    QuadTreeSubdivisionScheme,
    HalfQuadTreeSubdivisionScheme,
    quad_tree_subdivision_scheme,
    half_quad_tree_subdivision_scheme,
)

from tiling.tile_tree_traverse import SubTiles, TileTreeTraverse
from tiling.bounding_box_generator import FlatTileBoundingBoxGenerator

from tiling.tile_key_utils import (
    OffsetAndMortonKey,
    geo_coordinates_to_tile_key,
    world_coordinates_to_tile_key,
    geo_rectangle_to_tile_keys,
    get_key_for_tile_key_and_offset,
    extract_offset_and_morton_key_from_key,
    get_parent_key_from_key,
)

from tiling.tiling_scheme import (
    TilingScheme,
    TILING_SCHEMES,
    get_tiling_scheme,
    web_mercator_tiling_scheme,
    mercator_tiling_scheme,
    here_tiling_scheme,
    transverse_mercator_tiling_scheme,
    identity_tiling_scheme,
)

from tiling.quad_tree import QuadTree

__all__ = [
    # Keys
    "TileKey",
    # Subdivision
    "SubdivisionScheme",
    "QuadTreeSubdivisionScheme",
    "HalfQuadTreeSubdivisionScheme",
    "quad_tree_subdivision_scheme",
    "half_quad_tree_subdivision_scheme",
    "SubTiles",
    "TileTreeTraverse",
    # Schemes
    "FlatTileBoundingBoxGenerator",
    "TilingScheme",
    "TILING_SCHEMES",
    "get_tiling_scheme",
    "web_mercator_tiling_scheme",
    "mercator_tiling_scheme",
    "here_tiling_scheme",
    "transverse_mercator_tiling_scheme",
    "identity_tiling_scheme",
    # Utilities
    "OffsetAndMortonKey",
    "geo_coordinates_to_tile_key",
    "world_coordinates_to_tile_key",
    "geo_rectangle_to_tile_keys",
    "get_key_for_tile_key_and_offset",
    "extract_offset_and_morton_key_from_key",
    "get_parent_key_from_key",
    "QuadTree",
]
