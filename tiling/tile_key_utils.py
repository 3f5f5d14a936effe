"""
Tile key lookups and key packing.

Lookups
-------
``geo_coordinates_to_tile_key`` and ``world_coordinates_to_tile_key``
locate the tile containing a point by linear interpolation inside the
projection's world extent; points outside the extent have no tile and give
None. ``geo_rectangle_to_tile_keys`` lists every tile overlapping a geo box,
wrapping column indices around the antimeridian.

Offset Packing
--------------
A small signed "copy offset" (which 360 degree copy of the world a tile is
rendered in) is stored in the ``bitshift`` bits just below bit 53, above any
Morton code of level ``(52 - bitshift) // 2`` or less:

    key = morton_code | (((offset + 2^(bitshift - 1)) mod 2^bitshift) << (53 - bitshift))

Offsets wrap modulo ``2^bitshift`` into ``[-2^(bitshift - 1), 2^(bitshift - 1))``.
"""

from typing import List, NamedTuple, Optional

import numpy as np

from common.exceptions import InvalidCoordinatesError
from common.logging_config import get_logger
from common.types import Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from tiling.tile_key import TileKey

logger = get_logger(__name__)

# Keys must stay below 2^53 so that they remain exact as IEEE doubles
KEY_BITS: int = 53
DEFAULT_BITSHIFT: int = 4


class OffsetAndMortonKey(NamedTuple):
    offset: int
    morton_code: int


def geo_coordinates_to_tile_key(tiling_scheme, geo_point, level: int) -> Optional[TileKey]:
    """Tile at ``level`` containing ``geo_point``, or None outside the world extent."""
    world_point = tiling_scheme.projection.project_point(geo_point)
    return world_coordinates_to_tile_key(tiling_scheme, world_point, level)


def world_coordinates_to_tile_key(tiling_scheme, world_point: Vector3, level: int) -> Optional[TileKey]:
    """Tile at ``level`` containing ``world_point``, or None outside the world extent."""
    subdivision_scheme = tiling_scheme.subdivision_scheme
    columns = subdivision_scheme.get_level_dimension_x(level)
    rows = subdivision_scheme.get_level_dimension_y(level)

    extent = tiling_scheme.projection.world_extent(0, 0)
    if not (extent.min.x <= world_point.x <= extent.max.x):
        return None
    if not (extent.min.y <= world_point.y <= extent.max.y):
        return None

    world_size_x = extent.max.x - extent.min.x
    world_size_y = extent.max.y - extent.min.y
    column = min(columns - 1, int(np.floor(columns * (world_point.x - extent.min.x) / world_size_x)))
    row = min(rows - 1, int(np.floor(rows * (world_point.y - extent.min.y) / world_size_y)))
    return TileKey(row, column, level)


def _wrap(value: float, lower: float, upper: float) -> float:
    span = upper - lower
    if value < lower:
        return upper - ((lower - value) % span)
    return lower + ((value - lower) % span)


def _wrap_east(value: float) -> float:
    """Wrap an east edge into (-pi, pi]; an edge on the antimeridian stays at +pi."""
    wrapped = _wrap(value, -np.pi, np.pi)
    if wrapped == -np.pi and value > -np.pi:
        return np.pi
    return wrapped


def geo_rectangle_to_tile_keys(tiling_scheme, geo_box: GeoBox, level: int) -> List[TileKey]:
    """All tiles at ``level`` overlapping ``geo_box``, in row-major order.

    Latitudes are clamped to the poles and longitudes wrapped into
    [-180, 180]. An east edge on the antimeridian ends at the last column,
    so a box spanning -180 to 180 covers every column. A box crossing the
    antimeridian continues its column range past the last column and wraps
    around to the first.

    Raises
    ------
    InvalidCoordinatesError
        If a corner of the box has no tile in the scheme's world extent.
    """
    half_pi = np.pi * 0.5
    south_west_longitude = _wrap(geo_box.south_west.longitude_in_radians, -np.pi, np.pi)
    south_west_latitude = min(max(geo_box.south_west.latitude_in_radians, -half_pi), half_pi)
    north_east_longitude = _wrap_east(geo_box.north_east.longitude_in_radians)
    north_east_latitude = min(max(geo_box.north_east.latitude_in_radians, -half_pi), half_pi)

    min_tile_key = geo_coordinates_to_tile_key(
        tiling_scheme,
        GeoCoordinates.from_radians(south_west_latitude, south_west_longitude),
        level,
    )
    max_tile_key = geo_coordinates_to_tile_key(
        tiling_scheme,
        GeoCoordinates.from_radians(north_east_latitude, north_east_longitude),
        level,
    )
    if min_tile_key is None or max_tile_key is None:
        raise InvalidCoordinatesError(
            f"Corners of {geo_box} are outside the world extent of {tiling_scheme}"
        )

    column_count = tiling_scheme.subdivision_scheme.get_level_dimension_x(level)
    min_column = min_tile_key.column
    max_column = max_tile_key.column

    if south_west_longitude > north_east_longitude:
        logger.debug(f"Box {geo_box} crosses the antimeridian at level {level}")
        if max_column != min_column:
            max_column += column_count
        else:
            # Avoid emitting the shared column twice
            max_column += column_count - 1

    min_row = min(min_tile_key.row, max_tile_key.row)
    max_row = max(min_tile_key.row, max_tile_key.row)

    return [
        TileKey(row, column % column_count, level)
        for row in range(min_row, max_row + 1)
        for column in range(min_column, max_column + 1)
    ]


def _check_bitshift(bitshift: int) -> None:
    if not 1 <= bitshift < KEY_BITS:
        raise ValueError(f"bitshift must be in [1, {KEY_BITS}), got {bitshift}")


def get_key_for_tile_key_and_offset(
    tile_key: TileKey,
    offset: int,
    bitshift: int = DEFAULT_BITSHIFT
) -> int:
    """Pack ``offset`` into the high bits above ``tile_key``'s Morton code.

    Raises
    ------
    ValueError
        If the Morton code reaches into the offset bits.
    """
    _check_bitshift(bitshift)
    morton_code = tile_key.morton_code()
    offset_shift = KEY_BITS - bitshift
    if morton_code >> offset_shift:
        raise ValueError(
            f"Morton code of {tile_key} needs more than {offset_shift} bits, "
            f"no room for a {bitshift} bit offset"
        )
    total_offsets = 1 << bitshift
    stored = (offset + total_offsets // 2) % total_offsets
    return morton_code | (stored << offset_shift)


def extract_offset_and_morton_key_from_key(
    key: int,
    bitshift: int = DEFAULT_BITSHIFT
) -> OffsetAndMortonKey:
    """Inverse of :func:`get_key_for_tile_key_and_offset`."""
    _check_bitshift(bitshift)
    offset_shift = KEY_BITS - bitshift
    stored = (key >> offset_shift) & ((1 << bitshift) - 1)
    return OffsetAndMortonKey(
        offset=stored - (1 << (bitshift - 1)),
        morton_code=key & ((1 << offset_shift) - 1),
    )


def get_parent_key_from_key(key: int, bitshift: int = DEFAULT_BITSHIFT) -> int:
    """Packed key of the parent tile, keeping the offset."""
    offset, morton_code = extract_offset_and_morton_key_from_key(key, bitshift)
    parent = TileKey.from_morton_code(TileKey.parent_morton_code(morton_code))
    return get_key_for_tile_key_and_offset(parent, offset, bitshift)
