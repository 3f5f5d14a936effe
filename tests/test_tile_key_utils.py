"""Tests for tiling.tile_key_utils."""

import pytest

from common.exceptions import InvalidCoordinatesError
from common.types import Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections.planar import cylindrical_projection
from tiling.subdivision_scheme import quad_tree_subdivision_scheme
from tiling.tile_key import TileKey
from tiling.tile_key_utils import (
    OffsetAndMortonKey,
    extract_offset_and_morton_key_from_key,
    geo_coordinates_to_tile_key,
    geo_rectangle_to_tile_keys,
    get_key_for_tile_key_and_offset,
    get_parent_key_from_key,
    world_coordinates_to_tile_key,
)
from tiling.tiling_scheme import (
    TilingScheme,
    here_tiling_scheme,
    mercator_tiling_scheme,
    web_mercator_tiling_scheme,
)


class TestPointLookup:
    """Tests for point to tile key lookups."""

    def test_web_mercator_origin(self):
        key = geo_coordinates_to_tile_key(web_mercator_tiling_scheme, GeoCoordinates(0, 0), 1)
        assert key == TileKey(1, 1, 1)

    def test_web_mercator_rows_grow_southward(self):
        north = geo_coordinates_to_tile_key(web_mercator_tiling_scheme, GeoCoordinates(45, 10), 1)
        south = geo_coordinates_to_tile_key(web_mercator_tiling_scheme, GeoCoordinates(-45, 10), 1)
        assert north.row == 0
        assert south.row == 1

    def test_mercator_rows_grow_northward(self):
        key = geo_coordinates_to_tile_key(mercator_tiling_scheme, GeoCoordinates(45, 10), 1)
        assert key == TileKey(1, 1, 1)

    def test_far_edge_maps_to_last_tile(self):
        key = geo_coordinates_to_tile_key(mercator_tiling_scheme, GeoCoordinates(89, 180), 3)
        assert key == TileKey(7, 7, 3)

    def test_outside_extent(self):
        assert world_coordinates_to_tile_key(web_mercator_tiling_scheme, Vector3(-1, 0, 0), 1) is None
        cylindrical = TilingScheme(quad_tree_subdivision_scheme, cylindrical_projection)
        assert geo_coordinates_to_tile_key(cylindrical, GeoCoordinates(80, 0), 2) is None

    def test_brandenburg_gate(self):
        key = web_mercator_tiling_scheme.get_tile_key(GeoCoordinates(52.5163, 13.3777), 14)
        assert key.level == 14
        assert key.column in (8800, 8801)
        assert key.row in (5372, 5373)


class TestRectangleLookup:
    """Tests for geo_rectangle_to_tile_keys."""

    def test_brandenburg_box(self, brandenburg_box):
        keys = geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, brandenburg_box, 14)
        assert {key.morton_code() for key in keys} == {371506848, 371506849, 371506850, 371506851}
        assert keys[0] == TileKey(5372, 8800, 14)
        assert keys[-1] == TileKey(5373, 8801, 14)

    def test_antimeridian_level_one(self, antimeridian_box):
        keys = geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, antimeridian_box, 1)
        assert keys == [TileKey(0, 1, 1), TileKey(0, 0, 1), TileKey(1, 1, 1), TileKey(1, 0, 1)]

    def test_antimeridian_level_two(self, antimeridian_box):
        keys = geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, antimeridian_box, 2)
        assert keys == [TileKey(1, 3, 2), TileKey(1, 0, 2), TileKey(2, 3, 2), TileKey(2, 0, 2)]

    def test_wrap_into_same_column(self):
        box = GeoBox(GeoCoordinates(0, 10), GeoCoordinates(1, 5))
        keys = geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, box, 1)
        assert len(keys) == len(set(keys)) == 4

    def test_whole_world(self):
        box = GeoBox(GeoCoordinates(-90, -180), GeoCoordinates(90, 180))
        keys = geo_rectangle_to_tile_keys(here_tiling_scheme, box, 2)
        assert len(keys) == 8
        assert {key.column for key in keys} == {0, 1, 2, 3}

    def test_east_edge_on_antimeridian(self):
        box = GeoBox(GeoCoordinates(0, 170), GeoCoordinates(10, 180))
        keys = geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, box, 2)
        assert {key.column for key in keys} == {3}

    def test_level_zero(self, brandenburg_box):
        assert geo_rectangle_to_tile_keys(web_mercator_tiling_scheme, brandenburg_box, 0) == [TileKey(0, 0, 0)]

    def test_corner_outside_world(self):
        cylindrical = TilingScheme(quad_tree_subdivision_scheme, cylindrical_projection)
        box = GeoBox(GeoCoordinates(70, 0), GeoCoordinates(80, 10))
        with pytest.raises(InvalidCoordinatesError):
            geo_rectangle_to_tile_keys(cylindrical, box, 2)


class TestOffsetPacking:
    """Tests for packing a world copy offset next to a Morton code."""

    def test_lowest_offset(self):
        key = get_key_for_tile_key_and_offset(TileKey(1, 1, 1), -4, bitshift=3)
        assert key == 7
        assert extract_offset_and_morton_key_from_key(key, bitshift=3) == OffsetAndMortonKey(-4, 7)

    @pytest.mark.parametrize("offset", [-8, -1, 0, 1, 7])
    def test_round_trip_default_bitshift(self, offset):
        tile_key = TileKey(5372, 8800, 14)
        key = get_key_for_tile_key_and_offset(tile_key, offset)
        extracted = extract_offset_and_morton_key_from_key(key)
        assert extracted.offset == offset
        assert extracted.morton_code == tile_key.morton_code()
        assert key < 2 ** 53

    def test_offset_wraps(self):
        key = get_key_for_tile_key_and_offset(TileKey(0, 0, 0), 8)
        assert extract_offset_and_morton_key_from_key(key).offset == -8

    def test_parent_key_keeps_offset(self):
        key = get_key_for_tile_key_and_offset(TileKey(1, 1, 1), 1)
        parent = get_parent_key_from_key(key)
        assert extract_offset_and_morton_key_from_key(parent) == OffsetAndMortonKey(1, 1)

    def test_morton_code_too_large(self):
        get_key_for_tile_key_and_offset(TileKey(0, 0, 24), 0)
        with pytest.raises(ValueError):
            get_key_for_tile_key_and_offset(TileKey(0, 0, 25), 0)

    @pytest.mark.parametrize("bitshift", [0, 53])
    def test_invalid_bitshift(self, bitshift):
        with pytest.raises(ValueError):
            get_key_for_tile_key_and_offset(TileKey(0, 0, 0), 0, bitshift=bitshift)
