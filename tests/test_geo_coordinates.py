"""Tests for geospatial.coordinate_models."""

from types import SimpleNamespace

import numpy as np
import pytest

from common.exceptions import InvalidFormatError
from common.units import Q_
from geospatial.coordinate_models import (
    CoordinateFormat,
    GeoCoordinates,
    classify_coordinate_like,
    to_geo_coordinates,
)


class TestFactories:
    """Tests for the GeoCoordinates constructors."""

    def test_from_degrees(self):
        c = GeoCoordinates.from_degrees(52.5, 13.4, 34.0)
        assert (c.latitude, c.longitude, c.altitude) == (52.5, 13.4, 34.0)

    def test_altitude_defaults_to_none(self):
        assert GeoCoordinates(1, 2).altitude is None

    def test_from_radians(self):
        c = GeoCoordinates.from_radians(np.pi / 4, -np.pi / 2)
        assert c.latitude == pytest.approx(45.0)
        assert c.longitude == pytest.approx(-90.0)
        assert c.latitude_in_radians == pytest.approx(np.pi / 4)

    def test_from_geo_point_swaps_order(self):
        c = GeoCoordinates.from_geo_point([13.4, 52.5, 10.0])
        assert c == GeoCoordinates(52.5, 13.4, 10.0)

    def test_from_geo_point_without_altitude(self):
        assert GeoCoordinates.from_geo_point([13.4, 52.5]).altitude is None

    def test_from_lat_lng(self):
        c = GeoCoordinates.from_lat_lng({"lat": 1.0, "lng": 2.0})
        assert (c.lat, c.lng) == (1.0, 2.0)

    def test_from_object_mapping(self):
        c = GeoCoordinates.from_object({"latitude": 1.0, "longitude": 2.0, "altitude": 3.0})
        assert c == GeoCoordinates(1.0, 2.0, 3.0)

    def test_from_object_attributes(self):
        c = GeoCoordinates.from_object(SimpleNamespace(lat=1.0, lng=2.0))
        assert c == GeoCoordinates(1.0, 2.0)

    def test_from_quantities_converts_units(self):
        c = GeoCoordinates.from_quantities(Q_(np.pi / 2, "radian"), Q_(30, "arcminute"), Q_(1.5, "km"))
        assert c.latitude == pytest.approx(90.0)
        assert c.longitude == pytest.approx(0.5)
        assert c.altitude == pytest.approx(1500.0)

    def test_from_quantities_accepts_bare_numbers(self):
        assert GeoCoordinates.from_quantities(10.0, 20.0) == GeoCoordinates(10.0, 20.0)

    def test_from_quantities_rejects_wrong_dimension(self):
        with pytest.raises(ValueError):
            GeoCoordinates.from_quantities(Q_(1.0, "meter"), 0.0)


class TestLiteralShapes:
    """Tests for classify_coordinate_like and to_geo_coordinates."""

    @pytest.mark.parametrize("value, expected", [
        ([1.0, 2.0], CoordinateFormat.GEO_POINT),
        ((1.0, 2.0, 3.0), CoordinateFormat.GEO_POINT),
        (np.array([1.0, 2.0]), CoordinateFormat.GEO_POINT),
        ({"latitude": 1, "longitude": 2}, CoordinateFormat.GEO_COORDINATES),
        (GeoCoordinates(1, 2), CoordinateFormat.GEO_COORDINATES),
        ({"lat": 1, "lng": 2}, CoordinateFormat.LAT_LNG),
    ])
    def test_classify(self, value, expected):
        assert classify_coordinate_like(value) is expected

    @pytest.mark.parametrize("value", [
        [1.0],
        [1.0, 2.0, 3.0, 4.0],
        ["a", "b"],
        "1,2",
        {"lat": 1},
        {"latitude": "north", "longitude": 2},
        None,
        42,
    ])
    def test_invalid_shape_raises(self, value):
        with pytest.raises(InvalidFormatError):
            classify_coordinate_like(value)

    def test_invalid_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            to_geo_coordinates({"foo": 1})

    def test_to_geo_coordinates_returns_same_instance(self):
        c = GeoCoordinates(1, 2)
        assert to_geo_coordinates(c) is c


class TestNormalized:
    """Tests for GeoCoordinates.normalized."""

    def test_in_range_unchanged(self):
        c = GeoCoordinates(45.0, 170.0, 5.0)
        assert c.normalized() == c

    def test_longitude_folds(self):
        assert GeoCoordinates(0.0, 190.0).normalized().longitude == pytest.approx(-170.0)
        assert GeoCoordinates(0.0, -190.0).normalized().longitude == pytest.approx(170.0)
        assert GeoCoordinates(0.0, 540.0).normalized().longitude == pytest.approx(-180.0)

    def test_latitude_reflects_over_pole(self):
        n = GeoCoordinates(100.0, 10.0).normalized()
        assert n.latitude == pytest.approx(80.0)
        assert n.longitude == pytest.approx(-170.0)

    def test_latitude_reflects_over_south_pole(self):
        n = GeoCoordinates(-100.0, 0.0).normalized()
        assert n.latitude == pytest.approx(-80.0)
        assert n.longitude == pytest.approx(180.0)

    def test_boundaries_kept(self):
        assert GeoCoordinates(90.0, 180.0).normalized() == GeoCoordinates(90.0, 180.0)
        assert GeoCoordinates(-90.0, -180.0).normalized() == GeoCoordinates(-90.0, -180.0)

    def test_idempotent(self):
        for lat, lon in [(100, 10), (-300, 725), (45, -181), (270, 0)]:
            once = GeoCoordinates(lat, lon).normalized()
            assert once.normalized() == once
            assert -90 <= once.latitude <= 90
            assert -180 <= once.longitude <= 180

    def test_nan_returned_as_is(self):
        c = GeoCoordinates(float("nan"), 10.0)
        assert not c.is_valid()
        assert c.normalized() is c

    def test_altitude_kept(self):
        assert GeoCoordinates(100.0, 0.0, 12.0).normalized().altitude == 12.0


class TestLerp:
    """Tests for GeoCoordinates.lerp."""

    def test_midpoint(self):
        m = GeoCoordinates.lerp(GeoCoordinates(0, 0, 0), GeoCoordinates(10, 20, 100), 0.5)
        assert m == GeoCoordinates(5, 10, 50)

    def test_endpoints(self):
        a = GeoCoordinates(1, 2)
        b = GeoCoordinates(3, 4)
        assert GeoCoordinates.lerp(a, b, 0) == a
        assert GeoCoordinates.lerp(a, b, 1) == b

    def test_altitude_absent_only_when_both_absent(self):
        a = GeoCoordinates(0, 0)
        b = GeoCoordinates(0, 0, 100.0)
        assert GeoCoordinates.lerp(a, GeoCoordinates(1, 1), 0.5).altitude is None
        assert GeoCoordinates.lerp(a, b, 0.5).altitude == pytest.approx(50.0)

    def test_wrap_crosses_antimeridian(self):
        m = GeoCoordinates.lerp(GeoCoordinates(0, 170), GeoCoordinates(0, -170), 0.5, wrap=True)
        assert m.longitude == pytest.approx(180.0)

    def test_wrap_with_normalize(self):
        m = GeoCoordinates.lerp(
            GeoCoordinates(0, 170), GeoCoordinates(0, -170), 0.75, wrap=True, normalize=True
        )
        assert m.longitude == pytest.approx(-175.0)


class TestMisc:
    """Tests for conversion and comparison helpers."""

    def test_to_geo_point(self):
        assert GeoCoordinates(1, 2).to_geo_point() == [2, 1]
        assert GeoCoordinates(1, 2, 3).to_geo_point() == [2, 1, 3]

    def test_to_lat_lng(self):
        assert GeoCoordinates(1, 2, 3).to_lat_lng() == {"lat": 1, "lng": 2}

    def test_equals_distinguishes_missing_altitude(self):
        assert GeoCoordinates(1, 2).equals(GeoCoordinates(1, 2))
        assert not GeoCoordinates(1, 2).equals(GeoCoordinates(1, 2, 0))

    def test_clone_is_independent(self):
        a = GeoCoordinates(1, 2, 3)
        b = a.clone()
        b.latitude = 10
        assert a.latitude == 1

    def test_copy_overwrites(self):
        a = GeoCoordinates(0, 0)
        a.copy(GeoCoordinates(1, 2, 3))
        assert a == GeoCoordinates(1, 2, 3)

    def test_min_longitude_span(self):
        assert GeoCoordinates(0, 170).min_longitude_span_to(GeoCoordinates(0, -170)) == pytest.approx(20)
        assert GeoCoordinates(0, 10).min_longitude_span_to(GeoCoordinates(0, 40)) == pytest.approx(30)
