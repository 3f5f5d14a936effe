"""Tests for the projections package."""

import numpy as np
import pytest

from common.constants import EQUATORIAL_CIRCUMFERENCE, EQUATORIAL_RADIUS
from common.exceptions import InvalidBoundingBoxError
from common.types import Box3, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections import (
    ProjectionType,
    TransverseMercatorProjection,
    TransverseMercatorUtils,
    batch_project,
    batch_unproject,
    cylindrical_projection,
    equirectangular_projection,
    identity_projection,
    mercator_projection,
    normalized_equirectangular_projection,
    sphere_projection,
    transverse_mercator_projection,
    web_mercator_projection,
)
from validation.projection_checks import longitude_difference

C = EQUATORIAL_CIRCUMFERENCE
R = EQUATORIAL_RADIUS
MERCATOR_MAX_LATITUDE_DEG = 85.0511287798066

ALL_PROJECTIONS = [
    identity_projection,
    equirectangular_projection,
    normalized_equirectangular_projection,
    cylindrical_projection,
    mercator_projection,
    web_mercator_projection,
    transverse_mercator_projection,
    sphere_projection,
]

FLAT_PROJECTIONS = [
    identity_projection,
    equirectangular_projection,
    normalized_equirectangular_projection,
    cylindrical_projection,
    mercator_projection,
    web_mercator_projection,
]


def outside_pole_disks(samples, margin=0.5):
    """Drop samples near the transverse Mercator singular points."""
    radius = TransverseMercatorUtils.POLE_RADIUS + margin
    keep = []
    for lat, lon, alt in samples:
        for pole in (-90.0, 90.0):
            if np.hypot(lat, lon - pole) < radius:
                break
        else:
            keep.append((lat, lon, alt))
    return np.array(keep)


def assert_vector_close(actual, expected, abs_tol=1e-6):
    assert actual.x == pytest.approx(expected.x, abs=abs_tol)
    assert actual.y == pytest.approx(expected.y, abs=abs_tol)
    assert actual.z == pytest.approx(expected.z, abs=abs_tol)


def box_contains(box, point, tolerance=1e-6):
    return (
        box.min.x - tolerance <= point.x <= box.max.x + tolerance
        and box.min.y - tolerance <= point.y <= box.max.y + tolerance
        and box.min.z - tolerance <= point.z <= box.max.z + tolerance
    )


class TestRoundTrip:
    """unproject(project(p)) returns p."""

    @pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
    def test_round_trip(self, projection, geo_samples):
        samples = geo_samples
        if isinstance(projection, TransverseMercatorProjection):
            samples = outside_pole_disks(samples)
        for lat, lon, alt in samples:
            geo = projection.unproject_point(projection.project_point(GeoCoordinates(lat, lon, alt)))
            assert geo.latitude == pytest.approx(lat, abs=1e-6)
            assert longitude_difference(geo.longitude, lon) < 1e-6
            assert geo.altitude == pytest.approx(alt, abs=1e-6)

    @pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
    def test_missing_altitude_projects_to_surface(self, projection):
        world = projection.project_point(GeoCoordinates(10.0, 20.0))
        assert projection.ground_distance(world) == pytest.approx(0.0, abs=1e-6)
        assert projection.unproject_point(world).altitude == pytest.approx(0.0, abs=1e-6)

    def test_accepts_literal_shapes(self):
        expected = mercator_projection.project_point(GeoCoordinates(52.5, 13.4))
        assert mercator_projection.project_point([13.4, 52.5]) == expected
        assert mercator_projection.project_point({"lat": 52.5, "lng": 13.4}) == expected

    def test_project_does_not_mutate_input(self):
        geo = GeoCoordinates(89.0, 10.0, 5.0)
        web_mercator_projection.project_point(geo)
        assert geo == GeoCoordinates(89.0, 10.0, 5.0)


class TestPlanar:
    """Tests for identity, equirectangular and cylindrical projections."""

    def test_identity_uses_radians(self):
        world = identity_projection.project_point(GeoCoordinates(90, 180, 7))
        assert_vector_close(world, Vector3(np.pi, np.pi / 2, 7))

    def test_identity_extent(self):
        extent = identity_projection.world_extent(0, 0)
        assert_vector_close(extent.min, Vector3(-np.pi, -np.pi / 2, 0))
        assert_vector_close(extent.max, Vector3(np.pi, np.pi / 2, 0))

    def test_equirectangular_corners(self):
        p = normalized_equirectangular_projection
        assert_vector_close(p.project_point(GeoCoordinates(-90, -180)), Vector3(0, 0, 0))
        assert_vector_close(p.project_point(GeoCoordinates(90, 180)), Vector3(1, 0.5, 0))

    def test_equirectangular_extent(self):
        extent = equirectangular_projection.world_extent(-10, 10)
        assert extent.max.x == pytest.approx(C)
        assert extent.max.y == pytest.approx(C / 2)
        assert (extent.min.z, extent.max.z) == (-10, 10)

    def test_cylindrical_equator_in_middle(self):
        world = cylindrical_projection.project_point(GeoCoordinates(0, 0))
        assert_vector_close(world, Vector3(C / 2, C / 2, 0))

    def test_cylindrical_scale_factor(self):
        world = cylindrical_projection.project_point(GeoCoordinates(60, 0))
        assert cylindrical_projection.get_scale_factor(world) == pytest.approx(2.0)

    @pytest.mark.parametrize("projection", FLAT_PROJECTIONS, ids=lambda p: p.name)
    def test_flat_surface(self, projection):
        world = projection.project_point(GeoCoordinates(10, 20, 30))
        assert projection.projection_type is ProjectionType.PLANAR
        assert projection.ground_distance(world) == pytest.approx(30)
        assert projection.scale_point_to_surface(world).z == 0
        assert abs(projection.surface_normal(world).z) == 1


class TestMercator:
    """Tests for the Mercator and web Mercator projections."""

    def test_origin_in_middle(self):
        assert_vector_close(mercator_projection.project_point(GeoCoordinates(0, 0)), Vector3(C / 2, C / 2, 0))
        assert_vector_close(web_mercator_projection.project_point(GeoCoordinates(0, 0)), Vector3(C / 2, C / 2, 0))

    def test_y_direction(self):
        north = GeoCoordinates(45, 0)
        assert mercator_projection.project_point(north).y > C / 2
        assert web_mercator_projection.project_point(north).y < C / 2

    def test_latitude_is_clamped(self):
        top = web_mercator_projection.project_point(GeoCoordinates(89.9, 0))
        assert top.y == pytest.approx(0.0, abs=1e-6)
        geo = web_mercator_projection.unproject_point(top)
        assert geo.latitude == pytest.approx(MERCATOR_MAX_LATITUDE_DEG, abs=1e-9)

    def test_scale_factor(self):
        for projection in (mercator_projection, web_mercator_projection):
            world = projection.project_point(GeoCoordinates(60, 0))
            assert projection.get_scale_factor(world) == pytest.approx(2.0)

    def test_surface_normals(self):
        point = Vector3(1, 2, 3)
        assert mercator_projection.surface_normal(point) == Vector3(0, 0, 1)
        assert web_mercator_projection.surface_normal(point) == Vector3(0, 0, -1)

    def test_web_mercator_tangent_space(self):
        space = web_mercator_projection.local_tangent_space(GeoCoordinates(10, 10))
        assert space.y_axis == Vector3(0, -1, 0)
        assert space.z_axis == Vector3(0, 0, -1)

    def test_reproject_between_variants(self):
        world = mercator_projection.project_point(GeoCoordinates(30, 40, 5))
        flipped = web_mercator_projection.reproject_point(mercator_projection, world)
        assert_vector_close(flipped, Vector3(world.x, C - world.y, 5), abs_tol=1e-6)
        assert_vector_close(flipped, web_mercator_projection.project_point(GeoCoordinates(30, 40, 5)), abs_tol=1e-6)


class TestProjectBox:
    """Tests for project_box and unproject_box."""

    def test_web_mercator_tile_quadrant(self):
        geo_box = GeoBox(GeoCoordinates(0, -180), GeoCoordinates(MERCATOR_MAX_LATITUDE_DEG, 0))
        box = web_mercator_projection.project_box(geo_box)
        assert_vector_close(box.min, Vector3(0, 0, 0), abs_tol=1e-3)
        assert_vector_close(box.max, Vector3(C / 2, C / 2, 0), abs_tol=1e-3)

    def test_mercator_tile_quadrant(self):
        geo_box = GeoBox(GeoCoordinates(0, -180), GeoCoordinates(MERCATOR_MAX_LATITUDE_DEG, 0))
        box = mercator_projection.project_box(geo_box)
        assert_vector_close(box.min, Vector3(0, C / 2, 0), abs_tol=1e-3)
        assert_vector_close(box.max, Vector3(C / 2, C, 0), abs_tol=1e-3)

    def test_altitude_span(self):
        geo_box = GeoBox(GeoCoordinates(0, 0, 0), GeoCoordinates(10, 10, 100))
        box = mercator_projection.project_box(geo_box)
        assert box.min.z == pytest.approx(0)
        assert box.max.z == pytest.approx(100)

    def test_oriented_box(self):
        geo_box = GeoBox(GeoCoordinates(0, 0), GeoCoordinates(10, 10))
        aabb = mercator_projection.project_box(geo_box)
        obb = mercator_projection.project_box(geo_box, OrientedBox3)
        assert isinstance(obb, OrientedBox3)
        assert_vector_close(obb.position, aabb.center(), abs_tol=1e-6)
        assert obb.extents.x == pytest.approx(C * 10 / 360 / 2)
        assert obb.extents.z > 0

    def test_web_mercator_oriented_box_axes(self):
        geo_box = GeoBox(GeoCoordinates(0, 0), GeoCoordinates(10, 10))
        obb = web_mercator_projection.project_box(geo_box, OrientedBox3)
        assert obb.y_axis == Vector3(0, -1, 0)
        assert obb.position.y < C / 2

    @pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
    def test_invalid_box_type(self, projection):
        geo_box = GeoBox(GeoCoordinates(0, 0), GeoCoordinates(10, 10))
        with pytest.raises(InvalidBoundingBoxError):
            projection.project_box(geo_box, dict)

    @pytest.mark.parametrize("projection", FLAT_PROJECTIONS, ids=lambda p: p.name)
    def test_flat_box_round_trip(self, projection):
        geo_box = GeoBox(GeoCoordinates(10, 20), GeoCoordinates(30, 50))
        result = projection.unproject_box(projection.project_box(geo_box))
        assert result.south == pytest.approx(10, abs=1e-6)
        assert result.north == pytest.approx(30, abs=1e-6)
        assert result.west == pytest.approx(20, abs=1e-6)
        assert result.east == pytest.approx(50, abs=1e-6)

    def test_flat_antimeridian_box(self, antimeridian_box):
        box = equirectangular_projection.project_box(antimeridian_box)
        assert box.max.x - box.min.x == pytest.approx(C * 30 / 360)
        assert box.max.x > C


class TestTransverseMercator:
    """Tests for the transverse Mercator projection."""

    def test_origin_in_middle(self):
        world = transverse_mercator_projection.project_point(GeoCoordinates(0, 0))
        assert_vector_close(world, Vector3(C / 2, C / 2, 0))

    def test_clamp_singular_point(self):
        clamped = TransverseMercatorProjection.clamp_geo_point(GeoCoordinates(0, 90, 3))
        assert clamped.latitude == 0
        assert clamped.longitude == pytest.approx(90 + TransverseMercatorUtils.POLE_RADIUS)
        assert clamped.altitude == 3

    def test_clamp_pushes_to_circle(self):
        clamped = TransverseMercatorProjection.clamp_geo_point(GeoCoordinates(1, 91))
        distance = np.hypot(clamped.latitude, clamped.longitude - 90)
        assert distance == pytest.approx(TransverseMercatorUtils.POLE_RADIUS)

    def test_clamp_leaves_far_points(self):
        geo = GeoCoordinates(45, 10)
        assert TransverseMercatorProjection.clamp_geo_point(geo) is geo

    def test_singular_points_are_finite(self):
        for lon in (-90, 90):
            world = transverse_mercator_projection.project_point(GeoCoordinates(0, lon))
            assert np.all(np.isfinite(world.to_array()))

    def test_longitude_beyond_antimeridian_keeps_copy(self):
        world = transverse_mercator_projection.project_point(GeoCoordinates(10, 190))
        assert world.x > C
        geo = transverse_mercator_projection.unproject_point(world)
        assert geo.latitude == pytest.approx(10, abs=1e-9)
        assert geo.longitude == pytest.approx(190, abs=1e-9)

    def test_scale_factor_on_central_meridian(self):
        world = transverse_mercator_projection.project_point(GeoCoordinates(45, 0))
        assert transverse_mercator_projection.get_scale_factor(world) == pytest.approx(1.0)

    def test_project_box_contains_corners(self):
        geo_box = GeoBox(GeoCoordinates(20, 10), GeoCoordinates(40, 30))
        box = transverse_mercator_projection.project_box(geo_box)
        for lat in (20, 40):
            for lon in (10, 30):
                assert box_contains(box, transverse_mercator_projection.project_point(GeoCoordinates(lat, lon)))

    @pytest.mark.parametrize("south, west, north, east", [
        (-10, 170, 10, -160),
        (-10, 170, 10, -80),
        (-40, -120, -5, 100),
        (5, 60, 30, 120),
    ])
    def test_project_box_contains_box_points(self, south, west, north, east):
        geo_box = GeoBox(GeoCoordinates(south, west), GeoCoordinates(north, east))
        box = transverse_mercator_projection.project_box(geo_box)
        for lat in np.linspace(south, north, 9):
            for lon in np.linspace(west, geo_box.east, 23):
                point = transverse_mercator_projection.project_point(GeoCoordinates(lat, lon))
                assert box_contains(box, point, tolerance=1e-3), (lat, lon)

    def test_project_box_across_antimeridian_spans_both_copies(self):
        geo_box = GeoBox(GeoCoordinates(-10, 170), GeoCoordinates(10, -160))
        box = transverse_mercator_projection.project_box(geo_box)
        # 180 meridian sits on x = C/2 of the first copy and just below 3C/2 in the next
        assert box.min.x == pytest.approx(0.5 * C, abs=1e-3)
        assert box.max.x == pytest.approx(1.5 * C, abs=1e-3)
        # Equator crossing at 180 reaches both horizontal edges
        assert box.min.y == pytest.approx(0.0, abs=1e-3)
        assert box.max.y == pytest.approx(C, abs=1e-3)

    def test_unproject_box_close_to_source(self):
        geo_box = GeoBox(GeoCoordinates(29, 19), GeoCoordinates(31, 21))
        result = transverse_mercator_projection.unproject_box(
            transverse_mercator_projection.project_box(geo_box)
        )
        assert result.south == pytest.approx(29, abs=0.5)
        assert result.north == pytest.approx(31, abs=0.5)
        assert result.west == pytest.approx(19, abs=0.5)
        assert result.east == pytest.approx(21, abs=0.5)
        assert result.contains(GeoCoordinates(30, 20))


class TestSphere:
    """Tests for the sphere projection."""

    def test_axes(self):
        assert_vector_close(sphere_projection.project_point(GeoCoordinates(0, 0)), Vector3(R, 0, 0))
        assert_vector_close(sphere_projection.project_point(GeoCoordinates(0, 90)), Vector3(0, R, 0))
        assert_vector_close(sphere_projection.project_point(GeoCoordinates(90, 0)), Vector3(0, 0, R))

    def test_projection_type(self):
        assert sphere_projection.projection_type is ProjectionType.SPHERICAL

    def test_earth_center(self):
        geo = sphere_projection.unproject_point(Vector3(0, 0, 0))
        assert geo == GeoCoordinates(0.0, 0.0, -R)

    def test_surface(self):
        world = sphere_projection.project_point(GeoCoordinates(30, 40, 100))
        assert sphere_projection.ground_distance(world) == pytest.approx(100, abs=1e-6)
        assert sphere_projection.scale_point_to_surface(world).length() == pytest.approx(R)
        assert sphere_projection.surface_normal(world).length() == pytest.approx(1.0)
        assert sphere_projection.unproject_altitude(world) == pytest.approx(100, abs=1e-6)

    def test_tangent_space(self):
        space = sphere_projection.local_tangent_space(GeoCoordinates(0, 0))
        assert_vector_close(space.x_axis, Vector3(0, 1, 0))
        assert_vector_close(space.y_axis, Vector3(0, 0, 1))
        assert_vector_close(space.z_axis, Vector3(1, 0, 0))

    @pytest.mark.parametrize("south, west, north, east", [
        (40, 10, 50, 20),
        (-50, -20, -40, -10),
        (-10, 170, 10, 200),
        (60, -170, 80, 170),
        (-10, 170, 10, -80),
    ])
    def test_box3_contains_box_points(self, south, west, north, east):
        geo_box = GeoBox(GeoCoordinates(south, west), GeoCoordinates(north, east))
        box = sphere_projection.project_box(geo_box)
        for lat in np.linspace(south, north, 5):
            for lon in np.linspace(west, geo_box.east, 12):
                point = sphere_projection.project_point(GeoCoordinates(lat, lon))
                assert box_contains(box, point, tolerance=1e-3)

    def test_box3_wrapped_box_reaches_western_meridian(self):
        geo_box = GeoBox(GeoCoordinates(-10, 170), GeoCoordinates(10, -80))
        box = sphere_projection.project_box(geo_box)
        assert box.min.y == pytest.approx(-R)
        assert box_contains(box, sphere_projection.project_point(GeoCoordinates(0, -90)))

    @pytest.mark.parametrize("south, west, north, east", [
        (40, 10, 50, 20),
        (-50, -20, -40, -10),
        (-10, 30, 10, 60),
    ])
    def test_oriented_box_contains_box_points(self, south, west, north, east):
        geo_box = GeoBox(GeoCoordinates(south, west, 0), GeoCoordinates(north, east, 1000))
        obb = sphere_projection.project_box(geo_box, OrientedBox3)
        assert obb.z_axis.length() == pytest.approx(1.0)
        for lat in np.linspace(south, north, 5):
            for lon in np.linspace(west, east, 5):
                for alt in (0, 1000):
                    point = sphere_projection.project_point(GeoCoordinates(lat, lon, alt))
                    assert obb.contains(point, tolerance=1e-3)

    def test_oriented_box_is_tighter_than_box3(self):
        geo_box = GeoBox(GeoCoordinates(40, 10), GeoCoordinates(50, 20))
        aabb = sphere_projection.project_box(geo_box)
        obb = sphere_projection.project_box(geo_box, OrientedBox3)
        aabb_size = aabb.size()
        obb_size = obb.size()
        assert obb_size.x * obb_size.y * obb_size.z < aabb_size.x * aabb_size.y * aabb_size.z

    def test_wide_oriented_box_falls_back(self):
        geo_box = GeoBox(GeoCoordinates(-10, 0), GeoCoordinates(10, 120))
        obb = sphere_projection.project_box(geo_box, OrientedBox3)
        aabb = sphere_projection.project_box(geo_box)
        assert obb.x_axis == Vector3(1, 0, 0)
        assert_vector_close(obb.position, aabb.center())

    def test_unproject_box_is_conservative(self):
        geo_box = GeoBox(GeoCoordinates(40, 10), GeoCoordinates(50, 20))
        result = sphere_projection.unproject_box(sphere_projection.project_box(geo_box))
        assert result.south <= 40
        assert result.north >= 50
        assert result.west <= 10
        assert result.east >= 20

    def test_unproject_box_around_pole(self):
        box = Box3(Vector3(-1000, -1000, R - 1000), Vector3(1000, 1000, R + 1000))
        result = sphere_projection.unproject_box(box)
        assert result.west == -180
        assert result.longitude_span == 360
        assert result.north == pytest.approx(90)

    @pytest.mark.parametrize("source", [mercator_projection, web_mercator_projection], ids=lambda p: p.name)
    def test_reproject_from_mercator(self, source):
        for lat, lon, alt in [(0, 0, 0), (45, 90, 100), (-60, -120, 10), (80, 170, 0)]:
            world = source.project_point(GeoCoordinates(lat, lon, alt))
            fast = sphere_projection.reproject_point(source, world)
            direct = sphere_projection.project_point(GeoCoordinates(lat, lon, alt))
            assert_vector_close(fast, direct, abs_tol=1e-3)

    def test_reproject_to_mercator(self):
        world = sphere_projection.project_point(GeoCoordinates(30, 40, 5))
        result = mercator_projection.reproject_point(sphere_projection, world)
        assert_vector_close(result, mercator_projection.project_point(GeoCoordinates(30, 40, 5)), abs_tol=1e-3)

    def test_reproject_same_projection_is_copy(self):
        world = Vector3(1, 2, 3)
        result = sphere_projection.reproject_point(sphere_projection, world)
        assert result == world
        assert result is not world


class TestBatch:
    """Tests for batch_project and batch_unproject."""

    def test_batch_matches_single(self):
        lats = np.array([0.0, 10.0, -20.0])
        lons = np.array([0.0, 20.0, 170.0])
        alts = np.array([0.0, 5.0, 10.0])
        world = batch_project(mercator_projection, lats, lons, alts)
        assert world.shape == (3, 3)
        expected = mercator_projection.project_point(GeoCoordinates(10.0, 20.0, 5.0)).to_array()
        np.testing.assert_allclose(world[1], expected)

        geo = batch_unproject(mercator_projection, world)
        np.testing.assert_allclose(geo[:, 0], lats, atol=1e-9)
        np.testing.assert_allclose(geo[:, 1], lons, atol=1e-9)
        np.testing.assert_allclose(geo[:, 2], alts, atol=1e-9)

    def test_default_altitude(self):
        world = batch_project(sphere_projection, [0.0], [0.0])
        np.testing.assert_allclose(world[0], [R, 0, 0], atol=1e-6)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            batch_project(mercator_projection, [0.0, 1.0], [0.0])

    def test_unproject_needs_three_columns(self):
        with pytest.raises(ValueError):
            batch_unproject(mercator_projection, np.zeros((4, 2)))
