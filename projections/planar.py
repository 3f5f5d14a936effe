"""
Simple planar projections: identity, equirectangular and central cylindrical.

Identity
--------
World coordinates are longitude and latitude in radians, altitude in meters.

Equirectangular
---------------
Longitude and latitude scale linearly into ``[0, u] x [0, u/2]`` with
``u = unit_scale``; ``geo_to_world_scale = 1 / (2 pi)``. The normalized
variant uses ``u = 1`` and is the projection of the half-quadtree tiling.

Central Cylindrical
-------------------
Longitude maps linearly to x over the equatorial circumference; latitude
maps to ``y = C/2 + R tan(phi)``, which is unbounded towards the poles. The
world extent is the square ``[0, C]^2``, so latitudes beyond
``atan(pi)`` (about 72.34 degrees) project outside it.
"""

from typing import Any, Type

import numpy as np

from common.constants import EQUATORIAL_CIRCUMFERENCE
from common.types import Box3, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections.base import EPSILON, Projection, WorldBox, check_box_type


def _flat_box(
    center: Vector3,
    half_x: float,
    half_y: float,
    geo_box: GeoBox,
    box_type: Type[WorldBox]
) -> WorldBox:
    """World box of half sizes ``half_x``/``half_y`` around ``center``, z from the altitude span."""
    check_box_type(box_type)
    altitude_span = geo_box.altitude_span
    if box_type is Box3:
        if altitude_span is not None:
            min_z = center.z - altitude_span * 0.5
            max_z = center.z + altitude_span * 0.5
        else:
            min_z = max_z = 0.0
        return Box3(
            Vector3(center.x - half_x, center.y - half_y, min_z),
            Vector3(center.x + half_x, center.y + half_y, max_z),
        )
    return OrientedBox3(
        position=center.clone(),
        extents=Vector3(half_x, half_y, max(EPSILON, (altitude_span or 0.0) * 0.5)),
    )


class _FlatProjection(Projection):
    """Shared behavior of planar projections with a flat z = altitude surface."""

    def unproject_altitude(self, world_point: Vector3) -> float:
        return world_point.z

    def unproject_box(self, world_box: Box3) -> GeoBox:
        return GeoBox.from_coordinates(
            self.unproject_point(world_box.min),
            self.unproject_point(world_box.max),
        )

    def get_scale_factor(self, world_point: Vector3) -> float:
        return 1.0

    def surface_normal(self, world_point: Vector3) -> Vector3:
        return Vector3(0.0, 0.0, 1.0)

    def ground_distance(self, world_point: Vector3) -> float:
        return world_point.z

    def scale_point_to_surface(self, world_point: Vector3) -> Vector3:
        return Vector3(world_point.x, world_point.y, 0.0)


class IdentityProjection(_FlatProjection):
    """Longitude and latitude in radians used directly as world x and y."""

    @property
    def name(self) -> str:
        return "Identity"

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        return Box3(
            Vector3(-np.pi, -np.pi / 2, min_altitude),
            Vector3(np.pi, np.pi / 2, max_altitude),
        )

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        return Vector3(
            geo.longitude_in_radians,
            geo.latitude_in_radians,
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        return GeoCoordinates.from_radians(world_point.y, world_point.x, world_point.z)

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        center = self.project_point(geo_box.center)
        return _flat_box(
            center,
            geo_box.longitude_span_in_radians * 0.5,
            geo_box.latitude_span_in_radians * 0.5,
            geo_box,
            box_type,
        )


class EquirectangularProjection(_FlatProjection):
    """Plate carree scaled into a 2:1 rectangle of width ``unit_scale``."""

    GEO_TO_WORLD_SCALE: float = 1.0 / (2.0 * np.pi)
    WORLD_TO_GEO_SCALE: float = 2.0 * np.pi

    @property
    def name(self) -> str:
        return "Equirectangular"

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        return Box3(
            Vector3(0.0, 0.0, min_altitude),
            Vector3(self.unit_scale, self.unit_scale * 0.5, max_altitude),
        )

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        scale = self.GEO_TO_WORLD_SCALE * self.unit_scale
        return Vector3(
            (geo.longitude_in_radians + np.pi) * scale,
            (geo.latitude_in_radians + np.pi * 0.5) * scale,
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        scale = self.WORLD_TO_GEO_SCALE / self.unit_scale
        return GeoCoordinates.from_radians(
            world_point.y * scale - np.pi * 0.5,
            world_point.x * scale - np.pi,
            world_point.z,
        )

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        center = self.project_point(geo_box.center)
        scale = self.GEO_TO_WORLD_SCALE * self.unit_scale
        return _flat_box(
            center,
            geo_box.longitude_span_in_radians * scale * 0.5,
            geo_box.latitude_span_in_radians * scale * 0.5,
            geo_box,
            box_type,
        )


class CylindricalProjection(_FlatProjection):
    """Central cylindrical projection onto a circumference-sized square.

    Neither conformal nor equal-area; the scale along parallels is
    ``sec(phi)``.
    """

    @property
    def name(self) -> str:
        return "Central Cylindrical"

    @property
    def radius(self) -> float:
        return self.unit_scale / (2.0 * np.pi)

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        return Box3(
            Vector3(0.0, 0.0, min_altitude),
            Vector3(self.unit_scale, self.unit_scale, max_altitude),
        )

    def _project_latitude(self, latitude_deg: float) -> float:
        return self.unit_scale * 0.5 + self.radius * float(np.tan(np.radians(latitude_deg)))

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        return Vector3(
            (geo.longitude + 180.0) / 360.0 * self.unit_scale,
            self._project_latitude(geo.latitude),
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        latitude = np.arctan((world_point.y - self.unit_scale * 0.5) / self.radius)
        longitude = world_point.x / self.unit_scale * 360.0 - 180.0
        return GeoCoordinates(float(np.degrees(latitude)), longitude, world_point.z)

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        # tan is monotonic, so the latitude edges bound y exactly
        north = self._project_latitude(geo_box.north)
        south = self._project_latitude(geo_box.south)
        center = self.project_point(geo_box.center)
        center.y = (north + south) * 0.5
        return _flat_box(
            center,
            geo_box.longitude_span / 360.0 * self.unit_scale * 0.5,
            (north - south) * 0.5,
            geo_box,
            box_type,
        )

    def get_scale_factor(self, world_point: Vector3) -> float:
        tan_latitude = (world_point.y - self.unit_scale * 0.5) / self.radius
        return float(np.sqrt(1.0 + tan_latitude * tan_latitude))


identity_projection = IdentityProjection(1.0)
equirectangular_projection = EquirectangularProjection(EQUATORIAL_CIRCUMFERENCE)
normalized_equirectangular_projection = EquirectangularProjection(1.0)
cylindrical_projection = CylindricalProjection(EQUATORIAL_CIRCUMFERENCE)
