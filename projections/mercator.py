"""
Spherical Mercator projections.

Both variants map the sphere onto the square ``[0, C]^2`` where ``C`` is the
equatorial circumference. Latitude is clamped to the Mercator maximum
latitude (about 85.0511 degrees), where the square closes.

- ``MercatorProjection``: y grows northward, origin at the south-west corner.
- ``WebMercatorProjection``: y grows southward, origin at the north-west
  corner, matching raster tile pixel rows. Converting between the two is
  ``y -> C - y``.

Box projection uses the latitude edges and not just the two corners, since
latitude is compressed nonlinearly.

References
----------
- IOGP Guidance Note 7-2, Popular Visualisation Pseudo Mercator (EPSG:1024).
"""

from typing import Any, Type

import numpy as np

from common.constants import EQUATORIAL_CIRCUMFERENCE, MERCATOR_MAXIMUM_LATITUDE
from common.types import Box3, LocalTangentSpace, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections.base import EPSILON, Projection, WorldBox, check_box_type


class MercatorConstants:
    # atan(sinh(pi))
    MAXIMUM_LATITUDE: float = MERCATOR_MAXIMUM_LATITUDE


def latitude_clamp(latitude_rad: float) -> float:
    return min(max(-MercatorConstants.MAXIMUM_LATITUDE, latitude_rad), MercatorConstants.MAXIMUM_LATITUDE)


def latitude_project(latitude_rad: float) -> float:
    """Mercator y of a latitude, normalized to [-1, 1] over the clamped range."""
    return float(np.log(np.tan(np.pi * 0.25 + latitude_rad * 0.5)) / np.pi)


def latitude_clamp_project(latitude_rad: float) -> float:
    return latitude_project(latitude_clamp(latitude_rad))


def unproject_latitude(y: float) -> float:
    return float(2.0 * np.arctan(np.exp(np.pi * y)) - np.pi * 0.5)


class MercatorProjection(Projection):
    """Mercator projection with y pointing north."""

    @property
    def name(self) -> str:
        return "Mercator"

    def get_scale_factor(self, world_point: Vector3) -> float:
        return float(np.cosh(2 * np.pi * (world_point.y / self.unit_scale - 0.5)))

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        return Box3(
            Vector3(0.0, 0.0, min_altitude),
            Vector3(self.unit_scale, self.unit_scale, max_altitude),
        )

    def _world_y(self, latitude_deg: float) -> float:
        return (latitude_clamp_project(np.radians(latitude_deg)) * 0.5 + 0.5) * self.unit_scale

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        return Vector3(
            (geo.longitude + 180) / 360 * self.unit_scale,
            self._world_y(geo.latitude),
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        return GeoCoordinates.from_radians(
            unproject_latitude((world_point.y / self.unit_scale - 0.5) * 2.0),
            (world_point.x / self.unit_scale) * 2 * np.pi - np.pi,
            world_point.z,
        )

    def unproject_altitude(self, world_point: Vector3) -> float:
        return world_point.z

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        check_box_type(box_type)
        world_center = self.project_point(geo_box.center)
        world_north = self._world_y(geo_box.north)
        world_south = self._world_y(geo_box.south)
        world_center.y = (world_north + world_south) * 0.5

        latitude_span = world_north - world_south
        longitude_span = geo_box.longitude_span / 360 * self.unit_scale
        altitude_span = geo_box.altitude_span

        if box_type is Box3:
            if altitude_span is not None:
                min_z = world_center.z - altitude_span * 0.5
                max_z = world_center.z + altitude_span * 0.5
            else:
                min_z = max_z = 0.0
            return Box3(
                Vector3(world_center.x - longitude_span * 0.5, world_center.y - latitude_span * 0.5, min_z),
                Vector3(world_center.x + longitude_span * 0.5, world_center.y + latitude_span * 0.5, max_z),
            )

        return OrientedBox3(
            position=world_center,
            extents=Vector3(
                longitude_span * 0.5,
                latitude_span * 0.5,
                max(EPSILON, (altitude_span or 0.0) * 0.5),
            ),
        )

    def unproject_box(self, world_box: Box3) -> GeoBox:
        return GeoBox.from_coordinates(
            self.unproject_point(world_box.min),
            self.unproject_point(world_box.max),
        )

    def ground_distance(self, world_point: Vector3) -> float:
        return world_point.z

    def scale_point_to_surface(self, world_point: Vector3) -> Vector3:
        return Vector3(world_point.x, world_point.y, 0.0)

    def surface_normal(self, world_point: Vector3) -> Vector3:
        return Vector3(0.0, 0.0, 1.0)

    def reproject_point(self, source_projection: Projection, world_point: Vector3) -> Vector3:
        # Mercator and web Mercator differ only in the direction of y
        if (
            source_projection is not self
            and isinstance(source_projection, MercatorProjection)
            and type(source_projection) is not type(self)
            and np.isclose(source_projection.unit_scale, self.unit_scale)
        ):
            return Vector3(world_point.x, self.unit_scale - world_point.y, world_point.z)
        return super().reproject_point(source_projection, world_point)


class WebMercatorProjection(MercatorProjection):
    """Mercator projection with y pointing south, as used by raster tiles."""

    @property
    def name(self) -> str:
        return "Web Mercator"

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        sy = np.sin(latitude_clamp(geo.latitude_in_radians))
        return Vector3(
            (geo.longitude + 180) / 360 * self.unit_scale,
            float((0.5 - np.log((1 + sy) / (1 - sy)) / (4 * np.pi)) * self.unit_scale),
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        x = world_point.x / self.unit_scale - 0.5
        y = 0.5 - world_point.y / self.unit_scale
        longitude = 360 * x
        latitude = 90 - 360 * np.arctan(np.exp(-y * 2 * np.pi)) / np.pi
        return GeoCoordinates(float(latitude), longitude, world_point.z)

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        box = super().project_box(geo_box, box_type)
        if isinstance(box, Box3):
            max_y = box.max.y
            box.max.y = self.unit_scale - box.min.y
            box.min.y = self.unit_scale - max_y
        else:
            box.y_axis = Vector3(0.0, -1.0, 0.0)
            box.z_axis = Vector3(0.0, 0.0, -1.0)
            box.position.y = self.unit_scale - box.position.y
        return box

    def unproject_box(self, world_box: Box3) -> GeoBox:
        min_geo = self.unproject_point(world_box.min)
        max_geo = self.unproject_point(world_box.max)
        return GeoBox(
            GeoCoordinates(max_geo.latitude, min_geo.longitude, min_geo.altitude),
            GeoCoordinates(min_geo.latitude, max_geo.longitude, max_geo.altitude),
        )

    def get_scale_factor(self, world_point: Vector3) -> float:
        return float(np.cosh(2 * np.pi * (0.5 - world_point.y / self.unit_scale)))

    def surface_normal(self, world_point: Vector3) -> Vector3:
        return Vector3(0.0, 0.0, -1.0)

    def local_tangent_space(self, point: Any) -> LocalTangentSpace:
        position = point.clone() if isinstance(point, Vector3) else self.project_point(point)
        return LocalTangentSpace(
            position=position,
            x_axis=Vector3(1.0, 0.0, 0.0),
            y_axis=Vector3(0.0, -1.0, 0.0),
            z_axis=Vector3(0.0, 0.0, -1.0),
        )


mercator_projection = MercatorProjection(EQUATORIAL_CIRCUMFERENCE)
web_mercator_projection = WebMercatorProjection(EQUATORIAL_CIRCUMFERENCE)
