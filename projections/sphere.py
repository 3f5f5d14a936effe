"""
Spherical projection into Earth-centered 3D space.

A geodetic point maps onto a sphere of radius ``unit_scale + altitude``:

    x = r cos(phi) cos(lambda)
    y = r cos(phi) sin(lambda)
    z = r sin(phi)

Box projection produces either an axis-aligned box from the longitude
quadrants the box crosses, scaled by the range of parallel radii, or a
tight oriented box in the tangent frame at the box center. Oriented boxes
fall back to the axis-aligned construction once the box spans 90 degrees
of longitude or more.
"""

from typing import Any, Tuple, Type

import numpy as np

from common.constants import EQUATORIAL_RADIUS
from common.logging_config import get_logger
from common.types import Box3, LocalTangentSpace, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections.base import Projection, ProjectionType, WorldBox, check_box_type
from projections.mercator import MercatorProjection, WebMercatorProjection

logger = get_logger(__name__)


def _longitude_quadrant(longitude_rad: float) -> int:
    """Index of the quarter turn holding ``longitude_rad``, counted from -pi.

    Antimeridian boxes store their east edge up to 540 degrees, so indices
    run up to 8.
    """
    quadrant = int(np.floor(2 * (longitude_rad / np.pi + 1)))
    return min(max(quadrant, 0), 8)


def _scaled_range(low: float, high: float, scale_min: float, scale_max: float) -> Tuple[float, float]:
    """Bounds of ``t * s`` for t in [low, high] and s in [scale_min, scale_max], s >= 0."""
    return (
        low * (scale_max if low < 0 else scale_min),
        high * (scale_max if high > 0 else scale_min),
    )


def _apply_basis(x_axis: Vector3, y_axis: Vector3, z_axis: Vector3, v: Vector3) -> Vector3:
    return Vector3(
        x_axis.x * v.x + y_axis.x * v.y + z_axis.x * v.z,
        x_axis.y * v.x + y_axis.y * v.y + z_axis.y * v.z,
        x_axis.z * v.x + y_axis.z * v.y + z_axis.z * v.z,
    )


class SphereProjection(Projection):
    """Projection onto a sphere of radius ``unit_scale``."""

    projection_type = ProjectionType.SPHERICAL

    @property
    def name(self) -> str:
        return "Sphere"

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        radius = self.unit_scale + max_altitude
        return Box3(Vector3(-radius, -radius, -radius), Vector3(radius, radius, radius))

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        radius = self.unit_scale + (geo.altitude if geo.altitude is not None else 0.0)
        latitude = geo.latitude_in_radians
        longitude = geo.longitude_in_radians
        cos_latitude = np.cos(latitude)
        return Vector3(
            float(radius * cos_latitude * np.cos(longitude)),
            float(radius * cos_latitude * np.sin(longitude)),
            float(radius * np.sin(latitude)),
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        parallel_radius = float(np.hypot(world_point.x, world_point.y))
        if parallel_radius == 0.0 and world_point.z == 0.0:
            # Earth center
            return GeoCoordinates.from_radians(0.0, 0.0, -self.unit_scale)

        radius = float(np.sqrt(parallel_radius * parallel_radius + world_point.z * world_point.z))
        return GeoCoordinates.from_radians(
            float(np.arctan2(world_point.z, parallel_radius)),
            float(np.arctan2(world_point.y, world_point.x)),
            radius - self.unit_scale,
        )

    def unproject_altitude(self, world_point: Vector3) -> float:
        return world_point.length() - self.unit_scale

    # ------------------------------------------------------------------
    # Boxes
    # ------------------------------------------------------------------

    def _make_box3(self, geo_box: GeoBox) -> Box3:
        max_altitude = geo_box.max_altitude
        min_altitude = geo_box.min_altitude
        r_max = self.unit_scale + (max_altitude if max_altitude is not None else 0.0)
        r_min = self.unit_scale + (min_altitude if min_altitude is not None else 0.0)

        min_longitude = np.radians(geo_box.west)
        max_longitude = np.radians(geo_box.east)

        x_min = x_max = float(np.cos(min_longitude))
        y_min = y_max = float(np.sin(min_longitude))

        # Unit circle extremes of every quadrant boundary crossed
        for quadrant in range(_longitude_quadrant(min_longitude) + 1, _longitude_quadrant(max_longitude) + 1):
            x = ((quadrant + 1) & 1) * ((quadrant & 2) - 1)
            y = (quadrant & 1) * ((quadrant & 2) - 1)
            x_min, x_max = min(x, x_min), max(x, x_max)
            y_min, y_max = min(y, y_min), max(y, y_max)

        cos_max_longitude = float(np.cos(max_longitude))
        sin_max_longitude = float(np.sin(max_longitude))
        x_min, x_max = min(cos_max_longitude, x_min), max(cos_max_longitude, x_max)
        y_min, y_max = min(sin_max_longitude, y_min), max(sin_max_longitude, y_max)

        south = np.radians(geo_box.south)
        north = np.radians(geo_box.north)
        cos_south, cos_north = float(np.cos(south)), float(np.cos(north))
        # Parallel radius over the latitude range, widest at the equator
        rho_max = r_max * (1.0 if south <= 0 <= north else max(cos_south, cos_north))
        rho_min = r_min * min(cos_south, cos_north)

        x_min, x_max = _scaled_range(x_min, x_max, rho_min, rho_max)
        y_min, y_max = _scaled_range(y_min, y_max, rho_min, rho_max)
        z_min, z_max = _scaled_range(float(np.sin(south)), float(np.sin(north)), r_min, r_max)

        return Box3(Vector3(x_min, y_min, z_min), Vector3(x_max, y_max, z_max))

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        check_box_type(box_type)
        if box_type is Box3:
            return self._make_box3(geo_box)

        if geo_box.longitude_span >= 90:
            bounds = self._make_box3(geo_box)
            return OrientedBox3(position=bounds.center(), extents=bounds.size().scaled(0.5))

        return self._make_oriented_box(geo_box)

    def _make_oriented_box(self, geo_box: GeoBox) -> OrientedBox3:
        south, west, north, east = geo_box.south, geo_box.west, geo_box.north, geo_box.east
        mid = geo_box.center
        cos_south, sin_south = np.cos(np.radians(south)), np.sin(np.radians(south))
        cos_west, sin_west = np.cos(np.radians(west)), np.sin(np.radians(west))
        cos_north, sin_north = np.cos(np.radians(north)), np.sin(np.radians(north))
        cos_east, sin_east = np.cos(np.radians(east)), np.sin(np.radians(east))
        cos_mid_x, sin_mid_x = np.cos(np.radians(mid.longitude)), np.sin(np.radians(mid.longitude))
        cos_mid_y, sin_mid_y = np.cos(np.radians(mid.latitude)), np.sin(np.radians(mid.latitude))

        # Normal at the box center and its partial derivatives
        z_axis = Vector3(float(cos_mid_x * cos_mid_y), float(sin_mid_x * cos_mid_y), float(sin_mid_y))
        x_axis = Vector3(float(-sin_mid_x), float(cos_mid_x), 0.0)
        y_axis = Vector3(float(-cos_mid_x * sin_mid_y), float(-sin_mid_x * sin_mid_y), float(cos_mid_y))

        # dot(west - east, x_axis) on the unit circle of longitudes
        west_east = cos_mid_x * (sin_west - sin_east) + sin_mid_x * (cos_east - cos_west)
        east_along_mid = cos_mid_x * cos_east + sin_mid_x * sin_east

        if south >= 0:
            # Widest along the southern edge
            width = abs(cos_south * west_east)
            min_y = cos_mid_y * sin_south - sin_mid_y * cos_south
            max_y = cos_mid_y * sin_north - sin_mid_y * cos_north * east_along_mid
        else:
            if north <= 0:
                width = abs(cos_north * west_east)
                max_y = cos_mid_y * sin_north - sin_mid_y * cos_north
            else:
                # Straddles the equator
                width = abs(west_east)
                max_y = cos_mid_y * sin_north - sin_mid_y * cos_north * east_along_mid
            min_y = cos_mid_y * sin_south - sin_mid_y * cos_south * east_along_mid

        max_altitude = geo_box.max_altitude
        min_altitude = geo_box.min_altitude
        r_max = (self.unit_scale + (max_altitude if max_altitude is not None else 0.0)) * 0.5
        r_min = (self.unit_scale + (min_altitude if min_altitude is not None else 0.0)) * 0.5

        d = cos_mid_y * east_along_mid
        min_z = min(cos_north * d + sin_north * sin_mid_y, cos_south * d + sin_south * sin_mid_y)

        extents = Vector3(
            float(width * r_max),
            float((max_y - min_y) * r_max),
            float(r_max - min_z * r_min),
        )
        top_center = _apply_basis(x_axis, y_axis, z_axis, Vector3(0.0, float((min_y + max_y) * r_max), r_max + r_max))
        position = top_center.sub(z_axis.scaled(extents.z))

        return OrientedBox3(
            position=position,
            x_axis=x_axis,
            y_axis=y_axis,
            z_axis=z_axis,
            extents=extents,
        )

    def unproject_box(self, world_box: Box3) -> GeoBox:
        """Conservative geo box of all points inside ``world_box``.

        Longitudes come from the box corners unless the box contains the
        polar axis, in which case every longitude is covered. Latitudes and
        altitudes come from the nearest and farthest points of the box.
        """
        box_min, box_max = world_box.min, world_box.max

        nearest = Vector3(
            min(max(0.0, box_min.x), box_max.x),
            min(max(0.0, box_min.y), box_max.y),
            min(max(0.0, box_min.z), box_max.z),
        )
        corners = [
            Vector3(x, y, z)
            for x in (box_min.x, box_max.x)
            for y in (box_min.y, box_max.y)
            for z in (box_min.z, box_max.z)
        ]
        min_altitude = nearest.length() - self.unit_scale
        max_altitude = max(corner.length() for corner in corners) - self.unit_scale

        rho_min = float(np.hypot(nearest.x, nearest.y))
        rho_max = max(float(np.hypot(corner.x, corner.y)) for corner in corners)

        def latitude(z: float, toward_pole: bool) -> float:
            rho = rho_min if toward_pole else rho_max
            return float(np.degrees(np.arctan2(z, rho)))

        north = latitude(box_max.z, box_max.z > 0)
        south = latitude(box_min.z, box_min.z < 0)

        if rho_min == 0.0:
            logger.debug("World box contains the polar axis, covering all longitudes")
            west, east = -180.0, 180.0
        else:
            center = world_box.center()
            reference = float(np.arctan2(center.y, center.x))
            offsets = [
                (float(np.arctan2(y, x)) - reference + np.pi) % (2 * np.pi) - np.pi
                for x in (box_min.x, box_max.x)
                for y in (box_min.y, box_max.y)
            ]
            west = float(np.degrees(reference + min(offsets)))
            east = float(np.degrees(reference + max(offsets)))

        return GeoBox.from_coordinates(
            GeoCoordinates(south, west, min_altitude),
            GeoCoordinates(north, east, max_altitude),
        )

    # ------------------------------------------------------------------
    # Surface
    # ------------------------------------------------------------------

    def get_scale_factor(self, world_point: Vector3) -> float:
        return 1.0

    def ground_distance(self, world_point: Vector3) -> float:
        return world_point.length() - self.unit_scale

    def scale_point_to_surface(self, world_point: Vector3) -> Vector3:
        length = world_point.length()
        return world_point.scaled(self.unit_scale / (length or 1.0))

    def surface_normal(self, world_point: Vector3) -> Vector3:
        length = world_point.length()
        return world_point.scaled(1.0 / (length or 1.0))

    def reproject_point(self, source_projection: Projection, world_point: Vector3) -> Vector3:
        """Closed form from (web) Mercator world space sharing this sphere's radius."""
        if isinstance(source_projection, MercatorProjection) and np.isclose(
            source_projection.unit_scale, 2 * np.pi * self.unit_scale
        ):
            r = self.unit_scale
            mx = world_point.x / r - np.pi
            my = world_point.y / r - np.pi
            w = np.exp(my)
            d = w * w
            gx = 2 * w / (d + 1)
            gy = (d - 1) / (d + 1)
            scale = r + world_point.z
            z = gy * scale
            if isinstance(source_projection, WebMercatorProjection):
                z = -z
            return Vector3(float(np.cos(mx) * gx * scale), float(np.sin(mx) * gx * scale), float(z))

        return super().reproject_point(source_projection, world_point)

    def local_tangent_space(self, point: Any) -> LocalTangentSpace:
        if isinstance(point, Vector3):
            position = point.clone()
            geo = self.unproject_point(point)
        else:
            geo = self._geo(point)
            position = self.project_point(geo)

        latitude = geo.latitude_in_radians
        longitude = geo.longitude_in_radians
        cos_lon, sin_lon = float(np.cos(longitude)), float(np.sin(longitude))
        cos_lat, sin_lat = float(np.cos(latitude)), float(np.sin(latitude))

        return LocalTangentSpace(
            position=position,
            x_axis=Vector3(-sin_lon, cos_lon, 0.0),
            y_axis=Vector3(-cos_lon * sin_lat, -sin_lon * sin_lat, cos_lat),
            z_axis=Vector3(cos_lon * cos_lat, sin_lon * cos_lat, sin_lat),
        )


sphere_projection = SphereProjection(EQUATORIAL_RADIUS)
