"""
Spherical Transverse Mercator projection.

The Mercator construction rotated by 90 degrees: the cylinder touches the
sphere along the central meridian, so the singular points move from the
poles to the equator at longitudes -90 and +90.

Pole Avoidance
--------------
Points within ``POLE_RADIUS`` degrees of a singular point are pushed onto
the circle of that radius before projecting. The radius is chosen so that
the world square closes exactly like the regular Mercator square does at
its maximum latitude.

Seams
-----
Longitude is reduced modulo 360 and the number of whole turns is kept as an
integer offset added to x, so that points east of the antimeridian land in
the next copy of the world square and round trips stay exact.

World space is ``[0, C]^2`` per copy, ``C`` the equatorial circumference.
The projected square is split into 8 monotonic regions by the lines
x = C/2 and y = C/4, C/2, 3C/4; box projection and unprojection sample the
seams they cross to catch interior extrema.
"""

from typing import Any, List, Type

import numpy as np

from common.constants import EQUATORIAL_CIRCUMFERENCE, MERCATOR_MAXIMUM_LATITUDE
from common.types import Box3, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from projections.base import Projection, WorldBox, check_box_type

# Offsets used to sample both sides of a discontinuity in box projection
COPY_SEAM_STEP_DEG: float = 1e-9
EQUATOR_STEP_DEG: float = 1e-9


class TransverseMercatorUtils:
    """Constants and point alignment helpers."""

    POLE_EDGE: float = MERCATOR_MAXIMUM_LATITUDE
    POLE_EDGE_DEG: float = float(np.degrees(POLE_EDGE))
    POLE_RADIUS: float = 90.0 - POLE_EDGE_DEG
    POLE_RADIUS_SQ: float = POLE_RADIUS ** 2

    @staticmethod
    def align_latitude(points: List[GeoCoordinates], reference_point: GeoCoordinates) -> None:
        """Nudge points on the equator towards the hemisphere of ``reference_point``."""
        epsilon = 1e-9
        for point in points:
            if point.latitude == 0:
                point.latitude = reference_point.latitude * epsilon

    @staticmethod
    def align_longitude(points: List[GeoCoordinates], reference_point: GeoCoordinates) -> None:
        """Put points on the antimeridian on the same side as ``reference_point``."""
        bad = 180 if reference_point.longitude < 0 else -180
        good = -180 if reference_point.longitude < 0 else 180
        for point in points:
            if point.longitude == bad:
                point.longitude = good


class TransverseMercatorProjection(Projection):
    """Transverse Mercator on the unit sphere scaled to the circumference."""

    @property
    def name(self) -> str:
        return "Transverse Mercator"

    @staticmethod
    def clamp_geo_point(geo_point: GeoCoordinates) -> GeoCoordinates:
        """Push a point out of the disk around the nearest singular point.

        Returns ``geo_point`` itself when it is outside every disk.
        """
        latitude = geo_point.latitude
        longitude = geo_point.longitude
        radius = TransverseMercatorUtils.POLE_RADIUS

        nearest_quarter = round(longitude / 90)
        # Offset from the singular point to the input point
        delta_lon = longitude - nearest_quarter * 90
        if nearest_quarter % 2 == 0 or abs(delta_lon) > radius:
            return geo_point

        delta_lat = latitude
        distance_sq = delta_lon * delta_lon + delta_lat * delta_lat
        if distance_sq < TransverseMercatorUtils.POLE_RADIUS_SQ:
            distance = np.sqrt(distance_sq)
            if distance == 0:
                # Exactly on the singular point, move east
                return GeoCoordinates(latitude, longitude + radius, geo_point.altitude)
            scale = (radius - distance) / distance
            return GeoCoordinates(
                float(latitude + delta_lat * scale),
                float(longitude + delta_lon * scale),
                geo_point.altitude,
            )
        return geo_point

    def get_scale_factor(self, world_point: Vector3) -> float:
        return float(np.cosh((world_point.x / self.unit_scale - 0.5) * 2 * np.pi))

    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        return Box3(
            Vector3(0.0, 0.0, min_altitude),
            Vector3(self.unit_scale, self.unit_scale, max_altitude),
        )

    def project_point(self, geo_point: Any) -> Vector3:
        geo = self._geo(geo_point)
        clamped = self.clamp_geo_point(geo)
        normal_lon = clamped.longitude / 360 + 0.5
        offset = 0 if normal_lon == 1 else int(np.floor(normal_lon))
        phi = np.radians(clamped.latitude)
        lam = np.radians(clamped.longitude - offset * 360)

        b = np.cos(phi) * np.sin(lam)
        x = np.arctanh(b)
        y = np.arctan2(np.tan(phi), np.cos(lam))

        out_scale = 0.5 / np.pi
        return Vector3(
            float(self.unit_scale * (np.clip(x * out_scale + 0.5, 0, 1) + offset)),
            float(self.unit_scale * np.clip(y * out_scale + 0.5, 0, 1)),
            geo.altitude if geo.altitude is not None else 0.0,
        )

    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        tau = 2 * np.pi
        nx = world_point.x / self.unit_scale
        ny = world_point.y / self.unit_scale
        offset = 0 if nx == 1 else int(np.floor(nx))
        x = tau * (nx - 0.5 - offset)
        y = tau * (ny - 0.5)

        phi = np.arcsin(np.sin(y) / np.cosh(x))
        lam = np.arctan2(np.sinh(x), np.cos(y)) + offset * tau
        return GeoCoordinates.from_radians(float(phi), float(lam), world_point.z or 0.0)

    def unproject_altitude(self, world_point: Vector3) -> float:
        return world_point.z

    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        check_box_type(box_type)
        north, south, east, west = geo_box.north, geo_box.south, geo_box.east, geo_box.west

        points = [
            geo_box.center,
            geo_box.north_east.clone(),
            geo_box.south_west.clone(),
            GeoCoordinates(south, east),
            GeoCoordinates(north, west),
        ]

        # Seams between the monotonic regions crossed by the box. Antimeridian
        # boxes store east up to 540, so seams are taken from every copy.
        seam_longitudes = [
            90.0 * quarter
            for quarter in range(int(np.floor(west / 90)), int(np.ceil(east / 90)) + 1)
            if west < 90.0 * quarter < east
        ]
        # East of a copy boundary the points land in the next world square
        seam_longitudes += [
            longitude + COPY_SEAM_STEP_DEG
            for longitude in seam_longitudes
            if (longitude - 180) % 360 == 0
        ]
        for longitude in seam_longitudes:
            points += [GeoCoordinates(north, longitude), GeoCoordinates(south, longitude)]

        if south < 0 < north:
            # y jumps across the equator where the box meets the 180 meridian
            for longitude in [west, east] + seam_longitudes:
                points += [
                    GeoCoordinates(0, longitude),
                    GeoCoordinates(EQUATOR_STEP_DEG, longitude),
                    GeoCoordinates(-EQUATOR_STEP_DEG, longitude),
                ]
        else:
            TransverseMercatorUtils.align_latitude(points, points[0])

        bounds = Box3.from_points(self.project_point(point) for point in points)
        if box_type is Box3:
            return bounds
        return OrientedBox3(position=bounds.center(), extents=bounds.size().scaled(0.5))

    def unproject_box(self, world_box: Box3) -> GeoBox:
        scale = self.unit_scale
        box_min = world_box.min
        box_max = world_box.max
        points = [
            Vector3((box_min.x + box_max.x) / 2, (box_min.y + box_max.y) / 2, 0.0),
            box_min,
            box_max,
            Vector3(box_min.x, box_max.y, 0.0),
            Vector3(box_max.x, box_min.y, 0.0),
        ]

        center = 0.5 * scale
        contains_center_x = box_min.x < center < box_max.x
        for seam_y in (center, 0.25 * scale, 0.75 * scale):
            if box_min.y < seam_y < box_max.y:
                points.append(Vector3(box_min.x, seam_y, 0.0))
                points.append(Vector3(box_max.x, seam_y, 0.0))
                if contains_center_x:
                    points.append(Vector3(center, seam_y, 0.0))

        geo_points = [self.unproject_point(point) for point in points]
        TransverseMercatorUtils.align_longitude(geo_points, geo_points[0])

        latitudes = [g.latitude for g in geo_points]
        # Longitude is undefined at the poles
        longitudes = [g.longitude for g in geo_points if abs(g.latitude) < 90]
        altitudes = [g.altitude if g.altitude is not None else 0.0 for g in geo_points]

        return GeoBox.from_coordinates(
            GeoCoordinates(min(latitudes), min(longitudes), min(altitudes)),
            GeoCoordinates(max(latitudes), max(longitudes), max(altitudes)),
        )

    def ground_distance(self, world_point: Vector3) -> float:
        return world_point.z

    def scale_point_to_surface(self, world_point: Vector3) -> Vector3:
        return Vector3(world_point.x, world_point.y, 0.0)

    def surface_normal(self, world_point: Vector3) -> Vector3:
        return Vector3(0.0, 0.0, -1.0)


transverse_mercator_projection = TransverseMercatorProjection(EQUATORIAL_CIRCUMFERENCE)
