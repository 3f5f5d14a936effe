"""
Projection Interface.

A projection is a stateless transform between geodetic space (degrees and
meters) and a Cartesian world space. Each projection carries one immutable
``unit_scale`` that fixes the physical size of its world space, typically
the equatorial radius or circumference. Instances are shared module-level
singletons; no method mutates the projection or its arguments.

World Space Conventions
-----------------------
- Planar projections place longitude on x, latitude on y and altitude on z.
- Spherical projections place the Earth center at the origin with the
  north pole on +z and the prime meridian on +x.
- Every method returns fresh value objects.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Type, Union

import numpy as np
from numpy.typing import NDArray

from common.exceptions import InvalidBoundingBoxError
from common.types import Box3, LocalTangentSpace, OrientedBox3, Vector3
from geospatial.coordinate_models import GeoCoordinates, to_geo_coordinates
from geospatial.geo_box import GeoBox

# Smallest positive extent for flat oriented boxes
EPSILON: float = float(np.finfo(np.float64).eps)

WorldBox = Union[Box3, OrientedBox3]


class ProjectionType(Enum):
    """Shape of a projection's world space."""
    PLANAR = "planar"
    SPHERICAL = "spherical"


def check_box_type(box_type: Type[Any]) -> None:
    """Raise InvalidBoundingBoxError unless ``box_type`` is a supported box class."""
    if box_type is not Box3 and box_type is not OrientedBox3:
        raise InvalidBoundingBoxError(f"Invalid bounding box type: {box_type!r}")


class Projection(ABC):
    """Abstract base class for projections.

    Parameters
    ----------
    unit_scale : float
        Scale of the world space, in meters per world unit extent.
    """

    projection_type: ProjectionType = ProjectionType.PLANAR

    def __init__(self, unit_scale: float):
        self._unit_scale = float(unit_scale)

    @property
    def unit_scale(self) -> float:
        return self._unit_scale

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the projection."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(unit_scale={self._unit_scale!r})"

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    @abstractmethod
    def world_extent(self, min_altitude: float, max_altitude: float) -> Box3:
        """Bounds of the world space for the given altitude range.

        Parameters
        ----------
        min_altitude, max_altitude : float
            Altitude range in meters.

        Returns
        -------
        Box3
            Axis-aligned bounds of all projectable points.
        """
        pass

    @abstractmethod
    def project_point(self, geo_point: Any) -> Vector3:
        """Project a geodetic point into world space.

        Parameters
        ----------
        geo_point : GeoCoordinates or coordinate literal
            Point in degrees and meters. A missing altitude is read as 0.

        Returns
        -------
        Vector3
            World position.
        """
        pass

    @abstractmethod
    def unproject_point(self, world_point: Vector3) -> GeoCoordinates:
        """Convert a world position back to geodetic coordinates."""
        pass

    @abstractmethod
    def unproject_altitude(self, world_point: Vector3) -> float:
        """Altitude in meters of a world position."""
        pass

    # ------------------------------------------------------------------
    # Boxes
    # ------------------------------------------------------------------

    @abstractmethod
    def project_box(self, geo_box: GeoBox, box_type: Type[WorldBox] = Box3) -> WorldBox:
        """Bound a geo box in world space.

        Parameters
        ----------
        geo_box : GeoBox
            Box to project.
        box_type : type
            ``Box3`` for an axis-aligned box or ``OrientedBox3`` for an
            oriented one.

        Raises
        ------
        InvalidBoundingBoxError
            If ``box_type`` is neither supported box class.
        """
        pass

    @abstractmethod
    def unproject_box(self, world_box: Box3) -> GeoBox:
        """Geo box covering an axis-aligned world box."""
        pass

    # ------------------------------------------------------------------
    # Surface
    # ------------------------------------------------------------------

    @abstractmethod
    def get_scale_factor(self, world_point: Vector3) -> float:
        """Ratio of world length to ground length at ``world_point``."""
        pass

    @abstractmethod
    def surface_normal(self, world_point: Vector3) -> Vector3:
        pass

    @abstractmethod
    def ground_distance(self, world_point: Vector3) -> float:
        """Signed distance of ``world_point`` from the surface."""
        pass

    @abstractmethod
    def scale_point_to_surface(self, world_point: Vector3) -> Vector3:
        """Project ``world_point`` onto the surface along its normal."""
        pass

    def local_tangent_space(self, point: Union[GeoCoordinates, Vector3]) -> LocalTangentSpace:
        """Tangent frame at a geo or world point.

        Planar projections share the world axes everywhere.
        """
        position = point.clone() if isinstance(point, Vector3) else self.project_point(point)
        return LocalTangentSpace(
            position=position,
            x_axis=Vector3(1.0, 0.0, 0.0),
            y_axis=Vector3(0.0, 1.0, 0.0),
            z_axis=Vector3(0.0, 0.0, 1.0),
        )

    def reproject_point(self, source_projection: 'Projection', world_point: Vector3) -> Vector3:
        """Convert a world position of ``source_projection`` into this world space.

        The generic path goes through geodetic space; subclasses provide
        closed-form shortcuts where one exists.
        """
        if source_projection is self:
            return world_point.clone()
        return self.project_point(source_projection.unproject_point(world_point))

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def _geo(geo_point: Any) -> GeoCoordinates:
        return to_geo_coordinates(geo_point)


def batch_project(
    projection: Projection,
    latitudes: NDArray[np.float64],
    longitudes: NDArray[np.float64],
    altitudes: Optional[NDArray[np.float64]] = None
) -> NDArray[np.float64]:
    """Project arrays of coordinates.

    Parameters
    ----------
    projection : Projection
        Projection to use.
    latitudes, longitudes : ndarray
        Coordinates in degrees, shape (N,).
    altitudes : ndarray, optional
        Altitudes in meters, shape (N,). Defaults to zero.

    Returns
    -------
    ndarray
        World positions, shape (N, 3).
    """
    latitudes = np.asarray(latitudes, dtype=np.float64)
    longitudes = np.asarray(longitudes, dtype=np.float64)
    if altitudes is None:
        altitudes = np.zeros_like(latitudes)
    altitudes = np.asarray(altitudes, dtype=np.float64)
    if not (latitudes.shape == longitudes.shape == altitudes.shape):
        raise ValueError(
            f"Coordinate arrays must share a shape, got {latitudes.shape}, "
            f"{longitudes.shape} and {altitudes.shape}"
        )

    result = np.empty((latitudes.size, 3), dtype=np.float64)
    for i, (lat, lon, alt) in enumerate(zip(latitudes.ravel(), longitudes.ravel(), altitudes.ravel())):
        result[i] = projection.project_point(GeoCoordinates(float(lat), float(lon), float(alt))).to_array()
    return result


def batch_unproject(
    projection: Projection,
    world_points: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Unproject an (N, 3) array of world positions.

    Returns
    -------
    ndarray
        Columns latitude, longitude (degrees) and altitude (meters), shape (N, 3).
    """
    world_points = np.atleast_2d(np.asarray(world_points, dtype=np.float64))
    if world_points.shape[1] != 3:
        raise ValueError(f"Expected world points of shape (N, 3), got {world_points.shape}")

    result = np.empty_like(world_points)
    for i, row in enumerate(world_points):
        geo = projection.unproject_point(Vector3.from_array(row))
        result[i] = (geo.latitude, geo.longitude, geo.altitude if geo.altitude is not None else 0.0)
    return result
