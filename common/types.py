"""
Geometric Value Types for World Space.

This module defines the small set of value types that projections exchange
with their callers: a 3-component vector, an axis-aligned box and an
oriented box in world space, and the local tangent frame at a point.

Design Rationale
----------------
Projections return fresh instances from every call and never keep
references to their arguments, so instances can be handed to callers and
mutated freely. All values are plain floats in the projection's world units.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union
import numpy as np
from numpy.typing import NDArray


# [longitude, latitude] or [longitude, latitude, altitude] (GeoJSON order)
GeoPointLike = Union[Tuple[float, float], Tuple[float, float, float], Sequence[float]]


@dataclass
class Vector3:
    """A point or direction in world space.

    Attributes
    ----------
    x, y, z : float
        Components in projection world units.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def set(self, x: float, y: float, z: float) -> 'Vector3':
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        return self

    def copy(self, other: 'Vector3') -> 'Vector3':
        """Copy the components of ``other`` into this vector."""
        return self.set(other.x, other.y, other.z)

    def clone(self) -> 'Vector3':
        return Vector3(self.x, self.y, self.z)

    def add(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> 'Vector3':
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector3') -> 'Vector3':
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return float(np.sqrt(self.dot(self)))

    def normalized(self) -> 'Vector3':
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0.0:
            return Vector3()
        return self.scaled(1.0 / length)

    def to_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Iterable[float]) -> 'Vector3':
        x, y, z = values
        return cls(float(x), float(y), float(z))


@dataclass
class Box3:
    """Axis-aligned box in world space.

    An empty box has ``min`` greater than ``max`` on some axis; growing an
    empty box by a point makes it the degenerate box at that point.
    """
    min: Vector3 = field(default_factory=lambda: Vector3(np.inf, np.inf, np.inf))
    max: Vector3 = field(default_factory=lambda: Vector3(-np.inf, -np.inf, -np.inf))

    @classmethod
    def from_points(cls, points: Iterable[Vector3]) -> 'Box3':
        box = cls()
        for point in points:
            box.expand_by_point(point)
        return box

    def is_empty(self) -> bool:
        return self.max.x < self.min.x or self.max.y < self.min.y or self.max.z < self.min.z

    def expand_by_point(self, point: Vector3) -> 'Box3':
        """Grow the box in place so that it contains ``point``."""
        self.min.set(min(self.min.x, point.x), min(self.min.y, point.y), min(self.min.z, point.z))
        self.max.set(max(self.max.x, point.x), max(self.max.y, point.y), max(self.max.z, point.z))
        return self

    def center(self) -> Vector3:
        return self.min.add(self.max).scaled(0.5)

    def size(self) -> Vector3:
        if self.is_empty():
            return Vector3()
        return self.max.sub(self.min)

    def contains_point(self, point: Vector3) -> bool:
        return (
            self.min.x <= point.x <= self.max.x
            and self.min.y <= point.y <= self.max.y
            and self.min.z <= point.z <= self.max.z
        )

    def clone(self) -> 'Box3':
        return Box3(self.min.clone(), self.max.clone())


@dataclass
class OrientedBox3:
    """Oriented box in world space.

    Attributes
    ----------
    position : Vector3
        Center of the box.
    x_axis, y_axis, z_axis : Vector3
        Orthonormal box axes.
    extents : Vector3
        Half sizes along each axis.
    """
    position: Vector3 = field(default_factory=Vector3)
    x_axis: Vector3 = field(default_factory=lambda: Vector3(1.0, 0.0, 0.0))
    y_axis: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    z_axis: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))
    extents: Vector3 = field(default_factory=Vector3)

    def axes(self) -> List[Vector3]:
        return [self.x_axis, self.y_axis, self.z_axis]

    def center(self) -> Vector3:
        return self.position.clone()

    def size(self) -> Vector3:
        return self.extents.scaled(2.0)

    def rotation_matrix(self) -> NDArray[np.float64]:
        """3x3 matrix whose columns are the box axes."""
        return np.column_stack([axis.to_array() for axis in self.axes()])

    def contains(self, point: Vector3, tolerance: float = 0.0) -> bool:
        offset = point.sub(self.position)
        limits = (self.extents.x, self.extents.y, self.extents.z)
        for axis, limit in zip(self.axes(), limits):
            if abs(offset.dot(axis)) > limit + tolerance:
                return False
        return True

    def distance_to_point_squared(self, point: Vector3) -> float:
        offset = point.sub(self.position)
        limits = (self.extents.x, self.extents.y, self.extents.z)
        distance_squared = 0.0
        for axis, limit in zip(self.axes(), limits):
            excess = abs(offset.dot(axis)) - limit
            if excess > 0.0:
                distance_squared += excess * excess
        return distance_squared

    def distance_to_point(self, point: Vector3) -> float:
        return float(np.sqrt(self.distance_to_point_squared(point)))


@dataclass
class LocalTangentSpace:
    """Orthonormal frame at a point of a projection's surface.

    ``z_axis`` is the surface normal, ``x_axis`` points east and
    ``y_axis`` points north in the projection's own orientation.
    """
    position: Vector3
    x_axis: Vector3
    y_axis: Vector3
    z_axis: Vector3
