"""
Subdivision schemes.

A subdivision scheme states how many children a tile splits into at a
level and how many tiles exist at a level along each axis. Schemes are
stateless and shared as module-level instances.
"""

from abc import ABC, abstractmethod


class SubdivisionScheme(ABC):
    """Abstract base class for tile subdivision rules."""

    @abstractmethod
    def get_subdivision_x(self, level: int) -> int:
        """Number of children along x of a tile at ``level``."""
        pass

    @abstractmethod
    def get_subdivision_y(self, level: int) -> int:
        """Number of children along y of a tile at ``level``."""
        pass

    @abstractmethod
    def get_level_dimension_x(self, level: int) -> int:
        """Number of tile columns at ``level``."""
        pass

    @abstractmethod
    def get_level_dimension_y(self, level: int) -> int:
        """Number of tile rows at ``level``."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class QuadTreeSubdivisionScheme(SubdivisionScheme):
    """Every tile splits into 2 x 2 children; 2^level tiles per axis."""

    def get_subdivision_x(self, level: int) -> int:
        return 2

    def get_subdivision_y(self, level: int) -> int:
        return 2

    def get_level_dimension_x(self, level: int) -> int:
        return 1 << level

    def get_level_dimension_y(self, level: int) -> int:
        return 1 << level


class HalfQuadTreeSubdivisionScheme(SubdivisionScheme):
    """Quadtree whose root splits only along x.

    Level 0 has one tile, level 1 has two tiles side by side, and from
    there on every tile splits into 2 x 2, giving 2^level columns and
    2^(level - 1) rows.
    """

    def get_subdivision_x(self, level: int) -> int:
        return 2

    def get_subdivision_y(self, level: int) -> int:
        return 1 if level == 0 else 2

    def get_level_dimension_x(self, level: int) -> int:
        return 1 << level

    def get_level_dimension_y(self, level: int) -> int:
        return 1 << (level - 1) if level != 0 else 1


quad_tree_subdivision_scheme = QuadTreeSubdivisionScheme()
half_quad_tree_subdivision_scheme = HalfQuadTreeSubdivisionScheme()
