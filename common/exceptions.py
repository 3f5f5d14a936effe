"""
Error types raised by the geodetic and tiling core.

Each error subclasses the built-in exception a caller would already expect,
so ``except ValueError`` keeps working for argument problems.
"""


class InvalidFormatError(ValueError):
    """Input could not be interpreted as the requested literal shape."""


class InvalidOperationError(RuntimeError):
    """Operation is not defined for this value (e.g. parent of the root tile)."""


class InvalidCoordinatesError(ValueError):
    """Coordinates could not be resolved inside a projection's world extent."""


class InvalidBoundingBoxError(TypeError):
    """Requested output bounding box type is not supported."""


class InvalidPolygonError(ValueError):
    """Polygon ring has fewer than three distinct vertices."""
