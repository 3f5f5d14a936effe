"""
Common utilities and infrastructure for the geodetic tiling core.

This package provides foundational components used across all modules:
- Earth model constants with provenance
- Unit registry for angle and length inputs
- World-space value types (vectors, boxes)
- Error types and logging
"""

from common.constants import EarthConstants
from common.units import ureg, Q_, validate_units, ensure_quantity
from common.types import (
    Vector3,
    Box3,
    OrientedBox3,
    LocalTangentSpace,
)
from common.exceptions import (
    InvalidFormatError,
    InvalidOperationError,
    InvalidCoordinatesError,
    InvalidBoundingBoxError,
    InvalidPolygonError,
)
from common.logging_config import get_logger, log_check

__all__ = [
    "EarthConstants",
    "ureg",
    "Q_",
    "validate_units",
    "ensure_quantity",
    "Vector3",
    "Box3",
    "OrientedBox3",
    "LocalTangentSpace",
    "InvalidFormatError",
    "InvalidOperationError",
    "InvalidCoordinatesError",
    "InvalidBoundingBoxError",
    "InvalidPolygonError",
    "get_logger",
    "log_check",
]
