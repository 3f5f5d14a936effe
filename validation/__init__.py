"""
Validation Framework for projections.

This module provides consistency checks for projection implementations.
"""

from validation.projection_checks import (
    ValidationResult,
    ProjectionConsistencyChecker,
    sample_geo_points,
    longitude_difference,
)

__all__ = [
    "ValidationResult",
    "ProjectionConsistencyChecker",
    "sample_geo_points",
    "longitude_difference",
]
