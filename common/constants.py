"""
Geodetic Constants for Projection and Tiling.

This module provides the reference constants used by every projection and
tiling scheme, with their provenance. All constants are defined in SI units
or degrees and are exact by definition unless stated otherwise.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Spherical Mercator (EPSG:3857): IOGP Guidance Note 7-2
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A reference constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class EarthConstants:
    """Registry of the Earth model constants used by the projections.

    The projections in this package use a spherical Earth whose radius is
    the WGS84 semi-major axis. Planar projections express world space in
    meters scaled by either the radius or the equatorial circumference.

    Geodetic Limits
    ---------------
    Latitude is valid in [-90, 90] degrees and longitude in [-180, 180]
    degrees once normalized. Mercator style projections clamp latitude to
    the value at which the projected square closes.
    """

    # =========================================================================
    # Earth Geometry
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EQUATORIAL_RADIUS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Equatorial radius, used as the sphere radius"
    )

    EQUATORIAL_CIRCUMFERENCE: Final[Constant] = Constant(
        value=40_075_016.6855785,
        uncertainty=0.0,
        unit="m",
        source="2 * pi * EQUATORIAL_RADIUS",
        description="Equatorial circumference, the unit scale of flat projections"
    )

    # =========================================================================
    # Geodetic Limits
    # =========================================================================

    MIN_LATITUDE: Final[Constant] = Constant(
        value=-90.0,
        uncertainty=0.0,
        unit="degree",
        source="Definition",
        description="South pole latitude"
    )

    MAX_LATITUDE: Final[Constant] = Constant(
        value=90.0,
        uncertainty=0.0,
        unit="degree",
        source="Definition",
        description="North pole latitude"
    )

    MIN_LONGITUDE: Final[Constant] = Constant(
        value=-180.0,
        uncertainty=0.0,
        unit="degree",
        source="Definition",
        description="Western end of the normalized longitude range"
    )

    MAX_LONGITUDE: Final[Constant] = Constant(
        value=180.0,
        uncertainty=0.0,
        unit="degree",
        source="Definition",
        description="Eastern end of the normalized longitude range"
    )

    # =========================================================================
    # Mercator
    # =========================================================================

    MERCATOR_MAXIMUM_LATITUDE: Final[Constant] = Constant(
        value=1.4844222297453323,
        uncertainty=0.0,
        unit="rad",
        source="2 * atan(exp(pi)) - pi / 2",
        description="Latitude at which the Mercator square closes (~85.0511 deg)"
    )

    @staticmethod
    def radius() -> float:
        """Sphere radius in meters."""
        return EarthConstants.EQUATORIAL_RADIUS.value

    @staticmethod
    def circumference() -> float:
        """Equatorial circumference in meters."""
        return EarthConstants.EQUATORIAL_CIRCUMFERENCE.value

    @staticmethod
    def mercator_maximum_latitude_deg() -> float:
        """Mercator clamping latitude in degrees."""
        return float(np.degrees(EarthConstants.MERCATOR_MAXIMUM_LATITUDE.value))


# Module-level shortcuts for hot paths
EQUATORIAL_RADIUS: Final[float] = EarthConstants.EQUATORIAL_RADIUS.value
EQUATORIAL_CIRCUMFERENCE: Final[float] = EarthConstants.EQUATORIAL_CIRCUMFERENCE.value
MIN_LATITUDE: Final[float] = EarthConstants.MIN_LATITUDE.value
MAX_LATITUDE: Final[float] = EarthConstants.MAX_LATITUDE.value
MIN_LONGITUDE: Final[float] = EarthConstants.MIN_LONGITUDE.value
MAX_LONGITUDE: Final[float] = EarthConstants.MAX_LONGITUDE.value
MERCATOR_MAXIMUM_LATITUDE: Final[float] = EarthConstants.MERCATOR_MAXIMUM_LATITUDE.value
