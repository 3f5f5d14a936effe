"""
Geodetic Coordinates and their Literal Shapes.

This module implements the geodetic coordinate value used across the core:
latitude and longitude in degrees plus an optional altitude in meters.

Coordinate Conventions
----------------------
1. ``GeoCoordinates`` order is (latitude, longitude, altitude).
2. ``GeoPointLike`` tuples follow GeoJSON and are ordered
   [longitude, latitude, altitude]. Mixing the two orders is the most common
   integration bug, so every conversion goes through a named factory.
3. Values are not normalized on construction. Longitudes outside
   [-180, 180] are meaningful (e.g. east edges of antimeridian boxes) and are
   only folded back by :meth:`GeoCoordinates.normalized`.

Normalization
-------------
Latitude overflow reflects through the pole rather than clamping: a point
at latitude 100 lies at latitude 80 on the opposite meridian. Longitude
folds into [-180, 180] with a signed modulo.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union
import numpy as np

import pint

from common.constants import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from common.exceptions import InvalidFormatError
from common.types import GeoPointLike
from common.units import to_degrees, to_meters, validate_units


def mod(dividend: float, divisor: float) -> float:
    """Modulo whose result has the sign of the divisor."""
    return dividend % divisor


@dataclass
class GeoCoordinates:
    """A geodetic position.

    Attributes
    ----------
    latitude : float
        Latitude in DEGREES, positive north.
    longitude : float
        Longitude in DEGREES, positive east. May lie outside [-180, 180].
    altitude : float, optional
        Height above the reference surface in METERS, or None if unknown.

    Notes
    -----
    Equality is structural over all three fields; an absent altitude is not
    equal to an altitude of zero.

    Examples
    --------
    >>> berlin = GeoCoordinates(52.5163, 13.3777)
    >>> berlin.to_geo_point()
    [13.3777, 52.5163]
    """
    latitude: float
    longitude: float
    altitude: Optional[float] = None

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_degrees(
        cls,
        latitude: float,
        longitude: float,
        altitude: Optional[float] = None
    ) -> 'GeoCoordinates':
        return cls(latitude, longitude, altitude)

    @classmethod
    def from_radians(
        cls,
        latitude: float,
        longitude: float,
        altitude: Optional[float] = None
    ) -> 'GeoCoordinates':
        return cls(float(np.degrees(latitude)), float(np.degrees(longitude)), altitude)

    @classmethod
    def from_lat_lng(cls, lat_lng: Mapping[str, float]) -> 'GeoCoordinates':
        """Create from a ``{"lat": ..., "lng": ...}`` pair."""
        return cls(lat_lng["lat"], lat_lng["lng"])

    @classmethod
    def from_geo_point(cls, geo_point: GeoPointLike) -> 'GeoCoordinates':
        """Create from a GeoJSON ordered ``[longitude, latitude, altitude?]``."""
        altitude = geo_point[2] if len(geo_point) > 2 else None
        return cls(geo_point[1], geo_point[0], altitude)

    @classmethod
    def from_object(cls, value: Any) -> 'GeoCoordinates':
        """Create from any supported literal shape.

        Parameters
        ----------
        value : GeoPointLike, GeoCoordinates-like or LatLng-like
            A ``[lon, lat, alt?]`` sequence, an object or mapping with
            ``latitude``/``longitude`` (and optional ``altitude``), or an
            object or mapping with ``lat``/``lng``.

        Raises
        ------
        InvalidFormatError
            If the value matches none of the shapes.
        """
        shape = classify_coordinate_like(value)
        if shape is CoordinateFormat.GEO_POINT:
            return cls.from_geo_point(value)
        if shape is CoordinateFormat.GEO_COORDINATES:
            return cls(
                _field(value, "latitude"),
                _field(value, "longitude"),
                _field(value, "altitude", None),
            )
        return cls(_field(value, "lat"), _field(value, "lng"))

    @classmethod
    @validate_units({'latitude': 'degree', 'longitude': 'degree', 'altitude': 'meter'})
    def from_quantities(
        cls,
        latitude: Union[float, pint.Quantity],
        longitude: Union[float, pint.Quantity],
        altitude: Optional[Union[float, pint.Quantity]] = None
    ) -> 'GeoCoordinates':
        """Create from pint quantities in any angle and length units.

        Bare numbers are taken as degrees and meters.

        Raises
        ------
        ValueError
            If a quantity has the wrong dimensionality.
        """
        return cls(
            to_degrees(latitude),
            to_degrees(longitude),
            None if altitude is None else to_meters(altitude),
        )

    @staticmethod
    def lerp(
        geo_coords0: 'GeoCoordinates',
        geo_coords1: 'GeoCoordinates',
        factor: float,
        wrap: bool = False,
        normalize: bool = False
    ) -> 'GeoCoordinates':
        """Linearly interpolate two coordinates in degree space.

        Parameters
        ----------
        geo_coords0, geo_coords1 : GeoCoordinates
            Interpolation endpoints.
        factor : float
            0 returns ``geo_coords0``, 1 returns ``geo_coords1``.
        wrap : bool
            Interpolate eastward across the antimeridian, from the larger
            longitude to the smaller one shifted by +360.
        normalize : bool
            Normalize the result.

        Notes
        -----
        The altitude is interpolated with absent values read as 0; it stays
        absent only when both endpoints lack it.
        """
        if wrap:
            if geo_coords0.longitude < geo_coords1.longitude:
                end = geo_coords0.clone()
                end.longitude += 360
                return GeoCoordinates.lerp(geo_coords1, end, 1 - factor, normalize=normalize)
            end = geo_coords1.clone()
            end.longitude += 360
            return GeoCoordinates.lerp(geo_coords0, end, factor, normalize=normalize)

        latitude = geo_coords0.latitude + (geo_coords1.latitude - geo_coords0.latitude) * factor
        longitude = geo_coords0.longitude + (geo_coords1.longitude - geo_coords0.longitude) * factor
        altitude = None
        if geo_coords0.altitude is not None or geo_coords1.altitude is not None:
            alt0 = geo_coords0.altitude or 0.0
            alt1 = geo_coords1.altitude or 0.0
            altitude = alt0 + (alt1 - alt0) * factor

        result = GeoCoordinates(latitude, longitude, altitude)
        return result.normalized() if normalize else result

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def latitude_in_radians(self) -> float:
        return float(np.radians(self.latitude))

    @property
    def longitude_in_radians(self) -> float:
        return float(np.radians(self.longitude))

    @property
    def lat(self) -> float:
        return self.latitude

    @property
    def lng(self) -> float:
        return self.longitude

    def is_valid(self) -> bool:
        """True unless latitude or longitude is NaN."""
        return not (np.isnan(self.latitude) or np.isnan(self.longitude))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def normalized(self) -> 'GeoCoordinates':
        """Return the coordinate folded into the canonical ranges.

        Returns
        -------
        GeoCoordinates
            A new coordinate with latitude in [-90, 90] and longitude in
            [-180, 180]. In-range components are returned unchanged, so
            normalizing twice equals normalizing once. NaN input returns
            ``self``.
        """
        if not self.is_valid():
            return self

        latitude = self.latitude
        longitude = self.longitude

        if latitude < MIN_LATITUDE or latitude > MAX_LATITUDE:
            # Angle measured from the south pole over a full meridian circle
            from_south = mod(latitude - MIN_LATITUDE, 360)
            if from_south <= 180:
                latitude = from_south + MIN_LATITUDE
            else:
                latitude = 270 - from_south
                longitude += 180

        if longitude < MIN_LONGITUDE or longitude > MAX_LONGITUDE:
            longitude = mod(longitude - MIN_LONGITUDE, 360) + MIN_LONGITUDE

        return GeoCoordinates(latitude, longitude, self.altitude)

    def equals(self, other: 'GeoCoordinates') -> bool:
        return (
            self.latitude == other.latitude
            and self.longitude == other.longitude
            and self.altitude == other.altitude
        )

    def copy(self, other: 'GeoCoordinates') -> 'GeoCoordinates':
        """Overwrite this coordinate with the fields of ``other``."""
        self.latitude = other.latitude
        self.longitude = other.longitude
        self.altitude = other.altitude
        return self

    def clone(self) -> 'GeoCoordinates':
        return GeoCoordinates(self.latitude, self.longitude, self.altitude)

    def to_lat_lng(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}

    def to_geo_point(self) -> list:
        if self.altitude is not None:
            return [self.longitude, self.latitude, self.altitude]
        return [self.longitude, self.latitude]

    def min_longitude_span_to(self, other: 'GeoCoordinates') -> float:
        """Shorter of the two angular distances between the longitudes."""
        min_longitude = min(self.longitude, other.longitude)
        max_longitude = max(self.longitude, other.longitude)
        return min(max_longitude - min_longitude, 360 + min_longitude - max_longitude)


# ============================================================================
# Literal shapes
# ============================================================================


class CoordinateFormat(Enum):
    """Closed set of literal shapes accepted at the API boundary."""
    GEO_POINT = "geo_point"              # [longitude, latitude, altitude?]
    GEO_COORDINATES = "geo_coordinates"  # latitude / longitude / altitude?
    LAT_LNG = "lat_lng"                  # lat / lng


_MISSING = object()


def _field(value: Any, name: str, default: Any = _MISSING) -> Any:
    if isinstance(value, Mapping):
        result = value.get(name, default)
    else:
        result = getattr(value, name, default)
    if result is _MISSING:
        raise InvalidFormatError(f"Coordinate is missing '{name}'")
    return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


def _has_numbers(value: Any, *names: str) -> bool:
    return all(_is_number(_field(value, name, None)) for name in names)


def classify_coordinate_like(value: Any) -> CoordinateFormat:
    """Resolve which literal shape ``value`` has.

    Raises
    ------
    InvalidFormatError
        If the value matches none of the supported shapes.
    """
    if isinstance(value, GeoCoordinates):
        return CoordinateFormat.GEO_COORDINATES
    if isinstance(value, (Sequence, np.ndarray)) and not isinstance(value, (str, bytes)):
        if len(value) in (2, 3) and all(_is_number(v) for v in value):
            return CoordinateFormat.GEO_POINT
        raise InvalidFormatError("Invalid input coordinate format.")
    if _has_numbers(value, "latitude", "longitude"):
        return CoordinateFormat.GEO_COORDINATES
    if _has_numbers(value, "lat", "lng"):
        return CoordinateFormat.LAT_LNG
    raise InvalidFormatError("Invalid input coordinate format.")


def to_geo_coordinates(value: Any) -> GeoCoordinates:
    """Return ``value`` itself if it already is a GeoCoordinates, else convert it."""
    if isinstance(value, GeoCoordinates):
        return value
    return GeoCoordinates.from_object(value)
