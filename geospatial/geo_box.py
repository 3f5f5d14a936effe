"""
Axis-aligned latitude/longitude boxes.

A ``GeoBox`` is defined by its south-west and north-east corners. Boxes that
cross the antimeridian are given with ``south_west.longitude`` greater than
``north_east.longitude``; on construction the stored north-east longitude is
moved by +360 so that ``west <= east`` holds for every box and all span,
center and containment math is linear in longitude. ``east`` may therefore
exceed 180.
"""

from typing import Optional
import numpy as np

from geospatial.coordinate_models import GeoCoordinates, mod


def _min_optional(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


def _max_optional(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


class GeoBox:
    """A box in geodetic space, possibly crossing the antimeridian.

    Parameters
    ----------
    south_west : GeoCoordinates
        South-west corner. Copied.
    north_east : GeoCoordinates
        North-east corner. Copied, and shifted by +360 in longitude when it
        lies west of ``south_west``.

    Examples
    --------
    >>> box = GeoBox(GeoCoordinates(-10, 170), GeoCoordinates(10, -160))
    >>> box.west, box.east, box.longitude_span
    (170, 200, 30)
    """

    def __init__(self, south_west: GeoCoordinates, north_east: GeoCoordinates):
        self.south_west = south_west.clone()
        self.north_east = north_east.clone()
        if self.west > self.east:
            self.north_east.longitude += 360

    @classmethod
    def from_coordinates(cls, south_west: GeoCoordinates, north_east: GeoCoordinates) -> 'GeoBox':
        return cls(south_west, north_east)

    @classmethod
    def from_center_and_extents(
        cls,
        center: GeoCoordinates,
        latitude_span: float,
        longitude_span: float
    ) -> 'GeoBox':
        """Box of the given spans in degrees centered on ``center``."""
        half_lat = latitude_span * 0.5
        half_lon = longitude_span * 0.5
        return cls(
            GeoCoordinates(center.latitude - half_lat, center.longitude - half_lon),
            GeoCoordinates(center.latitude + half_lat, center.longitude + half_lon),
        )

    def __repr__(self) -> str:
        return f"GeoBox(south_west={self.south_west!r}, north_east={self.north_east!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoBox):
            return NotImplemented
        return self.south_west == other.south_west and self.north_east == other.north_east

    __hash__ = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def south(self) -> float:
        return self.south_west.latitude

    @property
    def north(self) -> float:
        return self.north_east.latitude

    @property
    def west(self) -> float:
        return self.south_west.longitude

    @property
    def east(self) -> float:
        return self.north_east.longitude

    @property
    def min_altitude(self) -> Optional[float]:
        if self.south_west.altitude is None or self.north_east.altitude is None:
            return None
        return min(self.south_west.altitude, self.north_east.altitude)

    @property
    def max_altitude(self) -> Optional[float]:
        if self.south_west.altitude is None or self.north_east.altitude is None:
            return None
        return max(self.south_west.altitude, self.north_east.altitude)

    @property
    def altitude_span(self) -> Optional[float]:
        if self.min_altitude is None:
            return None
        return self.max_altitude - self.min_altitude

    @property
    def latitude_span(self) -> float:
        return self.north - self.south

    @property
    def longitude_span(self) -> float:
        width = self.east - self.west
        if width < 0:
            width += 360
        return width

    @property
    def latitude_span_in_radians(self) -> float:
        return float(np.radians(self.latitude_span))

    @property
    def longitude_span_in_radians(self) -> float:
        return float(np.radians(self.longitude_span))

    @property
    def center(self) -> GeoCoordinates:
        """Midpoint of the box; altitude is the mid altitude when known."""
        latitude = (self.south + self.north) * 0.5
        altitude = None
        if self.min_altitude is not None:
            altitude = self.min_altitude + self.altitude_span * 0.5

        if self.west <= self.east:
            return GeoCoordinates(latitude, (self.west + self.east) * 0.5, altitude)

        longitude = (360 + self.east + self.west) * 0.5
        if longitude > 360:
            longitude -= 360
        return GeoCoordinates(latitude, longitude, altitude)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def contains(self, point: GeoCoordinates) -> bool:
        """Check whether ``point`` lies inside the box.

        Latitude and longitude ranges are half open. The query longitude
        may be given in any 360 degree period. Altitude is only compared
        when both the point and the box carry one: a flat box requires the
        same altitude, otherwise the altitude must be in [min, max).
        """
        min_altitude = self.min_altitude
        max_altitude = self.max_altitude
        if point.altitude is not None and min_altitude is not None:
            if min_altitude == max_altitude:
                if point.altitude != min_altitude:
                    return False
            elif not (min_altitude <= point.altitude < max_altitude):
                return False

        if point.latitude < self.south or point.latitude >= self.north:
            return False

        longitude = self.west + mod(point.longitude - self.west, 360)
        return longitude < self.east

    def grow_to_contain(self, point: GeoCoordinates) -> 'GeoBox':
        """Expand the corners in place to include ``point``.

        A present altitude wins over an absent one; the result is absent
        only when both are absent.
        """
        self.south_west.latitude = min(self.south_west.latitude, point.latitude)
        self.south_west.longitude = min(self.south_west.longitude, point.longitude)
        self.south_west.altitude = _min_optional(self.south_west.altitude, point.altitude)
        self.north_east.latitude = max(self.north_east.latitude, point.latitude)
        self.north_east.longitude = max(self.north_east.longitude, point.longitude)
        self.north_east.altitude = _max_optional(self.north_east.altitude, point.altitude)
        return self

    def clone(self) -> 'GeoBox':
        return GeoBox(self.south_west, self.north_east)
