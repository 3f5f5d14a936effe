"""
Polygons in latitude/longitude space.

The polygon is treated as a planar ring in (latitude, longitude) degrees;
altitudes are ignored. Vertices are expected in counter-clockwise order.

Antimeridian Handling
---------------------
The area, centroid and bounding-box computations use heuristics that are
exact for convex rings that do not cross the antimeridian, and best effort
otherwise:

1. A negative signed area is read as an antimeridian crossing and rebases
   the centroid longitude by -180.
2. ``wrap_coordinates_around`` adds 360 to the vertices east of an eastbound
   antimeridian crossing, which yields a longitude-continuous ring for rings
   whose edges span less than 180 degrees of longitude.
3. ``sort_ccw`` orders vertices by angle around the vertex average, which is
   only correct for convex rings.
"""

from typing import Any, List, Optional, Sequence, Tuple
import numpy as np

from common.constants import MAX_LATITUDE, MIN_LATITUDE
from common.exceptions import InvalidPolygonError
from common.logging_config import get_logger
from geospatial.coordinate_models import GeoCoordinates, to_geo_coordinates
from geospatial.geo_box import GeoBox

logger = get_logger(__name__)


def _lon_span_across_greenwich(lon_a: float, lon_b: float) -> float:
    return max(lon_a, lon_b) - min(lon_a, lon_b)


def is_left_to_right_antimeridian_crossing(lon_start: float, lon_end: float) -> bool:
    """Edge goes eastward from positive to negative longitudes over 180."""
    return lon_start > 0 and lon_end < 0 and _lon_span_across_greenwich(lon_start, lon_end) > 180


def is_right_to_left_antimeridian_crossing(lon_start: float, lon_end: float) -> bool:
    return is_left_to_right_antimeridian_crossing(lon_end, lon_start)


def is_antimeridian_crossing(lon_start: float, lon_end: float) -> bool:
    return (
        np.sign(lon_start) == -np.sign(lon_end)
        and _lon_span_across_greenwich(lon_start, lon_end) > 180
    )


def _direction(d_lat: float, d_lon: float) -> Tuple[float, float]:
    # Unit vector in (lat, lon); zero stays zero
    length = np.hypot(d_lat, d_lon)
    if length == 0.0:
        return d_lat, d_lon
    return d_lat / length, d_lon / length


def _angle(direction: Tuple[float, float]) -> float:
    """Angle of a (lat, lon) direction in [0, 2*pi), measured from +lat."""
    x, y = direction
    return float(np.arctan2(-y, -x) + np.pi)


class GeoPolygon:
    """A ring of at least three geodetic vertices.

    Parameters
    ----------
    coordinates : sequence
        Vertices as ``GeoCoordinates`` or any literal shape accepted by
        :meth:`GeoCoordinates.from_object`. Vertices are copied.
    needs_sort : bool
        Sort the vertices counter-clockwise (convex rings only).
    needs_wrapping : bool
        Unwrap vertices east of an antimeridian crossing by +360.

    Raises
    ------
    InvalidPolygonError
        If the ring has fewer than three distinct vertices.
    """

    def __init__(
        self,
        coordinates: Sequence[Any],
        needs_sort: bool = False,
        needs_wrapping: bool = False
    ):
        self._coordinates: List[GeoCoordinates] = [
            to_geo_coordinates(coordinate).clone() for coordinate in coordinates
        ]
        distinct = {(c.latitude, c.longitude) for c in self._coordinates}
        if len(distinct) < 3:
            raise InvalidPolygonError(
                f"Polygon needs at least 3 distinct vertices, got {len(distinct)}"
            )
        if needs_sort:
            self._sort_ccw()
        if needs_wrapping:
            self._wrap_coordinates_around()

    @property
    def coordinates(self) -> List[GeoCoordinates]:
        return self._coordinates

    def __len__(self) -> int:
        return len(self._coordinates)

    def __repr__(self) -> str:
        return f"GeoPolygon({self._coordinates!r})"

    def _edges(self):
        """Yield (vertex, previous vertex) pairs, starting with the closing edge."""
        previous = self._coordinates[-1]
        for coordinate in self._coordinates:
            yield coordinate, previous
            previous = coordinate

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------

    def get_area(self) -> float:
        """Signed shoelace area in square degrees.

        Positive for counter-clockwise rings in (latitude, longitude) order.
        """
        area = 0.0
        for coordinate, previous in self._edges():
            area += coordinate.latitude * previous.longitude
            area -= coordinate.longitude * previous.latitude
        return area / 2

    def get_centroid(self) -> Optional[GeoCoordinates]:
        """Area centroid of the ring, or None for a zero-area ring.

        A negative area is read as an antimeridian crossing and the longitude
        is rebased by -180.
        """
        area = self.get_area()
        if area == 0:
            logger.debug("Polygon has zero area, centroid is undefined")
            return None

        latitude = 0.0
        longitude = 0.0
        for coordinate, previous in self._edges():
            f = coordinate.latitude * previous.longitude - previous.latitude * coordinate.longitude
            latitude += (coordinate.latitude + previous.latitude) * f
            longitude += (coordinate.longitude + previous.longitude) * f

        f = area * 6
        if area < 0:
            return GeoCoordinates(latitude / f, -180 + longitude / f)
        return GeoCoordinates(latitude / f, longitude / f)

    def get_geo_bounding_box(self) -> GeoBox:
        """Bounding box of the ring.

        East and west are found relative to the centroid with a per-edge
        winding test rather than by plain min/max, so that unwrapped rings
        crossing the antimeridian keep their narrow box. Without a centroid
        the degenerate box at the first vertex is returned.
        """
        centroid = self.get_centroid()
        if centroid is None:
            first = self._coordinates[0]
            return GeoBox.from_coordinates(first, first)

        east, west = self._get_east_and_west(centroid)
        north, south = self._get_north_and_south()
        return GeoBox.from_coordinates(
            GeoCoordinates(south, west),
            GeoCoordinates(north, east),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _average_center(self) -> GeoCoordinates:
        count = len(self._coordinates)
        return GeoCoordinates(
            sum(c.latitude for c in self._coordinates) / count,
            sum(c.longitude for c in self._coordinates) / count,
        )

    def _sort_ccw(self) -> None:
        center = self._average_center()

        def angle_around_center(coordinate: GeoCoordinates) -> float:
            return _angle(_direction(
                coordinate.latitude - center.latitude,
                coordinate.longitude - center.longitude,
            ))

        self._coordinates.sort(key=angle_around_center, reverse=True)

    def _wrap_coordinates_around(self) -> None:
        count = len(self._coordinates)
        first_crossing = next(
            (
                index for index, coordinate in enumerate(self._coordinates)
                if is_left_to_right_antimeridian_crossing(
                    self._coordinates[index - 1].longitude, coordinate.longitude
                )
            ),
            None,
        )
        if first_crossing is None:
            return

        logger.debug(f"Unwrapping polygon from vertex {first_crossing} across the antimeridian")
        wrap_around = True
        for i in range(count):
            index = (first_crossing + i) % count
            current_lon = self._coordinates[index].longitude
            next_lon = self._coordinates[(index + 1) % count].longitude

            if wrap_around:
                self._coordinates[index].longitude += 360

            if is_right_to_left_antimeridian_crossing(current_lon, next_lon):
                wrap_around = False
            elif is_left_to_right_antimeridian_crossing(current_lon, next_lon):
                wrap_around = True

    def _get_east_and_west(self, center: GeoCoordinates) -> Tuple[float, float]:
        west = center.longitude
        east = center.longitude
        for coordinate, previous in self._edges():
            vec_a = _direction(
                coordinate.latitude - center.latitude,
                coordinate.longitude - center.longitude,
            )
            vec_b = _direction(
                previous.latitude - center.latitude,
                previous.longitude - center.longitude,
            )

            ccw = np.sign(_angle(vec_b) - _angle(vec_a)) == 1
            # Edge passes over the reference axis
            if vec_b[1] >= 0 and vec_a[1] < 0:
                ccw = True

            longitude = coordinate.longitude
            if longitude < center.longitude:
                if ccw:
                    west = min(west, longitude)
                else:
                    east = min(east, longitude)
            else:
                if ccw:
                    east = max(east, longitude)
                else:
                    west = max(west, longitude)
        return east, west

    def _get_north_and_south(self) -> Tuple[float, float]:
        north = MIN_LATITUDE
        south = MAX_LATITUDE
        for coordinate in self._coordinates:
            north = max(north, coordinate.latitude)
            south = min(south, coordinate.latitude)
        return north, south
