"""
Geospatial value types for the geodetic tiling core.

All positions entering projections and tiling schemes originate from this
package. It provides:
- Geodetic coordinates with normalization and literal-shape conversion
- Antimeridian-aware latitude/longitude boxes
- Latitude/longitude polygons with centroid and bounding box
"""

from geospatial.coordinate_models import (
    GeoCoordinates,
    CoordinateFormat,
    classify_coordinate_like,
    to_geo_coordinates,
)

from geospatial.geo_box import GeoBox

from geospatial.geo_polygon import (
    GeoPolygon,
    is_antimeridian_crossing,
)

__all__ = [
    # Coordinates
    "GeoCoordinates",
    "CoordinateFormat",
    "classify_coordinate_like",
    "to_geo_coordinates",
    # Geometry
    "GeoBox",
    "GeoPolygon",
    "is_antimeridian_crossing",
]
