"""
Projection Consistency Checks.

This module verifies that projections behave like the map projections they
claim to be. Checks return ``ValidationResult`` records instead of raising,
so a caller can run all of them and report every failure at once.

Check Categories
----------------
1. Round trip: ``unproject_point(project_point(p)) == p`` over random samples
2. Scale factor: ``get_scale_factor`` against a numeric east-west derivative
3. Reference: Mercator family against pyproj's EPSG:3857 implementation
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from pyproj import Transformer

from common.constants import EQUATORIAL_CIRCUMFERENCE
from common.logging_config import get_logger, log_check
from geospatial.coordinate_models import GeoCoordinates
from projections.base import Projection
from projections.mercator import MercatorProjection, WebMercatorProjection

@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


def sample_geo_points(
    count: int = 1000,
    seed: int = 0,
    latitude_range: Tuple[float, float] = (-85.0, 85.0),
    longitude_range: Tuple[float, float] = (-180.0, 180.0),
    altitude_range: Tuple[float, float] = (-1000.0, 9000.0)
) -> NDArray[np.float64]:
    """Reproducible uniform samples.

    Returns
    -------
    ndarray
        Shape (count, 3): latitude and longitude in degrees, altitude in meters.
    """
    rng = np.random.default_rng(seed)
    return np.column_stack([
        rng.uniform(*latitude_range, size=count),
        rng.uniform(*longitude_range, size=count),
        rng.uniform(*altitude_range, size=count),
    ])


def longitude_difference(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    """Absolute longitude difference in degrees, modulo 360."""
    d = np.mod(np.asarray(a) - np.asarray(b) + 180.0, 360.0) - 180.0
    return np.abs(d)


class ProjectionConsistencyChecker:
    """Checker for the numerical consistency of projections.

    Parameters
    ----------
    tolerance_deg : float
        Allowed round trip error in degrees.
    tolerance_m : float
        Allowed round trip altitude error in meters.
    relative_tolerance : float
        Allowed relative error of scale factors and reference positions.
    """

    def __init__(
        self,
        tolerance_deg: float = 1e-6,
        tolerance_m: float = 1e-6,
        relative_tolerance: float = 1e-4
    ):
        self.tolerance_deg = tolerance_deg
        self.tolerance_m = tolerance_m
        self.relative_tolerance = relative_tolerance
        self._logger = get_logger("ProjectionConsistencyChecker")

    def _report(self, result: ValidationResult) -> ValidationResult:
        log_check(self._logger, result.test_name, result.passed, result.message)
        return result

    def check_all(
        self,
        projection: Projection,
        samples: Optional[NDArray[np.float64]] = None
    ) -> List[ValidationResult]:
        """Run the checks that apply to ``projection``."""
        if samples is None:
            samples = sample_geo_points()
        results = [self.check_round_trip(projection, samples)]
        if isinstance(projection, MercatorProjection):
            results.append(self.check_against_reference(projection, samples))
        return results

    def check_round_trip(
        self,
        projection: Projection,
        samples: NDArray[np.float64]
    ) -> ValidationResult:
        """Check that unprojecting a projected point returns the point.

        Parameters
        ----------
        projection : Projection
            Projection to check.
        samples : ndarray
            Shape (N, 3) of latitude, longitude (degrees) and altitude (meters).
        """
        samples = np.asarray(samples, dtype=np.float64)
        recovered = np.empty_like(samples)
        for i, (lat, lon, alt) in enumerate(samples):
            geo = projection.unproject_point(
                projection.project_point(GeoCoordinates(float(lat), float(lon), float(alt)))
            )
            recovered[i] = (geo.latitude, geo.longitude, geo.altitude)

        lat_error = float(np.max(np.abs(recovered[:, 0] - samples[:, 0])))
        lon_error = float(np.max(longitude_difference(recovered[:, 1], samples[:, 1])))
        alt_error = float(np.max(np.abs(recovered[:, 2] - samples[:, 2])))
        passed = (
            lat_error <= self.tolerance_deg
            and lon_error <= self.tolerance_deg
            and alt_error <= self.tolerance_m
        )

        return self._report(ValidationResult(
            test_name=f"round_trip[{projection.name}]",
            passed=bool(passed),
            message=(
                f"Round trip over {len(samples)} points: max error "
                f"lat={lat_error:.2e} deg, lon={lon_error:.2e} deg, alt={alt_error:.2e} m"
            ),
            details={
                'num_samples': len(samples),
                'max_latitude_error_deg': lat_error,
                'max_longitude_error_deg': lon_error,
                'max_altitude_error_m': alt_error,
            }
        ))

    def check_scale_factor(
        self,
        projection: Projection,
        geo_point: GeoCoordinates,
        delta_deg: float = 1e-4
    ) -> ValidationResult:
        """Compare ``get_scale_factor`` with a numeric east-west derivative.

        Only meaningful for projections whose world units are meters. The
        ground length of a small step along the parallel is measured on the
        sphere of radius ``EQUATORIAL_CIRCUMFERENCE / (2 pi)``.
        """
        origin = GeoCoordinates(geo_point.latitude, geo_point.longitude, 0.0)
        east = GeoCoordinates(geo_point.latitude, geo_point.longitude + delta_deg, 0.0)
        world_origin = projection.project_point(origin)
        world_east = projection.project_point(east)

        radius = EQUATORIAL_CIRCUMFERENCE / (2 * np.pi)
        ground_length = radius * np.cos(np.radians(geo_point.latitude)) * np.radians(delta_deg)
        numeric = world_east.sub(world_origin).length() / ground_length
        expected = projection.get_scale_factor(world_origin)
        relative_error = abs(numeric - expected) / expected

        return self._report(ValidationResult(
            test_name=f"scale_factor[{projection.name}]",
            passed=bool(relative_error <= self.relative_tolerance),
            message=(
                f"Scale factor at ({geo_point.latitude:.4f}, {geo_point.longitude:.4f}): "
                f"numeric={numeric:.6f}, reported={expected:.6f}"
            ),
            details={
                'numeric': float(numeric),
                'reported': float(expected),
                'relative_error': float(relative_error),
            }
        ))

    def check_against_reference(
        self,
        projection: MercatorProjection,
        samples: NDArray[np.float64]
    ) -> ValidationResult:
        """Compare a Mercator-family projection with pyproj's EPSG:3857.

        EPSG:3857 has its origin at (0, 0) with y pointing north; the world
        square of these projections starts at the south-west (Mercator) or
        north-west (web Mercator) corner.

        Raises
        ------
        ValueError
            If ``projection`` is not a Mercator-family projection.
        """
        if not isinstance(projection, MercatorProjection):
            raise ValueError(f"No reference projection for {projection.name}")

        samples = np.asarray(samples, dtype=np.float64)
        transformer = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
        ref_x, ref_y = transformer.transform(samples[:, 1], samples[:, 0])
        half = projection.unit_scale * 0.5
        ref_x = np.asarray(ref_x) + half
        if isinstance(projection, WebMercatorProjection):
            ref_y = half - np.asarray(ref_y)
        else:
            ref_y = half + np.asarray(ref_y)

        ours = np.array([
            projection.project_point(GeoCoordinates(float(lat), float(lon))).to_array()[:2]
            for lat, lon, _ in samples
        ])
        max_error = float(np.max(np.hypot(ours[:, 0] - ref_x, ours[:, 1] - ref_y)))
        # tolerance_deg expressed as a distance along the equator
        limit = self.tolerance_deg / 360.0 * projection.unit_scale

        return self._report(ValidationResult(
            test_name=f"reference[{projection.name}]",
            passed=bool(max_error <= limit),
            message=f"Reference check against EPSG:3857: max deviation {max_error:.3e} m",
            details={
                'num_samples': len(samples),
                'max_deviation_m': max_error,
                'limit_m': limit,
            }
        ))
