"""Pytest configuration and shared fixtures for the geodetic tiling tests."""

import pytest

from geospatial.coordinate_models import GeoCoordinates
from geospatial.geo_box import GeoBox
from validation.projection_checks import sample_geo_points


@pytest.fixture
def brandenburg_box():
    """Small box around the Brandenburg Gate, Berlin."""
    return GeoBox(GeoCoordinates(52.5163, 13.3777), GeoCoordinates(52.5309, 13.385))


@pytest.fixture
def antimeridian_box():
    """Box from 170E to 160W crossing the antimeridian."""
    return GeoBox(GeoCoordinates(-10, 170), GeoCoordinates(10, -160))


@pytest.fixture
def geo_samples():
    """Reproducible points inside the Mercator latitude range."""
    return sample_geo_points(count=1000, seed=42)
