"""Pytest configuration and shared fixtures."""

import pytest

from app.domain.value_objects.geo_point import GeoPoint


@pytest.fixture
def chennai():
    return GeoPoint(latitude=13.0827, longitude=80.2707)


@pytest.fixture
def bangalore():
    return GeoPoint(latitude=12.9716, longitude=77.5946)
