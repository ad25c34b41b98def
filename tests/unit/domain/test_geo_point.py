"""Tests for GeoPoint value object and the Haversine distance."""

import pytest

from app.domain.value_objects.geo_point import GeoPoint, distance_km

CHENNAI = GeoPoint(latitude=13.0827, longitude=80.2707)
BANGALORE = GeoPoint(latitude=12.9716, longitude=77.5946)


def test_haversine_same_point():
    """Distance from a point to itself should be 0."""
    assert CHENNAI.haversine_km(CHENNAI) == 0.0
    assert distance_km(13.0827, 80.2707, 13.0827, 80.2707) == 0.0


def test_haversine_chennai_to_bangalore():
    """Great-circle distance is ~290 km (the road distance is longer)."""
    distance = CHENNAI.haversine_km(BANGALORE)
    assert distance == pytest.approx(290.2, abs=1.0)


def test_haversine_is_symmetric(chennai, bangalore):
    assert chennai.haversine_km(bangalore) == pytest.approx(bangalore.haversine_km(chennai))


def test_one_degree_of_latitude():
    """One degree along a meridian is R * pi / 180 ≈ 111.19 km."""
    assert distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)


def test_geo_point_is_frozen():
    """GeoPoint should be immutable."""
    p = GeoPoint(latitude=13.0, longitude=80.0)
    with pytest.raises(AttributeError):
        p.latitude = 12.0
