"""Boundary value object — an authority's polygon and point containment.

Rings are stored and passed around as (latitude, longitude) vertices, the same
order used everywhere else in the domain. Shapely works on planar
(x=longitude, y=latitude) coordinates; the swap happens in exactly one place,
``_to_polygon``.

Boundary points: a point lying exactly on an edge or a vertex is treated as
inside the polygon (``covers`` rather than ``contains``).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from shapely.geometry import Point, Polygon

from app.domain.errors import GeometryMalformedError
from app.domain.value_objects.geo_point import GeoPoint

LatLon = tuple[float, float]


def _open_ring(ring: Sequence[LatLon]) -> list[LatLon]:
    """Drop an explicit closing vertex; rings are implicitly closed."""
    vertices = [tuple(v) for v in ring]
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices.pop()
    return vertices


def _to_polygon(ring: Sequence[LatLon]) -> Polygon | None:
    """Build a shapely polygon, or None for rings that cannot hold anything.

    Fewer than 3 distinct vertices, collinear vertices and self-intersecting
    rings all count as degenerate.
    """
    vertices = _open_ring(ring)
    if len(set(vertices)) < 3:
        return None
    polygon = Polygon([(lon, lat) for lat, lon in vertices])
    if not polygon.is_valid:
        return None
    return polygon


def point_in_polygon(point: GeoPoint, ring: Sequence[LatLon]) -> bool:
    """Containment test for a simple, possibly non-convex, implicitly closed ring.

    Returns:
        True when the point is inside or on the boundary. Degenerate rings
        never contain anything.
    """
    polygon = _to_polygon(ring)
    if polygon is None:
        return False
    return bool(polygon.covers(Point(point.longitude, point.latitude)))


@dataclass(frozen=True)
class Boundary:
    vertices: tuple[LatLon, ...]

    @classmethod
    def from_lat_lon_pairs(cls, raw: object) -> Boundary:
        """Parse stored ring data like ``[[13.2, 80.1], [13.2, 80.3], ...]``.

        Raises:
            GeometryMalformedError: if the data is not a list of numeric
                (lat, lon) pairs within valid ranges.
        """
        if not isinstance(raw, (list, tuple)):
            raise GeometryMalformedError(f"Ring must be a list of vertices, got {type(raw).__name__}")

        vertices: list[LatLon] = []
        for index, vertex in enumerate(raw):
            if not isinstance(vertex, (list, tuple)) or len(vertex) != 2:
                raise GeometryMalformedError(f"Vertex {index} is not a (lat, lon) pair: {vertex!r}")
            try:
                lat, lon = (float(c) for c in vertex)
            except (TypeError, ValueError) as e:
                raise GeometryMalformedError(f"Vertex {index} is not numeric: {vertex!r}") from e
            if not (math.isfinite(lat) and math.isfinite(lon)):
                raise GeometryMalformedError(f"Vertex {index} is not finite: {vertex!r}")
            if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
                raise GeometryMalformedError(f"Vertex {index} is out of range: {vertex!r}")
            vertices.append((lat, lon))

        return cls(vertices=tuple(vertices))

    def is_degenerate(self) -> bool:
        return _to_polygon(self.vertices) is None

    def contains(self, point: GeoPoint) -> bool:
        return point_in_polygon(point, self.vertices)
