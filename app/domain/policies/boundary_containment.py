"""BoundaryContainmentPolicy — first authority whose polygon holds the point."""

from __future__ import annotations

import logging

from app.domain.entities.authority import Authority
from app.domain.errors import GeometryMalformedError
from app.domain.policies.nearest_authority import AuthorityMatch
from app.domain.value_objects.boundary import Boundary
from app.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


def find_containing_authority(
    location: GeoPoint,
    authorities: list[Authority],
) -> AuthorityMatch | None:
    """Scan authorities in the given order and return the first containing one.

    Authorities without a polygon are ignored. Malformed or degenerate rings
    are skipped with a warning; they never abort the scan.
    """
    for authority in authorities:
        if authority.polygon is None:
            continue
        try:
            boundary = Boundary.from_lat_lon_pairs(authority.polygon)
        except GeometryMalformedError as e:
            logger.warning("Skipping polygon of authority %s: %s", authority.id, e)
            continue
        if boundary.is_degenerate():
            logger.warning(
                "Skipping polygon of authority %s: degenerate or self-intersecting ring",
                authority.id,
            )
            continue

        if boundary.contains(location):
            return AuthorityMatch(
                authority=authority,
                distance_km=None,
                reason=f"Inside boundary of {authority.name}",
            )
    return None
