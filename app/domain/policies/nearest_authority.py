"""NearestAuthorityPolicy — pick the closest authority center within a radius."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.authority import Authority
from app.domain.value_objects.geo_point import GeoPoint

DEFAULT_MAX_DISTANCE_KM = 50.0


@dataclass(frozen=True)
class AuthorityMatch:
    """Result of a geometric selection policy."""

    authority: Authority
    distance_km: float | None  # None for containment matches
    reason: str


def select_nearest_authority(
    location: GeoPoint,
    authorities: list[Authority],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> AuthorityMatch | None:
    """Select the authority whose center is nearest to the issue.

    Args:
        location: point where the issue was reported.
        authorities: candidates in store order (some may lack a center).
        max_distance_km: inclusive acceptance radius.

    Returns:
        AuthorityMatch for the nearest center, or None when no authority has a
        center or the nearest one is farther than ``max_distance_km``.
        Equal distances keep the earlier authority.
    """
    best: Authority | None = None
    best_distance = float("inf")
    for authority in authorities:
        if authority.center is None:
            continue
        distance = location.haversine_km(authority.center)
        if distance < best_distance:
            best, best_distance = authority, distance

    if best is None or best_distance > max_distance_km:
        return None

    return AuthorityMatch(
        authority=best,
        distance_km=round(best_distance, 2),
        reason=f"Nearest center: {best.name} ({best_distance:.1f} km)",
    )
