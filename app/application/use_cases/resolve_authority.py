"""ResolveAuthority — the ordered cascade of assignment tiers."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from app.application.ports.authority_repo import AuthorityRepository
from app.domain.entities.issue import Issue
from app.domain.errors import (
    GeometryMalformedError,
    LookupFailureError,
    PreconditionMissingError,
)
from app.domain.policies.boundary_containment import find_containing_authority
from app.domain.policies.jurisdiction_keywords import (
    JURISDICTION_KEYWORDS,
    extract_jurisdiction_code,
)
from app.domain.policies.nearest_authority import (
    DEFAULT_MAX_DISTANCE_KM,
    AuthorityMatch,
    select_nearest_authority,
)
from app.domain.value_objects.assignment_outcome import AssignmentOutcome
from app.domain.value_objects.enums import AssignmentMethod

logger = logging.getLogger(__name__)

DEFAULT_LEVEL_HINT = "State"


class ResolutionTier(ABC):
    """One strategy of the cascade.

    ``attempt`` never raises for store or geometry problems: a lookup failure,
    malformed data or a timeout all mean "this tier found nothing". Anything
    else is a bug and propagates to the engine.
    """

    method: AssignmentMethod

    def __init__(self, authorities: AuthorityRepository, timeout_seconds: float | None = None):
        self._authorities = authorities
        self._timeout = timeout_seconds

    async def attempt(self, issue: Issue) -> AssignmentOutcome | None:
        try:
            if self._timeout:
                match = await asyncio.wait_for(self._match(issue), timeout=self._timeout)
            else:
                match = await self._match(issue)
        except (LookupFailureError, GeometryMalformedError) as e:
            logger.warning("Issue %s: %s tier failed: %s", issue.id, self.method.value, e)
            return None
        except asyncio.TimeoutError:
            logger.warning(
                "Issue %s: %s tier timed out after %.1fs", issue.id, self.method.value, self._timeout
            )
            return None

        if match is None:
            logger.debug("Issue %s: no match via %s", issue.id, self.method.value)
            return None

        logger.info("Issue %s: %s", issue.id, match.reason)
        return AssignmentOutcome.assigned(
            authority_id=match.authority.id,
            method=self.method,
            distance_km=match.distance_km,
        )

    @abstractmethod
    async def _match(self, issue: Issue) -> AuthorityMatch | None:
        ...


class PincodeTier(ResolutionTier):
    method = AssignmentMethod.PINCODE

    async def _match(self, issue: Issue) -> AuthorityMatch | None:
        code = issue.normalized_pincode()
        if code is None:
            logger.debug("Issue %s: no pincode provided", issue.id)
            return None

        authority = await self._authorities.find_by_pincode(code)
        if authority is None:
            return None
        return AuthorityMatch(
            authority=authority,
            distance_km=None,
            reason=f"Pincode {code} served by {authority.name}",
        )


class PolygonTier(ResolutionTier):
    method = AssignmentMethod.POLYGON

    async def _match(self, issue: Issue) -> AuthorityMatch | None:
        candidates = await self._authorities.list_with_polygon()
        return find_containing_authority(issue.location, candidates)


class DistanceTier(ResolutionTier):
    method = AssignmentMethod.DISTANCE

    def __init__(
        self,
        authorities: AuthorityRepository,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        timeout_seconds: float | None = None,
    ):
        super().__init__(authorities, timeout_seconds)
        self._max_distance_km = max_distance_km

    async def _match(self, issue: Issue) -> AuthorityMatch | None:
        candidates = await self._authorities.list_with_center()
        return select_nearest_authority(issue.location, candidates, self._max_distance_km)


class JurisdictionFallbackTier(ResolutionTier):
    method = AssignmentMethod.JURISDICTION_FALLBACK

    def __init__(
        self,
        authorities: AuthorityRepository,
        level_hint: str = DEFAULT_LEVEL_HINT,
        keywords: dict[str, str] | None = None,
        timeout_seconds: float | None = None,
    ):
        super().__init__(authorities, timeout_seconds)
        self._level_hint = level_hint
        self._keywords = keywords if keywords is not None else JURISDICTION_KEYWORDS

    async def _match(self, issue: Issue) -> AuthorityMatch | None:
        code = extract_jurisdiction_code(issue.address, self._keywords)
        if code is None:
            logger.debug("Issue %s: no jurisdiction keyword in address", issue.id)
            return None

        authority = await self._authorities.find_by_jurisdiction(code, self._level_hint)
        if authority is None:
            return None
        return AuthorityMatch(
            authority=authority,
            distance_km=None,
            reason=f"Jurisdiction {code} fallback to {authority.name}",
        )


class ResolutionEngine:
    """Runs the tiers strictly in order; the first match wins."""

    def __init__(self, tiers: list[ResolutionTier]):
        self._tiers = list(tiers)

    @classmethod
    def default(
        cls,
        authorities: AuthorityRepository,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        level_hint: str = DEFAULT_LEVEL_HINT,
        lookup_timeout_seconds: float | None = None,
    ) -> ResolutionEngine:
        """pincode → polygon → distance → jurisdiction fallback."""
        return cls(
            [
                PincodeTier(authorities, timeout_seconds=lookup_timeout_seconds),
                PolygonTier(authorities, timeout_seconds=lookup_timeout_seconds),
                DistanceTier(
                    authorities,
                    max_distance_km=max_distance_km,
                    timeout_seconds=lookup_timeout_seconds,
                ),
                JurisdictionFallbackTier(
                    authorities,
                    level_hint=level_hint,
                    timeout_seconds=lookup_timeout_seconds,
                ),
            ]
        )

    @property
    def tiers(self) -> list[ResolutionTier]:
        return list(self._tiers)

    async def resolve(self, issue: Issue) -> AssignmentOutcome:
        """Resolve an issue to one authority.

        Returns:
            - an assigned outcome tagged with the winning tier,
            - ``unassigned`` when every tier came back empty,
            - ``error`` when the issue has no usable coordinates or an
              unexpected fault occurred.
        """
        try:
            if not issue.has_coordinates():
                raise PreconditionMissingError(f"Issue {issue.id} missing coordinates")

            for tier in self._tiers:
                outcome = await tier.attempt(issue)
                if outcome is not None:
                    return outcome

            logger.info("Issue %s: no tier produced a match", issue.id)
            return AssignmentOutcome.unassigned()

        except PreconditionMissingError as e:
            logger.error("%s", e)
            return AssignmentOutcome.failed(str(e))
        except Exception as e:
            logger.exception("Unexpected error resolving issue %s", issue.id)
            return AssignmentOutcome.failed(str(e) or type(e).__name__)
