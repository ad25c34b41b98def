"""AssignmentOutcome value object — the single result of one resolution."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.value_objects.enums import UNASSIGNED, AssignmentMethod


@dataclass(frozen=True)
class AssignmentOutcome:
    authority_id: str
    method: AssignmentMethod
    error: str | None = None
    distance_km: float | None = None  # only set by the distance tier

    @classmethod
    def assigned(
        cls, authority_id: str, method: AssignmentMethod, distance_km: float | None = None
    ) -> AssignmentOutcome:
        return cls(authority_id=authority_id, method=method, distance_km=distance_km)

    @classmethod
    def unassigned(cls) -> AssignmentOutcome:
        return cls(authority_id=UNASSIGNED, method=AssignmentMethod.UNASSIGNED)

    @classmethod
    def failed(cls, message: str) -> AssignmentOutcome:
        return cls(authority_id=UNASSIGNED, method=AssignmentMethod.ERROR, error=message)

    @property
    def is_assigned(self) -> bool:
        return self.authority_id != UNASSIGNED
