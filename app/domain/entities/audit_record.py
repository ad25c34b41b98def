"""AuditRecord entity — append-only trace of one resolution attempt."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.value_objects.enums import AssignmentMethod


@dataclass(frozen=True)
class AuditRecord:
    id: int | None
    issue_id: str
    assigned_to: str
    method: AssignmentMethod
    inputs: dict = field(default_factory=dict)
    error: str | None = None
    created_at: datetime | None = None
