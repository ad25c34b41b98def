"""RecordAssignment — append-only audit trail of resolution attempts."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.application.ports.audit_repo import AuditRepository
from app.domain.entities.audit_record import AuditRecord
from app.domain.entities.issue import Issue
from app.domain.value_objects.assignment_outcome import AssignmentOutcome

logger = logging.getLogger(__name__)


class AuditLogger:
    """Fire-and-forget: a failed write is logged once and never retried."""

    def __init__(self, audit_repo: AuditRepository):
        self._audit = audit_repo

    async def record(self, outcome: AssignmentOutcome, issue: Issue) -> AuditRecord | None:
        record = AuditRecord(
            id=None,
            issue_id=str(issue.id),
            assigned_to=outcome.authority_id,
            method=outcome.method,
            inputs={
                "pincode": issue.pincode,
                "latitude": issue.latitude,
                "longitude": issue.longitude,
                "address": issue.address,
            },
            error=outcome.error,
            created_at=datetime.now(timezone.utc),
        )
        try:
            return await self._audit.append(record)
        except Exception:
            logger.exception("Error logging assignment for issue %s", issue.id)
            return None
