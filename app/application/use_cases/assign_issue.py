"""AssignIssueUseCase — resolve → persist → notify → audit, once per new issue."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.application.ports.authority_repo import AuthorityRepository
from app.application.ports.issue_repo import IssueRepository
from app.application.use_cases.notify_authority import DispatchReport, NotificationDispatcher
from app.application.use_cases.record_assignment import AuditLogger
from app.application.use_cases.resolve_authority import ResolutionEngine
from app.domain.entities.audit_record import AuditRecord
from app.domain.entities.issue import Issue
from app.domain.value_objects.assignment_outcome import AssignmentOutcome
from app.domain.value_objects.enums import AssignmentMethod, ResolutionState

logger = logging.getLogger(__name__)


@dataclass
class AssignmentResult:
    """Summary of one issue's assignment flow."""

    issue_id: str
    outcome: AssignmentOutcome
    states: list[ResolutionState] = field(default_factory=list)
    notification: DispatchReport | None = None
    audit_record: AuditRecord | None = None

    @property
    def final_state(self) -> ResolutionState:
        return self.states[-1]


def _state_for(outcome: AssignmentOutcome) -> ResolutionState:
    if outcome.is_assigned:
        return ResolutionState.ASSIGNED
    if outcome.method == AssignmentMethod.ERROR:
        return ResolutionState.ERROR
    return ResolutionState.UNASSIGNED


class AssignIssueUseCase:
    """Orchestrates the assignment of a single issue.

    State flow:
        received → resolving → {assigned, unassigned, error}
                 → notifying (assigned only) → logged

    ``execute`` never raises: every fault is turned into a persisted
    ``error`` outcome so the issue always ends with a definite method.
    """

    def __init__(
        self,
        engine: ResolutionEngine,
        issue_repo: IssueRepository,
        authority_repo: AuthorityRepository,
        dispatcher: NotificationDispatcher,
        audit_logger: AuditLogger,
    ):
        self._engine = engine
        self._issues = issue_repo
        self._authorities = authority_repo
        self._dispatcher = dispatcher
        self._audit = audit_logger

    async def execute(self, issue: Issue) -> AssignmentResult:
        states = [ResolutionState.RECEIVED, ResolutionState.RESOLVING]
        logger.info(
            "Processing issue %s (pincode=%r, lat=%s, lon=%s)",
            issue.id, issue.pincode, issue.latitude, issue.longitude,
        )

        try:
            outcome = await self._engine.resolve(issue)
        except Exception as e:
            logger.exception("Error processing issue %s", issue.id)
            outcome = AssignmentOutcome.failed(str(e) or type(e).__name__)

        outcome = await self._persist(issue, outcome)
        states.append(_state_for(outcome))
        logger.info(
            "Issue %s assigned to %s via %s", issue.id, outcome.authority_id, outcome.method.value
        )

        notification = None
        if outcome.is_assigned:
            states.append(ResolutionState.NOTIFYING)
            notification = await self._notify(outcome.authority_id, issue)

        audit_record = await self._audit.record(outcome, issue)
        states.append(ResolutionState.LOGGED)

        return AssignmentResult(
            issue_id=str(issue.id),
            outcome=outcome,
            states=states,
            notification=notification,
            audit_record=audit_record,
        )

    async def _persist(self, issue: Issue, outcome: AssignmentOutcome) -> AssignmentOutcome:
        """Write the outcome onto the issue; degrade to an error outcome on failure."""
        assigned_at = datetime.now(timezone.utc)
        try:
            await self._issues.update_assignment(
                issue.id, outcome.authority_id, outcome.method, assigned_at, outcome.error
            )
        except Exception as e:
            logger.exception("Error saving assignment of issue %s", issue.id)
            outcome = AssignmentOutcome.failed(f"Failed to save assignment: {e}")
            try:
                await self._issues.update_assignment(
                    issue.id, outcome.authority_id, outcome.method, assigned_at, outcome.error
                )
            except Exception:
                logger.exception("Could not mark issue %s as failed", issue.id)

        issue.assigned_to = outcome.authority_id
        issue.assigned_at = assigned_at
        issue.assignment_method = outcome.method
        issue.assignment_error = outcome.error
        return outcome

    async def _notify(self, authority_id: str, issue: Issue) -> DispatchReport | None:
        try:
            authority = await self._authorities.get_by_id(authority_id)
            if authority is None:
                logger.error("Authority %s not found, skipping notification", authority_id)
                return None
            report = await self._dispatcher.notify(authority, issue)
        except Exception:
            logger.exception("Error sending notification for issue %s", issue.id)
            return None

        if report.invalid_endpoints:
            logger.warning(
                "Issue %s: %d/%d notification(s) failed",
                issue.id, len(report.invalid_endpoints), report.attempted,
            )
        return report


class AssignPendingIssuesUseCase:
    """Re-run the assignment flow for issues left pending (e.g. after a crash)."""

    def __init__(self, assign_issue: AssignIssueUseCase, issue_repo: IssueRepository):
        self._assign = assign_issue
        self._issues = issue_repo

    async def execute(self) -> list[AssignmentResult]:
        issues = await self._issues.get_pending()
        logger.info("Assigning %d pending issues", len(issues))

        results = []
        for issue in issues:
            results.append(await self._assign.execute(issue))

        assigned = sum(1 for r in results if r.outcome.is_assigned)
        logger.info("Batch complete: %d/%d assigned", assigned, len(results))
        return results
