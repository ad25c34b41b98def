"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.notifications.fcm_adapter import FcmAdapter
from app.adapters.notifications.log_only_adapter import LogOnlyAdapter
from app.adapters.persistence.database import async_session_factory, get_session
from app.adapters.persistence.repositories import (
    SqlAuditRepository,
    SqlAuthorityRepository,
    SqlIssueRepository,
)
from app.application.events import IssueEvents
from app.application.ports.notification_port import NotificationTransport
from app.application.use_cases.assign_issue import (
    AssignIssueUseCase,
    AssignPendingIssuesUseCase,
)
from app.application.use_cases.notify_authority import NotificationDispatcher
from app.application.use_cases.reassign_issue import AdminCaller, ReassignIssueUseCase
from app.application.use_cases.record_assignment import AuditLogger
from app.application.use_cases.resolve_authority import ResolutionEngine
from app.application.use_cases.submit_issue import SubmitIssueUseCase
from app.config import settings
from app.domain.entities.issue import Issue

logger = logging.getLogger(__name__)

# Re-export session dependency
get_db_session = get_session

# Singleton adapters (stateless)
_transport: NotificationTransport
if settings.fcm_project_id and settings.fcm_access_token:
    _transport = FcmAdapter(timeout=settings.notification_timeout_seconds)
    logger.info("Using FCM for push notifications")
else:
    _transport = LogOnlyAdapter()

issue_events = IssueEvents()


def transport_name() -> str:
    return "fcm" if isinstance(_transport, FcmAdapter) else "log-only"


def build_assign_issue_uc(session: AsyncSession) -> AssignIssueUseCase:
    authority_repo = SqlAuthorityRepository(session)
    return AssignIssueUseCase(
        engine=ResolutionEngine.default(
            authority_repo,
            max_distance_km=settings.max_distance_km,
            level_hint=settings.jurisdiction_level_hint,
            lookup_timeout_seconds=settings.lookup_timeout_seconds,
        ),
        issue_repo=SqlIssueRepository(session),
        authority_repo=authority_repo,
        dispatcher=NotificationDispatcher(
            transport=_transport,
            authority_repo=authority_repo,
            timeout_seconds=settings.notification_timeout_seconds,
        ),
        audit_logger=AuditLogger(SqlAuditRepository(session)),
    )


@issue_events.on_issue_created
async def handle_issue_created(issue: Issue) -> None:
    """Run the assignment flow in a session of its own, after the request is gone."""
    async with async_session_factory() as session:
        await build_assign_issue_uc(session).execute(issue)
        await session.commit()


def get_issue_repo(session: AsyncSession = Depends(get_session)) -> SqlIssueRepository:
    return SqlIssueRepository(session)


def get_authority_repo(session: AsyncSession = Depends(get_session)) -> SqlAuthorityRepository:
    return SqlAuthorityRepository(session)


def get_audit_repo(session: AsyncSession = Depends(get_session)) -> SqlAuditRepository:
    return SqlAuditRepository(session)


def get_submit_issue_uc(session: AsyncSession = Depends(get_session)) -> SubmitIssueUseCase:
    return SubmitIssueUseCase(SqlIssueRepository(session))


def get_assign_issue_uc(session: AsyncSession = Depends(get_session)) -> AssignIssueUseCase:
    return build_assign_issue_uc(session)


def get_assign_pending_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignPendingIssuesUseCase:
    return AssignPendingIssuesUseCase(
        assign_issue=build_assign_issue_uc(session),
        issue_repo=SqlIssueRepository(session),
    )


def get_reassign_issue_uc(session: AsyncSession = Depends(get_session)) -> ReassignIssueUseCase:
    return ReassignIssueUseCase(SqlIssueRepository(session), SqlAuthorityRepository(session))


def get_admin_caller(
    authorization: str | None = Header(default=None),
    x_admin_uid: str | None = Header(default=None),
) -> AdminCaller | None:
    """Resolve the caller from ``Authorization: Bearer <key>``.

    Returns None for anonymous requests; a wrong key yields a non-admin caller.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    is_admin = bool(settings.admin_api_key) and secrets.compare_digest(
        token.strip().encode(), settings.admin_api_key.encode()
    )
    return AdminCaller(uid=x_admin_uid or "admin", is_admin=is_admin)
