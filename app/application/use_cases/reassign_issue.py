"""ReassignIssueUseCase — admin override of an issue's authority."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from app.application.ports.authority_repo import AuthorityRepository
from app.application.ports.issue_repo import IssueRepository
from app.domain.entities.issue import Issue
from app.domain.errors import (
    AdminInvalidArgumentError,
    AdminPermissionDeniedError,
    IssueNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminCaller:
    uid: str
    is_admin: bool


class ReassignIssueUseCase:
    """Overwrites the assignment directly, bypassing the resolution cascade."""

    def __init__(self, issue_repo: IssueRepository, authority_repo: AuthorityRepository):
        self._issues = issue_repo
        self._authorities = authority_repo

    async def execute(
        self,
        caller: AdminCaller | None,
        issue_id: str | None,
        new_authority_id: str | None,
    ) -> Issue:
        """
        Raises:
            AdminPermissionDeniedError: caller is anonymous or not an admin.
            AdminInvalidArgumentError: missing ids or unknown authority.
            IssueNotFoundError: no issue with this id.
        """
        if caller is None or not caller.is_admin:
            raise AdminPermissionDeniedError("Admin access required")
        if not issue_id or not new_authority_id:
            raise AdminInvalidArgumentError("Missing issueId or newAuthorityId")

        issue = await self._issues.get_by_id(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id)
        if await self._authorities.get_by_id(new_authority_id) is None:
            raise AdminInvalidArgumentError(f"Unknown authority {new_authority_id}")

        reassigned_at = datetime.now(timezone.utc)
        await self._issues.reassign(issue_id, new_authority_id, caller.uid, reassigned_at)

        issue.assigned_to = new_authority_id
        issue.reassigned_at = reassigned_at
        issue.reassigned_by = caller.uid
        logger.info("Issue %s reassigned to %s by %s", issue_id, new_authority_id, caller.uid)
        return issue
