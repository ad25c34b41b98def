"""SubmitIssueUseCase — store a newly reported issue."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from app.application.ports.issue_repo import IssueRepository
from app.domain.entities.issue import Issue

logger = logging.getLogger(__name__)


class SubmitIssueUseCase:
    def __init__(self, issue_repo: IssueRepository):
        self._issues = issue_repo

    async def execute(
        self,
        latitude: float | None,
        longitude: float | None,
        pincode: str | None = None,
        address: str | None = None,
        image_url: str | None = None,
    ) -> Issue:
        """Persist the issue in the pending state.

        Coordinates are not validated here: an issue without them is still
        stored and the assignment flow marks it as ``error``.
        """
        issue = Issue(
            id=uuid.uuid4().hex,
            latitude=latitude,
            longitude=longitude,
            pincode=pincode,
            address=address,
            image_url=image_url,
            created_at=datetime.now(timezone.utc),
        )
        issue = await self._issues.save(issue)
        logger.info("Issue %s submitted", issue.id)
        return issue
