"""In-process issue event hub.

The assignment flow subscribes to issue creation only; updates are never
published, so an issue is not re-resolved when it changes.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.domain.entities.issue import Issue

logger = logging.getLogger(__name__)

IssueCreatedHandler = Callable[[Issue], Awaitable[object]]


class IssueEvents:
    def __init__(self) -> None:
        self._created_handlers: list[IssueCreatedHandler] = []

    def on_issue_created(self, handler: IssueCreatedHandler) -> IssueCreatedHandler:
        """Subscribe a handler; returns it so this can be used as a decorator."""
        self._created_handlers.append(handler)
        return handler

    async def publish_created(self, issue: Issue) -> None:
        for handler in list(self._created_handlers):
            try:
                await handler(issue)
            except Exception:
                logger.exception(
                    "Issue-created handler %s failed for issue %s",
                    getattr(handler, "__name__", handler), issue.id,
                )
