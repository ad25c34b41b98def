"""Port interface for issue persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.issue import Issue
from app.domain.value_objects.enums import AssignmentMethod


class IssueRepository(ABC):
    @abstractmethod
    async def save(self, issue: Issue) -> Issue:
        ...

    @abstractmethod
    async def get_by_id(self, issue_id: str) -> Issue | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Issue]:
        ...

    @abstractmethod
    async def get_pending(self) -> list[Issue]:
        """Return issues that have no assignment method yet."""
        ...

    @abstractmethod
    async def update_assignment(
        self,
        issue_id: str,
        assigned_to: str,
        method: AssignmentMethod,
        assigned_at: datetime,
        error: str | None = None,
    ) -> None:
        ...

    @abstractmethod
    async def reassign(
        self, issue_id: str, authority_id: str, reassigned_by: str, reassigned_at: datetime
    ) -> None:
        ...
