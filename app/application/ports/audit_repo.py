"""Port interface for the append-only assignment audit log."""

from abc import ABC, abstractmethod

from app.domain.entities.audit_record import AuditRecord


class AuditRepository(ABC):
    @abstractmethod
    async def append(self, record: AuditRecord) -> AuditRecord:
        ...

    @abstractmethod
    async def get_by_issue(self, issue_id: str) -> list[AuditRecord]:
        ...
