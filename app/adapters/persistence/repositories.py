"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.models import (
    AssignmentLogModel,
    AuthorityModel,
    IssueModel,
)
from app.application.ports.audit_repo import AuditRepository
from app.application.ports.authority_repo import AuthorityRepository
from app.application.ports.issue_repo import IssueRepository
from app.domain.entities.audit_record import AuditRecord
from app.domain.entities.authority import Authority
from app.domain.entities.issue import Issue
from app.domain.errors import LookupFailureError
from app.domain.value_objects.enums import AssignmentMethod
from app.domain.value_objects.geo_point import GeoPoint

# ─── Mappers ─────────────────────────────────────────────────────────


def _authority_to_domain(m: AuthorityModel) -> Authority:
    center = None
    if m.center_lat is not None and m.center_lon is not None:
        center = GeoPoint(latitude=m.center_lat, longitude=m.center_lon)
    return Authority(
        id=m.id,
        name=m.name,
        pincodes=set(m.pincodes) if m.pincodes else set(),
        polygon=m.polygon,
        center=center,
        jurisdiction_code=m.jurisdiction_code,
        endpoint_tokens=list(m.endpoint_tokens or []),
    )


def _issue_to_domain(m: IssueModel) -> Issue:
    return Issue(
        id=m.id,
        latitude=m.latitude,
        longitude=m.longitude,
        pincode=m.pincode,
        address=m.address,
        image_url=m.image_url,
        created_at=m.created_at,
        assigned_to=m.assigned_to,
        assigned_at=m.assigned_at,
        assignment_method=AssignmentMethod(m.assignment_method) if m.assignment_method else None,
        assignment_error=m.assignment_error,
        reassigned_at=m.reassigned_at,
        reassigned_by=m.reassigned_by,
    )


def _audit_to_domain(m: AssignmentLogModel) -> AuditRecord:
    return AuditRecord(
        id=m.id,
        issue_id=m.issue_id,
        assigned_to=m.assigned_to,
        method=AssignmentMethod(m.method),
        inputs=dict(m.inputs or {}),
        error=m.error,
        created_at=m.created_at,
    )


@asynccontextmanager
async def _lookup(session: AsyncSession, what: str) -> AsyncIterator[None]:
    """Run one read in its own SAVEPOINT and translate driver/ORM failures.

    A failed or cancelled statement aborts the whole transaction on PostgreSQL;
    rolling back to the savepoint keeps the session usable for later tiers and
    for the assignment write.
    """
    try:
        async with session.begin_nested():
            yield
    except SQLAlchemyError as e:
        raise LookupFailureError(f"{what} failed: {e}") from e


# ─── Repositories ────────────────────────────────────────────────────


class SqlAuthorityRepository(AuthorityRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, authority: Authority) -> Authority:
        m = AuthorityModel(
            id=authority.id,
            name=authority.name,
            pincodes=sorted(authority.pincodes),
            polygon=authority.polygon,
            center_lat=authority.center.latitude if authority.center else None,
            center_lon=authority.center.longitude if authority.center else None,
            jurisdiction_code=authority.jurisdiction_code,
            endpoint_tokens=list(authority.endpoint_tokens),
        )
        self._s.add(m)
        await self._s.flush()
        return authority

    async def get_by_id(self, authority_id: str) -> Authority | None:
        async with _lookup(self._s, f"Authority {authority_id} lookup"):
            # populate_existing: endpoint pruning must see the stored list, not a cached one
            m = await self._s.get(AuthorityModel, authority_id, populate_existing=True)
        return _authority_to_domain(m) if m else None

    async def get_all(self) -> list[Authority]:
        async with _lookup(self._s, "Authority listing"):
            result = await self._s.execute(select(AuthorityModel).order_by(AuthorityModel.id))
            return [_authority_to_domain(m) for m in result.scalars()]

    async def find_by_pincode(self, code: str) -> Authority | None:
        async with _lookup(self._s, f"Pincode {code} lookup"):
            result = await self._s.execute(
                select(AuthorityModel)
                .where(AuthorityModel.pincodes.contains([code.strip()]))
                .order_by(AuthorityModel.id)
                .limit(1)
            )
            m = result.scalar_one_or_none()
        return _authority_to_domain(m) if m else None

    async def list_with_polygon(self) -> list[Authority]:
        async with _lookup(self._s, "Polygon authority listing"):
            result = await self._s.execute(
                select(AuthorityModel)
                .where(AuthorityModel.polygon.is_not(None))
                .order_by(AuthorityModel.id)
            )
            return [_authority_to_domain(m) for m in result.scalars()]

    async def list_with_center(self) -> list[Authority]:
        async with _lookup(self._s, "Center authority listing"):
            result = await self._s.execute(
                select(AuthorityModel)
                .where(
                    AuthorityModel.center_lat.is_not(None),
                    AuthorityModel.center_lon.is_not(None),
                )
                .order_by(AuthorityModel.id)
            )
            return [_authority_to_domain(m) for m in result.scalars()]

    async def find_by_jurisdiction(self, code: str, level_hint: str) -> Authority | None:
        async with _lookup(self._s, f"Jurisdiction {code} lookup"):
            result = await self._s.execute(
                select(AuthorityModel)
                .where(
                    AuthorityModel.jurisdiction_code == code,
                    AuthorityModel.name.ilike(f"%{level_hint}%"),
                )
                .order_by(AuthorityModel.id)
                .limit(1)
            )
            m = result.scalar_one_or_none()
        return _authority_to_domain(m) if m else None

    async def update_endpoints(self, authority_id: str, tokens: list[str]) -> None:
        async with self._s.begin_nested():
            await self._s.execute(
                update(AuthorityModel)
                .where(AuthorityModel.id == authority_id)
                .values(endpoint_tokens=list(tokens))
            )


class SqlIssueRepository(IssueRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, issue: Issue) -> Issue:
        m = IssueModel(
            id=issue.id,
            latitude=issue.latitude,
            longitude=issue.longitude,
            pincode=issue.pincode,
            address=issue.address,
            image_url=issue.image_url,
        )
        if issue.created_at is not None:
            m.created_at = issue.created_at
        self._s.add(m)
        await self._s.flush()
        issue.created_at = m.created_at
        return issue

    async def get_by_id(self, issue_id: str) -> Issue | None:
        m = await self._s.get(IssueModel, issue_id)
        return _issue_to_domain(m) if m else None

    async def get_all(self) -> list[Issue]:
        result = await self._s.execute(select(IssueModel).order_by(IssueModel.created_at))
        return [_issue_to_domain(m) for m in result.scalars()]

    async def get_pending(self) -> list[Issue]:
        result = await self._s.execute(
            select(IssueModel)
            .where(IssueModel.assignment_method.is_(None))
            .order_by(IssueModel.created_at)
        )
        return [_issue_to_domain(m) for m in result.scalars()]

    async def update_assignment(
        self,
        issue_id: str,
        assigned_to: str,
        method: AssignmentMethod,
        assigned_at: datetime,
        error: str | None = None,
    ) -> None:
        async with self._s.begin_nested():
            await self._s.execute(
                update(IssueModel)
                .where(IssueModel.id == issue_id)
                .values(
                    assigned_to=assigned_to,
                    assigned_at=assigned_at,
                    assignment_method=method.value,
                    assignment_error=error,
                )
            )

    async def reassign(
        self, issue_id: str, authority_id: str, reassigned_by: str, reassigned_at: datetime
    ) -> None:
        await self._s.execute(
            update(IssueModel)
            .where(IssueModel.id == issue_id)
            .values(
                assigned_to=authority_id,
                reassigned_at=reassigned_at,
                reassigned_by=reassigned_by,
            )
        )
        await self._s.flush()


class SqlAuditRepository(AuditRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def append(self, record: AuditRecord) -> AuditRecord:
        m = AssignmentLogModel(
            issue_id=record.issue_id,
            assigned_to=record.assigned_to,
            method=record.method.value,
            inputs=dict(record.inputs),
            error=record.error,
        )
        if record.created_at is not None:
            m.created_at = record.created_at
        # SAVEPOINT: a failed audit insert must not roll back the assignment
        async with self._s.begin_nested():
            self._s.add(m)
            await self._s.flush()
        return replace(record, id=m.id, created_at=m.created_at)

    async def get_by_issue(self, issue_id: str) -> list[AuditRecord]:
        result = await self._s.execute(
            select(AssignmentLogModel)
            .where(AssignmentLogModel.issue_id == issue_id)
            .order_by(AssignmentLogModel.id)
        )
        return [_audit_to_domain(m) for m in result.scalars()]
