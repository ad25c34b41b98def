"""Issue endpoints — submit, list, detail, audit trail and assignment retries."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import SqlAuditRepository, SqlIssueRepository
from app.application.use_cases.assign_issue import (
    AssignIssueUseCase,
    AssignmentResult,
    AssignPendingIssuesUseCase,
)
from app.application.use_cases.submit_issue import SubmitIssueUseCase
from app.domain.entities.audit_record import AuditRecord
from app.domain.entities.issue import Issue
from app.infrastructure.api.dependencies import (
    get_assign_issue_uc,
    get_assign_pending_uc,
    get_audit_repo,
    get_issue_repo,
    get_submit_issue_uc,
    issue_events,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["issues"])


class IssueCreateRequest(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    pincode: str | None = None
    address: str | None = None
    image_url: str | None = None


@router.post("", status_code=201)
async def submit_issue(
    body: IssueCreateRequest,
    background_tasks: BackgroundTasks,
    submit_uc: SubmitIssueUseCase = Depends(get_submit_issue_uc),
    session: AsyncSession = Depends(get_session),
):
    """Store a new issue; authority resolution runs after the response is sent."""
    issue = await submit_uc.execute(
        latitude=body.latitude,
        longitude=body.longitude,
        pincode=body.pincode,
        address=body.address,
        image_url=body.image_url,
    )
    await session.commit()

    background_tasks.add_task(issue_events.publish_created, issue)
    return _serialize_issue(issue)


@router.get("")
async def list_issues(issue_repo: SqlIssueRepository = Depends(get_issue_repo)):
    issues = await issue_repo.get_all()
    return {
        "total": len(issues),
        "issues": [_serialize_issue(i) for i in issues],
    }


@router.post("/assign-pending")
async def assign_pending(
    batch_uc: AssignPendingIssuesUseCase = Depends(get_assign_pending_uc),
    session: AsyncSession = Depends(get_session),
):
    """Run the assignment flow for every issue that never got a method."""
    results = await batch_uc.execute()
    await session.commit()

    assigned = [r for r in results if r.outcome.is_assigned]
    return {
        "status": "ok",
        "total_processed": len(results),
        "assigned": len(assigned),
        "unassigned_or_error": len(results) - len(assigned),
        "results": [_serialize_result(r) for r in results],
    }


@router.get("/{issue_id}")
async def get_issue(issue_id: str, issue_repo: SqlIssueRepository = Depends(get_issue_repo)):
    issue = await issue_repo.get_by_id(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return _serialize_issue(issue)


@router.get("/{issue_id}/audit")
async def get_issue_audit(
    issue_id: str,
    issue_repo: SqlIssueRepository = Depends(get_issue_repo),
    audit_repo: SqlAuditRepository = Depends(get_audit_repo),
):
    """Every assignment attempt recorded for this issue, oldest first."""
    if not await issue_repo.get_by_id(issue_id):
        raise HTTPException(status_code=404, detail="Issue not found")
    records = await audit_repo.get_by_issue(issue_id)
    return {
        "issue_id": issue_id,
        "total": len(records),
        "records": [_serialize_audit(r) for r in records],
    }


@router.post("/{issue_id}/assign")
async def assign_single(
    issue_id: str,
    assign_uc: AssignIssueUseCase = Depends(get_assign_issue_uc),
    issue_repo: SqlIssueRepository = Depends(get_issue_repo),
    session: AsyncSession = Depends(get_session),
):
    """Retry the assignment flow for one pending issue."""
    issue = await issue_repo.get_by_id(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    if not issue.is_pending():
        raise HTTPException(
            status_code=409,
            detail=f"Issue already resolved via {issue.assignment_method.value}",
        )

    result = await assign_uc.execute(issue)
    await session.commit()
    return {"status": "ok", **_serialize_result(result)}


def _serialize_issue(i: Issue) -> dict:
    return {
        "id": i.id,
        "latitude": i.latitude,
        "longitude": i.longitude,
        "pincode": i.pincode,
        "address": i.address,
        "image_url": i.image_url,
        "created_at": i.created_at.isoformat() if i.created_at else None,
        "assigned_to": i.assigned_to,
        "assigned_at": i.assigned_at.isoformat() if i.assigned_at else None,
        "assignment_method": i.assignment_method.value if i.assignment_method else None,
        "assignment_error": i.assignment_error,
        "reassigned_at": i.reassigned_at.isoformat() if i.reassigned_at else None,
        "reassigned_by": i.reassigned_by,
    }


def _serialize_audit(r: AuditRecord) -> dict:
    return {
        "id": r.id,
        "issue_id": r.issue_id,
        "assigned_to": r.assigned_to,
        "method": r.method.value,
        "inputs": r.inputs,
        "error": r.error,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def _serialize_result(r: AssignmentResult) -> dict:
    data = {
        "issue_id": r.issue_id,
        "assigned_to": r.outcome.authority_id,
        "method": r.outcome.method.value,
        "distance_km": r.outcome.distance_km,
        "error": r.outcome.error,
        "states": [s.value for s in r.states],
    }
    if r.notification:
        data["notification"] = {
            "attempted": r.notification.attempted,
            "invalid": len(r.notification.invalid_endpoints),
            "pruned": r.notification.pruned,
        }
    else:
        data["notification"] = None
    return data
