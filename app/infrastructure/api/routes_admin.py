"""Admin endpoints — manual reassignment of an issue."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.application.use_cases.reassign_issue import AdminCaller, ReassignIssueUseCase
from app.domain.errors import (
    AdminInvalidArgumentError,
    AdminPermissionDeniedError,
    IssueNotFoundError,
    LookupFailureError,
)
from app.infrastructure.api.dependencies import get_admin_caller, get_reassign_issue_uc

router = APIRouter(prefix="/admin", tags=["admin"])


class ReassignRequest(BaseModel):
    issue_id: str | None = Field(default=None, alias="issueId")
    new_authority_id: str | None = Field(default=None, alias="newAuthorityId")


@router.post("/reassign")
async def reassign_issue(
    body: ReassignRequest,
    caller: AdminCaller | None = Depends(get_admin_caller),
    reassign_uc: ReassignIssueUseCase = Depends(get_reassign_issue_uc),
    session: AsyncSession = Depends(get_session),
):
    """Point an issue at a different authority. The resolution cascade is not re-run."""
    try:
        issue = await reassign_uc.execute(caller, body.issue_id, body.new_authority_id)
    except AdminPermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except AdminInvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IssueNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LookupFailureError as e:
        raise HTTPException(status_code=503, detail=str(e))

    await session.commit()
    return {
        "success": True,
        "issue_id": issue.id,
        "assigned_to": issue.assigned_to,
        "reassigned_by": issue.reassigned_by,
        "reassigned_at": issue.reassigned_at.isoformat() if issue.reassigned_at else None,
    }
