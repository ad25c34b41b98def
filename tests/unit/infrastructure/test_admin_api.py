"""Tests for the admin reassignment endpoint and its bearer-key check."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.persistence.database import get_session
from app.application.use_cases.reassign_issue import AdminCaller
from app.domain.entities.issue import Issue
from app.domain.errors import (
    AdminInvalidArgumentError,
    AdminPermissionDeniedError,
    IssueNotFoundError,
    LookupFailureError,
)
from app.infrastructure.api import dependencies
from app.infrastructure.api.dependencies import get_admin_caller, get_reassign_issue_uc
from app.infrastructure.api.routes_admin import router as admin_router

ADMIN_KEY = "s3cret-admin-key"


class FakeSession:
    def __init__(self):
        self.commits = 0

    async def commit(self):
        self.commits += 1


class FakeReassignUseCase:
    """Mirrors ReassignIssueUseCase's contract without a store."""

    def __init__(self, error: Exception | None = None):
        self._error = error
        self.calls: list[tuple] = []

    async def execute(self, caller, issue_id, new_authority_id):
        self.calls.append((caller, issue_id, new_authority_id))
        if caller is None or not caller.is_admin:
            raise AdminPermissionDeniedError("Admin access required")
        if self._error:
            raise self._error
        return Issue(
            id=issue_id, latitude=13.0, longitude=80.0,
            assigned_to=new_authority_id, reassigned_by=caller.uid,
        )


@pytest.fixture(autouse=True)
def admin_key(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "admin_api_key", ADMIN_KEY)


def _client(use_case: FakeReassignUseCase, session: FakeSession) -> TestClient:
    app = FastAPI()
    app.include_router(admin_router, prefix="/api")
    app.dependency_overrides[get_reassign_issue_uc] = lambda: use_case
    app.dependency_overrides[get_session] = lambda: session
    return TestClient(app)


# ─── get_admin_caller ────────────────────────────────────────────────


def test_caller_with_valid_key_is_admin():
    caller = get_admin_caller(authorization=f"Bearer {ADMIN_KEY}", x_admin_uid="ops-1")
    assert caller == AdminCaller(uid="ops-1", is_admin=True)


def test_caller_without_uid_defaults():
    assert get_admin_caller(authorization=f"Bearer {ADMIN_KEY}", x_admin_uid=None).uid == "admin"


def test_caller_with_wrong_key_is_not_admin():
    assert get_admin_caller(authorization="Bearer nope", x_admin_uid=None).is_admin is False


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer "])
def test_anonymous_caller(header):
    assert get_admin_caller(authorization=header, x_admin_uid=None) is None


def test_unconfigured_key_denies_everyone(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "admin_api_key", "")
    assert get_admin_caller(authorization="Bearer ", x_admin_uid=None) is None
    assert get_admin_caller(authorization="Bearer anything", x_admin_uid=None).is_admin is False


# ─── POST /api/admin/reassign ────────────────────────────────────────


def test_reassign_success():
    use_case, session = FakeReassignUseCase(), FakeSession()
    response = _client(use_case, session).post(
        "/api/admin/reassign",
        json={"issueId": "issue-1", "newAuthorityId": "tn-state"},
        headers={"Authorization": f"Bearer {ADMIN_KEY}", "X-Admin-Uid": "ops-1"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["assigned_to"] == "tn-state"
    assert response.json()["reassigned_by"] == "ops-1"
    assert use_case.calls[0][1:] == ("issue-1", "tn-state")
    assert session.commits == 1


def test_reassign_without_credentials_is_403():
    use_case, session = FakeReassignUseCase(), FakeSession()
    response = _client(use_case, session).post(
        "/api/admin/reassign", json={"issueId": "issue-1", "newAuthorityId": "tn-state"}
    )
    assert response.status_code == 403
    assert session.commits == 0


def test_reassign_with_wrong_key_is_403():
    response = _client(FakeReassignUseCase(), FakeSession()).post(
        "/api/admin/reassign",
        json={"issueId": "issue-1", "newAuthorityId": "tn-state"},
        headers={"Authorization": "Bearer wrong"},
    )
    assert response.status_code == 403


@pytest.mark.parametrize(
    "error,status_code",
    [
        (AdminInvalidArgumentError("Unknown authority ghost"), 400),
        (IssueNotFoundError("nope"), 404),
        (LookupFailureError("store down"), 503),
    ],
)
def test_reassign_error_mapping(error, status_code):
    session = FakeSession()
    response = _client(FakeReassignUseCase(error=error), session).post(
        "/api/admin/reassign",
        json={"issueId": "issue-1", "newAuthorityId": "ghost"},
        headers={"Authorization": f"Bearer {ADMIN_KEY}"},
    )
    assert response.status_code == status_code
    assert session.commits == 0


def test_reassign_missing_fields_reach_use_case_as_none():
    use_case = FakeReassignUseCase(error=AdminInvalidArgumentError("Missing issueId"))
    response = _client(use_case, FakeSession()).post(
        "/api/admin/reassign", json={}, headers={"Authorization": f"Bearer {ADMIN_KEY}"}
    )
    assert response.status_code == 400
    assert use_case.calls[0][1:] == (None, None)
