"""Tests for SubmitIssueUseCase and the issue-created event hub."""

from __future__ import annotations

import pytest

from app.application.events import IssueEvents
from app.application.ports.issue_repo import IssueRepository
from app.application.use_cases.submit_issue import SubmitIssueUseCase
from app.domain.entities.issue import Issue


class FakeIssueRepo(IssueRepository):
    def __init__(self):
        self.issues: dict[str, Issue] = {}

    async def save(self, issue):
        self.issues[issue.id] = issue
        return issue

    async def get_by_id(self, issue_id):
        return self.issues.get(issue_id)

    async def get_all(self):
        return list(self.issues.values())

    async def get_pending(self):
        return [i for i in self.issues.values() if i.is_pending()]

    async def update_assignment(self, issue_id, assigned_to, method, assigned_at, error=None):
        pass

    async def reassign(self, issue_id, authority_id, reassigned_by, reassigned_at):
        pass


# ─── SubmitIssueUseCase ──────────────────────────────────────────────


@pytest.mark.asyncio
async def test_submit_stores_pending_issue():
    repo = FakeIssueRepo()
    issue = await SubmitIssueUseCase(repo).execute(
        latitude=13.0827, longitude=80.2707, pincode="600001",
        address="T Nagar, Chennai", image_url="https://img.example/1.jpg",
    )

    assert issue.id in repo.issues
    assert len(issue.id) == 32
    assert issue.created_at is not None
    assert issue.is_pending()
    assert issue.assigned_to is None


@pytest.mark.asyncio
async def test_submit_accepts_missing_coordinates():
    repo = FakeIssueRepo()
    issue = await SubmitIssueUseCase(repo).execute(latitude=None, longitude=None)
    assert not issue.has_coordinates()
    assert await repo.get_pending() == [issue]


@pytest.mark.asyncio
async def test_submit_generates_unique_ids():
    uc = SubmitIssueUseCase(FakeIssueRepo())
    first = await uc.execute(latitude=1.0, longitude=1.0)
    second = await uc.execute(latitude=1.0, longitude=1.0)
    assert first.id != second.id


# ─── IssueEvents ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_publish_created_runs_handlers_in_order():
    events = IssueEvents()
    seen: list[tuple[str, str]] = []

    @events.on_issue_created
    async def first(issue):
        seen.append(("first", issue.id))

    @events.on_issue_created
    async def second(issue):
        seen.append(("second", issue.id))

    await events.publish_created(Issue(id="issue-1", latitude=1.0, longitude=1.0))
    assert seen == [("first", "issue-1"), ("second", "issue-1")]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    events = IssueEvents()
    seen: list[str] = []

    async def broken(issue):
        raise RuntimeError("handler crashed")

    async def healthy(issue):
        seen.append(issue.id)

    events.on_issue_created(broken)
    events.on_issue_created(healthy)

    await events.publish_created(Issue(id="issue-1", latitude=1.0, longitude=1.0))
    assert seen == ["issue-1"]


def test_decorator_returns_handler():
    events = IssueEvents()

    async def handler(issue):
        return None

    assert events.on_issue_created(handler) is handler
