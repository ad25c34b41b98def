"""Tests for FcmAdapter against a mocked HTTP transport (no network)."""

import json

import httpx
import pytest

from app.adapters.notifications.fcm_adapter import FcmAdapter
from app.adapters.notifications.log_only_adapter import LogOnlyAdapter
from app.application.ports.notification_port import DeliveryResult, NotificationPayload

PAYLOAD = NotificationPayload(
    title="New Civic Issue Assigned",
    body="New issue reported at T Nagar",
    data={"issueId": "issue-1", "authorityId": "chn-corp"},
)


def _adapter(handler) -> FcmAdapter:
    return FcmAdapter(
        project_id="demo-project",
        access_token="secret-token",
        transport=httpx.MockTransport(handler),
    )


def _error(status_code: int, status: str) -> httpx.Response:
    return httpx.Response(status_code, json={"error": {"code": status_code, "status": status}})


@pytest.mark.asyncio
async def test_accepted_message():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "projects/demo-project/messages/1"})

    result = await _adapter(handler).send("device-token-1", PAYLOAD)

    assert result == DeliveryResult(ok=1)
    assert result.delivered

    request = seen[0]
    assert request.url == "https://fcm.googleapis.com/v1/projects/demo-project/messages:send"
    assert request.headers["Authorization"] == "Bearer secret-token"
    body = json.loads(request.content)
    assert body == {
        "message": {
            "token": "device-token-1",
            "notification": {"title": PAYLOAD.title, "body": PAYLOAD.body},
            "data": PAYLOAD.data,
        }
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code,status",
    [(404, "UNREGISTERED"), (400, "INVALID_ARGUMENT"), (404, "NOT_FOUND")],
)
async def test_dead_token_reported_as_failed(status_code, status):
    result = await _adapter(lambda request: _error(status_code, status)).send("dead", PAYLOAD)

    assert result == DeliveryResult(failed=1)
    assert not result.delivered


@pytest.mark.asyncio
async def test_server_error_raises():
    adapter = _adapter(lambda request: _error(503, "UNAVAILABLE"))
    with pytest.raises(httpx.HTTPStatusError):
        await adapter.send("device-token-1", PAYLOAD)


@pytest.mark.asyncio
async def test_non_json_error_raises():
    adapter = _adapter(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
    with pytest.raises(httpx.HTTPStatusError):
        await adapter.send("device-token-1", PAYLOAD)


@pytest.mark.asyncio
async def test_custom_endpoint_template():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    adapter = FcmAdapter(
        project_id="p1",
        access_token="t",
        endpoint_template="http://fcm.local/{project_id}/send",
        transport=httpx.MockTransport(handler),
    )
    await adapter.send("tok", PAYLOAD)
    assert str(seen[0].url) == "http://fcm.local/p1/send"


@pytest.mark.asyncio
async def test_missing_credentials_skips_request(monkeypatch):
    from app.adapters.notifications import fcm_adapter

    monkeypatch.setattr(fcm_adapter.settings, "fcm_project_id", "")
    monkeypatch.setattr(fcm_adapter.settings, "fcm_access_token", "")

    def handler(request):
        raise AssertionError("no request expected")

    adapter = FcmAdapter(transport=httpx.MockTransport(handler))
    assert await adapter.send("tok", PAYLOAD) == DeliveryResult()


@pytest.mark.asyncio
async def test_log_only_adapter_always_delivers():
    assert await LogOnlyAdapter().send("tok-123456789012345", PAYLOAD) == DeliveryResult(ok=1)
