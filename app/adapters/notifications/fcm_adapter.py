"""Firebase Cloud Messaging adapter (HTTP v1 API) — implements NotificationTransport."""

from __future__ import annotations

import logging

import httpx

from app.application.ports.notification_port import (
    DeliveryResult,
    NotificationPayload,
    NotificationTransport,
)
from app.config import settings

logger = logging.getLogger(__name__)

# FCM error codes meaning the token itself is dead
INVALID_TOKEN_STATUSES = {"UNREGISTERED", "INVALID_ARGUMENT", "NOT_FOUND"}


class FcmAdapter(NotificationTransport):
    """FCM HTTP v1 implementation of NotificationTransport."""

    def __init__(
        self,
        project_id: str | None = None,
        access_token: str | None = None,
        endpoint_template: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._project_id = project_id or settings.fcm_project_id
        self._access_token = access_token or settings.fcm_access_token
        self._endpoint_template = endpoint_template or settings.fcm_endpoint
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._endpoint_template.format(project_id=self._project_id)

    async def send(self, endpoint: str, payload: NotificationPayload) -> DeliveryResult:
        """Send one message to one device token.

        A rejected token is reported as ``failed=1``; transport errors and
        unexpected HTTP statuses raise.
        """
        if not self._project_id or not self._access_token:
            logger.warning("FCM credentials are not set. Skipping notification.")
            return DeliveryResult()

        body = {
            "message": {
                "token": endpoint,
                "notification": {"title": payload.title, "body": payload.body},
                "data": payload.data,
            }
        }
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                self.url,
                json=body,
                headers={"Authorization": f"Bearer {self._access_token}"},
                timeout=self._timeout,
            )

        if response.status_code == 200:
            logger.debug("FCM accepted message %s", response.json().get("name"))
            return DeliveryResult(ok=1)

        status = _error_status(response)
        if status in INVALID_TOKEN_STATUSES:
            logger.info("FCM rejected token %s…: %s", endpoint[:12], status)
            return DeliveryResult(failed=1)

        response.raise_for_status()
        return DeliveryResult(failed=1)


def _error_status(response: httpx.Response) -> str | None:
    try:
        return response.json().get("error", {}).get("status")
    except ValueError:
        return None
