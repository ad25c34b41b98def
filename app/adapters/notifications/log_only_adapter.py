"""Log-only transport used when no push provider is configured."""

from __future__ import annotations

import logging

from app.application.ports.notification_port import (
    DeliveryResult,
    NotificationPayload,
    NotificationTransport,
)

logger = logging.getLogger(__name__)


class LogOnlyAdapter(NotificationTransport):
    async def send(self, endpoint: str, payload: NotificationPayload) -> DeliveryResult:
        logger.info(
            "[no push provider] %s → %s…: %s %s",
            payload.title, endpoint[:12], payload.body, payload.data,
        )
        return DeliveryResult(ok=1)
