"""NotifyAuthority — push fan-out to every endpoint of the assigned authority."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from app.application.ports.authority_repo import AuthorityRepository
from app.application.ports.notification_port import (
    DeliveryResult,
    NotificationPayload,
    NotificationTransport,
)
from app.domain.entities.authority import Authority
from app.domain.entities.issue import Issue

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "New Civic Issue Assigned"


@dataclass
class DispatchReport:
    """Outcome of one fan-out."""

    attempted: int
    invalid_endpoints: list[str] = field(default_factory=list)
    pruned: bool = False


def build_payload(authority: Authority, issue: Issue) -> NotificationPayload:
    address = issue.address or ""
    return NotificationPayload(
        title=NOTIFICATION_TITLE,
        body=f"New issue reported at {address}",
        data={
            "issueId": str(issue.id),
            "authorityId": authority.id,
            "latitude": str(issue.latitude),
            "longitude": str(issue.longitude),
            "address": address,
            "imageUrl": issue.image_url or "",
        },
    )


class NotificationDispatcher:
    """Sends to all endpoints concurrently and prunes the ones that failed.

    Every send is awaited before pruning. The endpoint overwrite is a plain
    read-modify-write on the store: two dispatches for the same authority
    can race, and a token registered between our re-read and the write may
    be lost. That weak consistency is accepted.
    """

    def __init__(
        self,
        transport: NotificationTransport,
        authority_repo: AuthorityRepository,
        timeout_seconds: float | None = None,
    ):
        self._transport = transport
        self._authorities = authority_repo
        self._timeout = timeout_seconds

    async def notify(self, authority: Authority, issue: Issue) -> DispatchReport:
        if not authority.has_endpoints():
            logger.info("No endpoints registered for authority %s", authority.id)
            return DispatchReport(attempted=0)

        tokens = list(authority.endpoint_tokens)
        payload = build_payload(authority, issue)
        results = await asyncio.gather(
            *(self._send(token, payload) for token in tokens),
            return_exceptions=True,
        )
        logger.info(
            "Sent notifications to %d device(s) for authority %s", len(tokens), authority.id
        )

        invalid: list[str] = []
        for token, result in zip(tokens, results):
            if isinstance(result, BaseException):
                logger.warning("Send to endpoint %s… failed: %r", token[:12], result)
                invalid.append(token)
            elif not result.delivered:
                logger.warning("Endpoint %s… reported %d delivery failure(s)", token[:12], result.failed)
                invalid.append(token)

        report = DispatchReport(attempted=len(tokens), invalid_endpoints=invalid)
        if invalid:
            report.pruned = await self._prune(authority.id, invalid)
        return report

    async def _send(self, token: str, payload: NotificationPayload) -> DeliveryResult:
        if self._timeout:
            return await asyncio.wait_for(self._transport.send(token, payload), timeout=self._timeout)
        return await self._transport.send(token, payload)

    async def _prune(self, authority_id: str, invalid: list[str]) -> bool:
        """Rewrite the endpoint list without exactly the invalid tokens."""
        try:
            current = await self._authorities.get_by_id(authority_id)
            if current is None:
                logger.error("Authority %s disappeared before endpoint pruning", authority_id)
                return False

            invalid_set = set(invalid)
            survivors = [t for t in current.endpoint_tokens if t not in invalid_set]
            await self._authorities.update_endpoints(authority_id, survivors)
            logger.warning(
                "Removed %d invalid endpoint(s) from authority %s",
                len(current.endpoint_tokens) - len(survivors), authority_id,
            )
            return True
        except Exception:
            logger.exception("Error pruning endpoints of authority %s", authority_id)
            return False
