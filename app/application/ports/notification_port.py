"""Port interface for push-notification delivery."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryResult:
    """Per-send delivery report: how many messages were accepted / rejected."""

    ok: int = 0
    failed: int = 0

    @property
    def delivered(self) -> bool:
        return self.failed == 0


class NotificationTransport(ABC):
    @abstractmethod
    async def send(self, endpoint: str, payload: NotificationPayload) -> DeliveryResult:
        """Deliver one payload to one device endpoint.

        May raise on transport errors; callers treat that as a failed delivery.
        """
        ...
