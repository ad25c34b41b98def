"""Port interface for authority lookups and endpoint maintenance."""

from abc import ABC, abstractmethod

from app.domain.entities.authority import Authority


class AuthorityRepository(ABC):
    """Read side raises LookupFailureError when the store is unusable."""

    @abstractmethod
    async def save(self, authority: Authority) -> Authority:
        ...

    @abstractmethod
    async def get_by_id(self, authority_id: str) -> Authority | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Authority]:
        ...

    @abstractmethod
    async def find_by_pincode(self, code: str) -> Authority | None:
        """Return the first authority (store order) serving this postal code."""
        ...

    @abstractmethod
    async def list_with_polygon(self) -> list[Authority]:
        ...

    @abstractmethod
    async def list_with_center(self) -> list[Authority]:
        ...

    @abstractmethod
    async def find_by_jurisdiction(self, code: str, level_hint: str) -> Authority | None:
        """Return the first authority with this jurisdiction code whose name
        contains ``level_hint`` (case-insensitive)."""
        ...

    @abstractmethod
    async def update_endpoints(self, authority_id: str, tokens: list[str]) -> None:
        """Overwrite the endpoint token list. Not transactional with reads."""
        ...
