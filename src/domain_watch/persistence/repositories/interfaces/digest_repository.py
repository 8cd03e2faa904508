"""Abstract interface for pending digest entries (free-tier alerts)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from domain_watch.models.digest_entry import DigestEntry


class IDigestRepository(ABC):
    """Buffer of alerts waiting for the owner's daily summary."""

    @abstractmethod
    async def add(self, entry: DigestEntry) -> None:
        ...

    @abstractmethod
    async def pop_all(self) -> dict[str, list[DigestEntry]]:
        """Remove and return every pending entry, grouped by owner id (oldest first)."""
        ...

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[DigestEntry]:
        ...

    async def add_batch(self, entries: list[DigestEntry]) -> None:
        """Record multiple entries. Default impl calls add() for each."""
        for entry in entries:
            await self.add(entry)
