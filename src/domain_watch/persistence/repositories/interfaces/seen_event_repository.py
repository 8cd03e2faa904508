"""Abstract interface for the seen-event window (best-effort dedup)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ISeenEventRepository(ABC):
    """Bounded set of recently processed dedup keys.

    Oldest keys are evicted past the capacity, so a very old duplicate may be
    processed again. Each dispatcher owns its own instance.
    """

    @abstractmethod
    async def contains(self, key: str) -> bool:
        """Return True if ``key`` is still in the window."""
        ...

    @abstractmethod
    async def add(self, key: str) -> None:
        """Record ``key``. Re-adding a present key is a no-op."""
        ...

    @abstractmethod
    async def size(self) -> int:
        ...
