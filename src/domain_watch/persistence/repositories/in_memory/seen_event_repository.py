# -*- coding: utf-8 -*-
"""In-memory seen-event window backed by a FIFO cache."""

from __future__ import annotations

from cachetools import FIFOCache

from domain_watch.persistence.repositories.interfaces.seen_event_repository import (
    ISeenEventRepository,
)

DEFAULT_WINDOW_SIZE = 1000


class InMemorySeenEventRepository(ISeenEventRepository):
    """Insertion-ordered window of dedup keys.

    Uses cachetools.FIFOCache so the oldest key is evicted once ``maxsize`` is
    exceeded; lookups do not refresh a key's position.
    """

    def __init__(self, maxsize: int = DEFAULT_WINDOW_SIZE) -> None:
        self._cache: FIFOCache[str, bool] = FIFOCache(maxsize=max(1, maxsize))

    async def contains(self, key: str) -> bool:
        return key in self._cache

    async def add(self, key: str) -> None:
        if key not in self._cache:
            self._cache[key] = True

    async def size(self) -> int:
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        return int(self._cache.maxsize)
