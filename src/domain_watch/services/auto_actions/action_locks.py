# -*- coding: utf-8 -*-
"""InFlightLockTable: at most one execution per (rule, domain) at a time."""

from __future__ import annotations

from datetime import datetime, timedelta


class InFlightLockTable:
    """Lock key -> acquisition time.

    ``try_acquire`` is a single synchronous test-and-insert, so two coroutines
    can never both acquire the same key.
    """

    def __init__(self) -> None:
        self._locks: dict[str, datetime] = {}

    def try_acquire(self, key: str, now: datetime) -> bool:
        if key in self._locks:
            return False
        self._locks[key] = now
        return True

    def release(self, key: str, acquired_at: datetime | None = None) -> None:
        """Drop the lock. With ``acquired_at``, only if it is still the same acquisition."""
        if acquired_at is not None and self._locks.get(key) != acquired_at:
            return
        self._locks.pop(key, None)

    def is_held(self, key: str) -> bool:
        return key in self._locks

    def acquired_at(self, key: str) -> datetime | None:
        return self._locks.get(key)

    def clear_stale(self, now: datetime, max_age: timedelta) -> list[tuple[str, datetime]]:
        """Remove locks older than ``max_age``. Returns (key, acquired_at) per cleared lock."""
        stale = [(k, t) for k, t in self._locks.items() if now - t > max_age]
        for k, _ in stale:
            del self._locks[k]
        return stale

    def __len__(self) -> int:
        return len(self._locks)
