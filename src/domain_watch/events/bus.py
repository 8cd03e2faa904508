"""Process-wide bubus bus carrying alert and auto-action outcome events."""

from __future__ import annotations

from functools import lru_cache

from bubus import EventBus  # type: ignore[import-untyped]

# Outcome events are consumed as soon as they are dispatched; a short history is enough for debugging.
HISTORY_SIZE = 100


@lru_cache
def get_event_bus() -> EventBus:
    """Shared bus, created on first use. ``get_event_bus.cache_clear()`` starts a fresh one."""
    return EventBus(name="DomainWatch", max_history_size=HISTORY_SIZE, wal_path=None)
