"""Queue envelope: the event plus when it was enqueued."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class QueueMessage[T]:
    """Wraps a queued item so the consumer can report how long it waited."""

    payload: T
    enqueued_at: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, payload: T) -> QueueMessage[T]:
        return cls(payload)

    def age_seconds(self) -> float:
        return time.monotonic() - self.enqueued_at
