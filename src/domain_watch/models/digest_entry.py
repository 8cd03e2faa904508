"""DigestEntry: a free-tier alert waiting for the daily summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain_watch.models.alert_rule import Platform
from domain_watch.models.domain_event import EventKind, Urgency


@dataclass(frozen=True, slots=True)
class DigestEntry:
    owner_id: str
    rule_id: str
    event_kind: EventKind
    domain: str
    message: str
    platform: Platform
    observed_at: datetime
    urgency: Optional[Urgency] = None
