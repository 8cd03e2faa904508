"""AlertDeliveryRecord: append-only log of what happened to each matched alert."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain_watch.models.alert_rule import Platform
from domain_watch.models.domain_event import EventKind


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    DIGESTED = "digested"
    """Folded into the owner's daily digest instead of pushed in real time."""


@dataclass(frozen=True, slots=True)
class AlertDeliveryRecord:
    rule_id: str
    owner_id: str
    event_kind: EventKind
    domain: str
    platform: Platform
    status: DeliveryStatus
    created_at: datetime
