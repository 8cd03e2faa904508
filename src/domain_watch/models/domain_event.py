# -*- coding: utf-8 -*-
"""DomainEvent: normalized on-chain domain lifecycle event.

Produced by the event normalizer from a raw chain log (or synthesized by the
expiry sweep) and consumed independently by the alert dispatcher and the
auto-action engine. Prices and amounts are USDC Decimals (already scaled from wei).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain_watch.utils.dedupe import event_dedup_key


class EventKind(str, Enum):
    """Normalized event kinds."""

    EXPIRING = "expiring"
    LISTED = "listed"
    SOLD = "sold"
    PRICE_CHANGED = "price_changed"
    TRANSFERRED = "transferred"
    AUCTION_UPDATED = "auction_updated"
    AUTO_ACTION_RESULT = "auto_action_result"


class Urgency(str, Enum):
    """Ordinal urgency scale: low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]

    @classmethod
    def from_days(cls, days_until_expiry: int) -> Urgency:
        """Urgency for an expiry: <=1 day critical, <=3 high, otherwise medium."""
        if days_until_expiry <= 1:
            return cls.CRITICAL
        if days_until_expiry <= 3:
            return cls.HIGH
        return cls.MEDIUM


_URGENCY_RANK = {
    Urgency.LOW: 0,
    Urgency.MEDIUM: 1,
    Urgency.HIGH: 2,
    Urgency.CRITICAL: 3,
}


@dataclass(frozen=True, slots=True)
class ChainRef:
    """Where the event was observed on chain."""

    block_number: int
    transaction_hash: str
    """Real tx hash, or a synthetic ``sweep:<domain>:<days>d`` reference."""


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """One normalized domain event.

    Only the payload fields relevant to ``kind`` are set; the rest stay None.
    Immutable after construction.
    """

    kind: EventKind
    domain: str
    timestamp: datetime
    chain_ref: ChainRef

    # expiring
    owner: Optional[str] = None
    expiry_time: Optional[datetime] = None
    days_until_expiry: Optional[int] = None
    urgency: Optional[Urgency] = None

    # listed / sold / price_changed
    price: Optional[Decimal] = None
    old_price: Optional[Decimal] = None
    seller: Optional[str] = None
    buyer: Optional[str] = None

    # transferred
    from_address: Optional[str] = None
    to_address: Optional[str] = None

    # auction_updated
    bidder: Optional[str] = None
    current_bid: Optional[Decimal] = None
    auction_end: Optional[datetime] = None

    # auto_action_result
    action: Optional[str] = None
    amount: Optional[Decimal] = None
    success: Optional[bool] = None

    @property
    def dedup_key(self) -> str:
        """``<transaction hash>:<kind>``; unique per chain event and kind."""
        return event_dedup_key(self.chain_ref.transaction_hash, self.kind.value)

    @property
    def urgency_rank(self) -> int:
        """Ordinal of ``urgency``; events without urgency rank as low."""
        return (self.urgency or Urgency.LOW).rank

    @property
    def is_synthetic(self) -> bool:
        return self.chain_ref.transaction_hash.startswith("sweep:")
