# -*- coding: utf-8 -*-
"""Event normalizer: raw contract logs to DomainEvent.

Each supported contract event has a fixed positional layout. Prices arrive in
wei (18 decimals) and are scaled to Decimal USDC. Expiry events get
days-until-expiry and urgency computed against the injected clock.

The normalizer is pure: dedup is each dispatcher's job.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from domain_watch.exceptions.exceptions import MalformedEventError
from domain_watch.models.domain_event import ChainRef, DomainEvent, EventKind, Urgency
from domain_watch.models.raw_chain_event import RawChainEvent
from domain_watch.utils.dedupe import sweep_reference

WEI_PER_UNIT = Decimal(10) ** 18
SECONDS_PER_DAY = 86400

# Positional argument names per contract event.
EVENT_LAYOUTS: dict[str, tuple[str, ...]] = {
    "DomainExpiring": ("owner", "domain", "expiryTime"),
    "DomainExpired": ("owner", "domain", "expiredAt"),
    "DomainListed": ("seller", "domain", "price", "listedAt"),
    "DomainSold": ("seller", "buyer", "domain", "price", "soldAt"),
    "DomainPriceChanged": ("seller", "domain", "oldPrice", "newPrice"),
    "DomainTransferred": ("from", "to", "domain", "transferredAt"),
    "DomainAuctionUpdated": ("bidder", "domain", "currentBid", "auctionEnd"),
    "AutoActionExecuted": ("user", "action", "domain", "amount", "success"),
}


def wei_to_decimal(value: Any) -> Decimal:
    """Scale an integer wei amount (int or numeric string) to a Decimal unit amount."""
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    if isinstance(value, str):
        value = int(value.strip(), 0)
    if not isinstance(value, int):
        raise ValueError(f"expected integer wei amount, got {type(value).__name__}")
    if value < 0:
        raise ValueError("negative amount")
    return Decimal(value) / WEI_PER_UNIT


def to_unix_seconds(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a timestamp")
    if isinstance(value, str):
        return int(value.strip(), 0)
    if isinstance(value, (int, float)):
        return int(value)
    raise ValueError(f"expected unix timestamp, got {type(value).__name__}")


def days_until(expiry: datetime, now: datetime) -> int:
    """ceil((expiry - now) / 1 day); negative once expired."""
    return math.ceil((expiry - now).total_seconds() / SECONDS_PER_DAY)


class EventNormalizer:
    """Turns RawChainEvent into DomainEvent.

    Raises MalformedEventError for unknown event names, missing or non-numeric
    fields, and missing transaction hashes.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def normalize(self, raw: RawChainEvent) -> DomainEvent:
        layout = EVENT_LAYOUTS.get(raw.name)
        if layout is None:
            raise MalformedEventError(f"unknown event: {raw.name!r}", event_name=raw.name)
        if not raw.transaction_hash:
            raise MalformedEventError(
                "missing transaction hash", event_name=raw.name, field="transactionHash"
            )
        if len(raw.args) < len(layout):
            missing = layout[len(raw.args)]
            raise MalformedEventError(
                f"{raw.name}: expected {len(layout)} args, got {len(raw.args)}",
                event_name=raw.name,
                field=missing,
            )
        args = dict(zip(layout, raw.args))
        domain = args["domain"]
        if not isinstance(domain, str) or not domain.strip():
            raise MalformedEventError(
                f"{raw.name}: domain must be a non-empty string",
                event_name=raw.name,
                field="domain",
            )
        ref = ChainRef(block_number=raw.block_number, transaction_hash=raw.transaction_hash)
        now = self._clock()
        try:
            return self._build(raw.name, args, domain.strip().lower(), ref, now)
        except (ValueError, TypeError) as e:
            raise MalformedEventError(f"{raw.name}: {e}", event_name=raw.name) from e

    def synthesize_expiring(
        self,
        domain: str,
        expiry_time: datetime,
        owner: Optional[str] = None,
    ) -> DomainEvent:
        """Build the expiring event the expiry sweep feeds to the matcher.

        The chain reference is ``sweep:<domain>:<days>d`` so repeated sweeps at
        the same day count deduplicate.
        """
        now = self._clock()
        domain = domain.strip().lower()
        days = max(days_until(expiry_time, now), 0)
        return DomainEvent(
            kind=EventKind.EXPIRING,
            domain=domain,
            timestamp=now,
            chain_ref=ChainRef(block_number=0, transaction_hash=sweep_reference(domain, days)),
            owner=owner,
            expiry_time=expiry_time,
            days_until_expiry=days,
            urgency=Urgency.from_days(days),
        )

    def _build(
        self,
        name: str,
        args: dict[str, Any],
        domain: str,
        ref: ChainRef,
        now: datetime,
    ) -> DomainEvent:
        if name == "DomainExpiring":
            expiry = datetime.fromtimestamp(to_unix_seconds(args["expiryTime"]), UTC)
            days = days_until(expiry, now)
            return DomainEvent(
                kind=EventKind.EXPIRING,
                domain=domain,
                timestamp=now,
                chain_ref=ref,
                owner=_address(args["owner"], "owner"),
                expiry_time=expiry,
                days_until_expiry=days,
                urgency=Urgency.from_days(days),
            )
        if name == "DomainExpired":
            expired_at = datetime.fromtimestamp(to_unix_seconds(args["expiredAt"]), UTC)
            return DomainEvent(
                kind=EventKind.EXPIRING,
                domain=domain,
                timestamp=now,
                chain_ref=ref,
                owner=_address(args["owner"], "owner"),
                expiry_time=expired_at,
                days_until_expiry=0,
                urgency=Urgency.CRITICAL,
            )
        if name == "DomainListed":
            return DomainEvent(
                kind=EventKind.LISTED,
                domain=domain,
                timestamp=_at(args["listedAt"]),
                chain_ref=ref,
                seller=_address(args["seller"], "seller"),
                price=wei_to_decimal(args["price"]),
            )
        if name == "DomainSold":
            return DomainEvent(
                kind=EventKind.SOLD,
                domain=domain,
                timestamp=_at(args["soldAt"]),
                chain_ref=ref,
                seller=_address(args["seller"], "seller"),
                buyer=_address(args["buyer"], "buyer"),
                price=wei_to_decimal(args["price"]),
            )
        if name == "DomainPriceChanged":
            return DomainEvent(
                kind=EventKind.PRICE_CHANGED,
                domain=domain,
                timestamp=now,
                chain_ref=ref,
                seller=_address(args["seller"], "seller"),
                old_price=wei_to_decimal(args["oldPrice"]),
                price=wei_to_decimal(args["newPrice"]),
            )
        if name == "DomainTransferred":
            return DomainEvent(
                kind=EventKind.TRANSFERRED,
                domain=domain,
                timestamp=_at(args["transferredAt"]),
                chain_ref=ref,
                from_address=_address(args["from"], "from"),
                to_address=_address(args["to"], "to"),
            )
        if name == "DomainAuctionUpdated":
            return DomainEvent(
                kind=EventKind.AUCTION_UPDATED,
                domain=domain,
                timestamp=now,
                chain_ref=ref,
                bidder=_address(args["bidder"], "bidder"),
                current_bid=wei_to_decimal(args["currentBid"]),
                auction_end=_at(args["auctionEnd"]),
            )
        success = args["success"]
        if not isinstance(success, bool):
            raise ValueError("success must be a boolean")
        action = args["action"]
        if not isinstance(action, str) or not action:
            raise ValueError("action must be a non-empty string")
        return DomainEvent(
            kind=EventKind.AUTO_ACTION_RESULT,
            domain=domain,
            timestamp=now,
            chain_ref=ref,
            owner=_address(args["user"], "user"),
            action=action,
            amount=wei_to_decimal(args["amount"]),
            success=success,
        )


def _at(value: Any) -> datetime:
    return datetime.fromtimestamp(to_unix_seconds(value), UTC)


def _address(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field} must be a non-empty address")
    return value.strip()
