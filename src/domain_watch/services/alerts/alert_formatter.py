# -*- coding: utf-8 -*-
"""AlertFormatter: human-readable alert text plus suggested actions per event kind.

No I/O. Prices are rendered as plain decimals followed by USDC.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from domain_watch.models.domain_event import DomainEvent, EventKind, Urgency
from domain_watch.utils.validation import short_address

URGENCY_EMOJI: dict[Urgency, str] = {
    Urgency.CRITICAL: "🚨",
    Urgency.HIGH: "⚠️",
    Urgency.MEDIUM: "📅",
    Urgency.LOW: "📋",
}


@dataclass(frozen=True)
class FormattedAlert:
    """Message text and the buttons offered with it."""

    message: str
    suggested_actions: list[dict[str, str]] = field(default_factory=list)


def format_price(value: Optional[Decimal]) -> str:
    """Render a Decimal without exponent or trailing zeros (45, 12.5)."""
    if value is None:
        return "?"
    return format(value.normalize(), "f")


class AlertFormatter:
    """Formats DomainEvents into alert text and suggested actions."""

    def format(self, event: DomainEvent) -> FormattedAlert:
        return FormattedAlert(
            message=self.message(event),
            suggested_actions=self.suggested_actions(event),
        )

    def message(self, event: DomainEvent) -> str:
        d = event.domain
        if event.kind == EventKind.EXPIRING:
            return self._expiry_message(event)
        if event.kind == EventKind.LISTED:
            return f'🏷️ NEW LISTING: "{d}" listed for {format_price(event.price)} USDC'
        if event.kind == EventKind.SOLD:
            return f'💰 SOLD: "{d}" sold for {format_price(event.price)} USDC'
        if event.kind == EventKind.PRICE_CHANGED:
            return f'📈 PRICE CHANGE: "{d}" repriced to {format_price(event.price)} USDC'
        if event.kind == EventKind.TRANSFERRED:
            return (
                f'🔄 TRANSFER: Domain "{d}" transferred from '
                f"{short_address(event.from_address)} to {short_address(event.to_address)}"
            )
        if event.kind == EventKind.AUCTION_UPDATED:
            return (
                f'🔨 AUCTION: "{d}" current bid {format_price(event.current_bid)} USDC'
                + (f" (ends {event.auction_end:%Y-%m-%d %H:%M} UTC)" if event.auction_end else "")
            )
        return f"Alert for domain {d}"

    def _expiry_message(self, event: DomainEvent) -> str:
        d = event.domain
        days = event.days_until_expiry if event.days_until_expiry is not None else 0
        if days <= 0:
            return f'{URGENCY_EMOJI[Urgency.CRITICAL]} EXPIRED: Domain "{d}" has expired!'
        if days == 1:
            return f'{URGENCY_EMOJI[Urgency.CRITICAL]} URGENT: Domain "{d}" expires in 1 day!'
        emoji = URGENCY_EMOJI[event.urgency or Urgency.MEDIUM]
        return f'{emoji} Domain "{d}" expires in {days} days'

    def suggested_actions(self, event: DomainEvent) -> list[dict[str, str]]:
        d = event.domain
        if event.kind == EventKind.EXPIRING:
            return [
                {"text": "Renew Now", "action": "renew", "domain": d},
                {"text": "Set Reminder", "action": "remind", "domain": d},
                {"text": "View Details", "action": "details", "domain": d},
            ]
        if event.kind in (EventKind.LISTED, EventKind.PRICE_CHANGED):
            return [
                {"text": "Buy Now", "action": "buy", "domain": d, "price": format_price(event.price)},
                {"text": "View Listing", "action": "view", "domain": d},
                {"text": "Set Price Alert", "action": "priceAlert", "domain": d},
            ]
        if event.kind == EventKind.TRANSFERRED:
            return [
                {"text": "View Transaction", "action": "viewTx", "txHash": event.chain_ref.transaction_hash},
                {"text": "View Domain", "action": "view", "domain": d},
            ]
        if event.kind == EventKind.AUCTION_UPDATED:
            return [
                {"text": "Place Bid", "action": "bid", "domain": d},
                {"text": "View Domain", "action": "view", "domain": d},
            ]
        return []
