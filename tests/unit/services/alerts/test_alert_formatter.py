# -*- coding: utf-8 -*-
"""Unit tests for AlertFormatter message templates and suggested actions."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from domain_watch.models.domain_event import DomainEvent, EventKind, Urgency
from domain_watch.services.alerts import AlertFormatter
from domain_watch.services.alerts.alert_formatter import URGENCY_EMOJI, format_price


@pytest.fixture
def formatter() -> AlertFormatter:
    return AlertFormatter()


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (0, f'{URGENCY_EMOJI[Urgency.CRITICAL]} EXPIRED: Domain "web3.ape" has expired!'),
        (1, f'{URGENCY_EMOJI[Urgency.CRITICAL]} URGENT: Domain "web3.ape" expires in 1 day!'),
        (3, f'{URGENCY_EMOJI[Urgency.HIGH]} Domain "web3.ape" expires in 3 days'),
        (10, f'{URGENCY_EMOJI[Urgency.MEDIUM]} Domain "web3.ape" expires in 10 days'),
    ],
)
def test_expiry_messages(
    formatter: AlertFormatter, event_factory: Callable[..., DomainEvent], days: int, expected: str
) -> None:
    assert formatter.message(event_factory(EventKind.EXPIRING, domain="web3.ape", days=days)) == expected


def test_listing_message_and_buttons(formatter: AlertFormatter, event_factory: Callable[..., DomainEvent]) -> None:
    formatted = formatter.format(event_factory(EventKind.LISTED, domain="nft.ape", price=Decimal("45.50")))

    assert formatted.message.endswith('NEW LISTING: "nft.ape" listed for 45.5 USDC')
    assert formatted.suggested_actions[0] == {"text": "Buy Now", "action": "buy", "domain": "nft.ape", "price": "45.5"}


def test_transfer_message_uses_short_addresses(
    formatter: AlertFormatter,
    event_factory: Callable[..., DomainEvent],
    owner_wallet: str,
    seller_wallet: str,
) -> None:
    event = event_factory(EventKind.TRANSFERRED, tx="0xfeed")

    message = formatter.message(event)

    assert message.endswith(f'TRANSFER: Domain "web3.ape" transferred from {seller_wallet[:6]}... to {owner_wallet[:6]}...')
    assert formatter.suggested_actions(event)[0]["txHash"] == "0xfeed"


def test_sold_and_auction_messages(formatter: AlertFormatter, event_factory: Callable[..., DomainEvent]) -> None:
    assert formatter.message(event_factory(EventKind.SOLD, price=Decimal("100"))).endswith('SOLD: "web3.ape" sold for 100 USDC')
    assert formatter.message(event_factory(EventKind.AUCTION_UPDATED, auction_end=None)).endswith(
        'AUCTION: "web3.ape" current bid 10 USDC'
    )


def test_format_price_has_no_exponent() -> None:
    assert format_price(Decimal("1E+2")) == "100"
    assert format_price(Decimal("0.0100")) == "0.01"
    assert format_price(None) == "?"
