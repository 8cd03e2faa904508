# -*- coding: utf-8 -*-
"""Unit tests for AlertRule creation and condition parsing."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from domain_watch.models.alert_rule import (
    AlertKind,
    AlertRule,
    ExpiryConditions,
    Platform,
    SaleConditions,
    SaleType,
    TransferConditions,
    TransferDirection,
    parse_alert_conditions,
)
from domain_watch.models.domain_event import Urgency


def test_create_normalizes_domain_and_parses_expiry_conditions() -> None:
    rule = AlertRule.create(
        "owner-1",
        "expiry",
        domain="  Web3.APE ",
        conditions={"daysThreshold": 7, "minUrgency": "high"},
    )

    assert rule.domain == "web3.ape"
    assert rule.kind == AlertKind.EXPIRY
    assert rule.platform == Platform.TELEGRAM
    assert rule.conditions == ExpiryConditions(days_threshold=7, min_urgency=Urgency.HIGH)
    assert rule.trigger_count == 0
    assert rule.active is True


def test_create_requires_exactly_one_of_domain_or_pattern() -> None:
    with pytest.raises(ValueError, match="exactly one"):
        AlertRule.create("owner-1", AlertKind.SALE)
    with pytest.raises(ValueError, match="exactly one"):
        AlertRule.create("owner-1", AlertKind.SALE, domain="a.ape", domain_pattern="*.ape")


def test_create_rejects_empty_owner() -> None:
    with pytest.raises(ValueError, match="owner_id"):
        AlertRule.create("  ", AlertKind.SALE, domain="a.ape")


def test_parse_sale_conditions_with_types_and_patterns() -> None:
    conditions = parse_alert_conditions(
        AlertKind.SALE,
        {"minPrice": "10", "maxPrice": 50, "saleTypes": ["listing", "sale"], "domainPatterns": ["*.ape"]},
    )

    assert conditions == SaleConditions(
        min_price=Decimal("10"),
        max_price=Decimal("50"),
        sale_types=(SaleType.LISTING, SaleType.SALE),
        domain_patterns=("*.ape",),
    )


@pytest.mark.parametrize(
    "raw",
    [
        {"unknownKey": 1},
        {"minPrice": "abc"},
        {"minPrice": -1},
        {"minPrice": 60, "maxPrice": 50},
        {"saleTypes": ["auction"]},
        {"saleTypes": "listing"},
    ],
)
def test_parse_sale_conditions_rejects_bad_shapes(raw: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        parse_alert_conditions(AlertKind.SALE, raw)


def test_transfer_direction_requires_bound_wallet(owner_wallet: str) -> None:
    with pytest.raises(ValueError, match="walletAddress"):
        AlertRule.create(
            "owner-1",
            AlertKind.TRANSFER,
            domain="a.ape",
            conditions={"direction": "incoming"},
        )

    rule = AlertRule.create(
        "owner-1",
        AlertKind.TRANSFER,
        domain="a.ape",
        conditions={"direction": "incoming", "walletAddress": owner_wallet},
    )
    assert rule.conditions == TransferConditions(
        direction=TransferDirection.INCOMING,
        wallet_address=owner_wallet,
    )


def test_create_rejects_conditions_of_another_kind() -> None:
    with pytest.raises(ValueError, match="does not fit"):
        AlertRule.create("owner-1", AlertKind.SALE, domain="a.ape", conditions=ExpiryConditions())


def test_with_triggered_increments_count_and_sets_time() -> None:
    rule = AlertRule.create("owner-1", AlertKind.SALE, domain_pattern="*.ape")
    at = datetime(2026, 2, 13, tzinfo=UTC)

    updated = rule.with_triggered(at).with_triggered(at)

    assert updated.trigger_count == 2
    assert updated.last_triggered_at == at
    assert rule.trigger_count == 0
    assert updated.is_pattern_rule
