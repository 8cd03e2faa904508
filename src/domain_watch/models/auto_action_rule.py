# -*- coding: utf-8 -*-
"""AutoActionRule: a premium owner's standing order to renew, buy or bid.

Scope filters (target_domains, domain_patterns) are optional; an empty scope
means the rule applies to any domain its kind sees.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union
from uuid import uuid4

from domain_watch.models.alert_rule import (
    check_price_bounds,
    parse_decimal,
    parse_enum,
    parse_int,
    parse_str_list,
)
from domain_watch.models.domain_event import Urgency

DEFAULT_RENEWAL_DAYS = 365


class ActionKind(str, Enum):
    RENEW = "renew"
    BUY = "buy"
    BID = "bid"


@dataclass(frozen=True, slots=True)
class RenewConditions:
    days_before_expiry: Optional[int] = None
    min_urgency: Optional[Urgency] = None
    renewal_duration_days: int = DEFAULT_RENEWAL_DAYS
    target_domains: Optional[tuple[str, ...]] = None
    domain_patterns: Optional[tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class BuyConditions:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    target_domains: Optional[tuple[str, ...]] = None
    domain_patterns: Optional[tuple[str, ...]] = None
    exclude_sellers: Optional[tuple[str, ...]] = None
    """Lower-cased seller addresses never bought from."""


@dataclass(frozen=True, slots=True)
class BidConditions:
    stop_price: Decimal
    """Never bid above this."""
    bid_increment: Decimal = Decimal("1")
    target_domains: Optional[tuple[str, ...]] = None
    domain_patterns: Optional[tuple[str, ...]] = None


ActionConditions = Union[RenewConditions, BuyConditions, BidConditions]

_ALLOWED_KEYS: dict[ActionKind, frozenset[str]] = {
    ActionKind.RENEW: frozenset(
        {"daysBeforeExpiry", "minUrgency", "renewalDuration", "targetDomains", "domainPatterns"}
    ),
    ActionKind.BUY: frozenset(
        {"minPrice", "maxPrice", "targetDomains", "domainPatterns", "excludeSellers"}
    ),
    ActionKind.BID: frozenset({"stopPrice", "bidIncrement", "targetDomains", "domainPatterns"}),
}


def _lower_all(values: Optional[tuple[str, ...]]) -> Optional[tuple[str, ...]]:
    return tuple(v.lower() for v in values) if values is not None else None


def parse_action_conditions(kind: ActionKind, raw: Optional[Mapping[str, Any]]) -> ActionConditions:
    """Build typed conditions for ``kind`` from a raw (camelCase) mapping.

    Raises:
        ValueError: unknown keys or values of the wrong shape.
    """
    raw = dict(raw or {})
    unknown = set(raw) - _ALLOWED_KEYS[kind]
    if unknown:
        raise ValueError(f"unknown {kind.value} condition(s): {', '.join(sorted(unknown))}")

    target_domains = _lower_all(parse_str_list(raw.get("targetDomains"), "targetDomains"))
    domain_patterns = parse_str_list(raw.get("domainPatterns"), "domainPatterns")

    if kind == ActionKind.RENEW:
        duration = parse_int(raw.get("renewalDuration"), "renewalDuration")
        if duration == 0:
            raise ValueError("renewalDuration must be at least 1 day")
        return RenewConditions(
            days_before_expiry=parse_int(raw.get("daysBeforeExpiry"), "daysBeforeExpiry"),
            min_urgency=parse_enum(Urgency, raw.get("minUrgency"), "minUrgency"),
            renewal_duration_days=duration or DEFAULT_RENEWAL_DAYS,
            target_domains=target_domains,
            domain_patterns=domain_patterns,
        )
    if kind == ActionKind.BUY:
        min_price = parse_decimal(raw.get("minPrice"), "minPrice")
        max_price = parse_decimal(raw.get("maxPrice"), "maxPrice")
        check_price_bounds(min_price, max_price)
        return BuyConditions(
            min_price=min_price,
            max_price=max_price,
            target_domains=target_domains,
            domain_patterns=domain_patterns,
            exclude_sellers=_lower_all(parse_str_list(raw.get("excludeSellers"), "excludeSellers")),
        )
    stop_price = parse_decimal(raw.get("stopPrice"), "stopPrice")
    if stop_price is None:
        raise ValueError("bid rules need a stopPrice")
    increment = parse_decimal(raw.get("bidIncrement"), "bidIncrement")
    if increment is not None and increment <= 0:
        raise ValueError("bidIncrement must be positive")
    return BidConditions(
        stop_price=stop_price,
        bid_increment=increment if increment is not None else Decimal("1"),
        target_domains=target_domains,
        domain_patterns=domain_patterns,
    )


@dataclass(frozen=True, slots=True)
class AutoActionRule:
    """Standing order for an autonomous action.

    ``max_amount`` is the per-execution ceiling; for renewals it is also the
    amount charged.
    """

    id: str
    owner_id: str
    kind: ActionKind
    conditions: ActionConditions
    max_amount: Decimal
    active: bool = True
    execution_count: int = 0
    last_executed_at: Optional[datetime] = None

    def with_executed(self, at: Optional[datetime] = None) -> AutoActionRule:
        """Return a copy with execution_count + 1 and last_executed_at set."""
        return replace(
            self,
            execution_count=self.execution_count + 1,
            last_executed_at=at or datetime.now(UTC),
        )

    @classmethod
    def create(
        cls,
        owner_id: str,
        kind: ActionKind | str,
        *,
        max_amount: Decimal | int | str,
        conditions: ActionConditions | Mapping[str, Any] | None = None,
        rule_id: Optional[str] = None,
        active: bool = True,
    ) -> AutoActionRule:
        """Create and validate a new auto-action rule."""
        owner_id = (owner_id or "").strip()
        if not owner_id:
            raise ValueError("owner_id must be non-empty")
        kind = ActionKind(kind)
        amount = parse_decimal(max_amount, "max_amount")
        if amount is None or amount <= 0:
            raise ValueError("max_amount must be positive")
        if conditions is None or isinstance(conditions, Mapping):
            typed = parse_action_conditions(kind, conditions)
        else:
            typed = conditions
        return cls(
            id=rule_id or str(uuid4()),
            owner_id=owner_id,
            kind=kind,
            conditions=typed,
            max_amount=amount,
            active=active,
        )
