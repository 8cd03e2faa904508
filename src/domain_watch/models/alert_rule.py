# -*- coding: utf-8 -*-
"""AlertRule: a user's subscription to a class of domain events.

A rule targets either one exact domain or a wildcard domain pattern (never
both). Conditions are typed per rule kind and validated when the rule is
created, so a bad shape fails loudly instead of silently matching everything.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional, Union
from uuid import uuid4

from domain_watch.models.domain_event import Urgency
from domain_watch.utils.validation import is_hex_address, normalize_domain


class AlertKind(str, Enum):
    """What class of events an alert rule listens to."""

    EXPIRY = "expiry"
    SALE = "sale"
    TRANSFER = "transfer"
    PRICE = "price"
    AUCTION = "auction"


class Platform(str, Enum):
    """Where an alert is delivered."""

    TELEGRAM = "telegram"
    TWITTER = "twitter"
    BOTH = "both"
    WEB = "web"


class SaleType(str, Enum):
    """Marketplace event subtypes a sale rule can allow."""

    LISTING = "listing"
    SALE = "sale"
    PRICE_CHANGE = "price_change"


class TransferDirection(str, Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class PriceDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class ExpiryConditions:
    days_threshold: Optional[int] = None
    """Match only when days until expiry <= this value."""
    min_urgency: Optional[Urgency] = None


@dataclass(frozen=True, slots=True)
class SaleConditions:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sale_types: Optional[tuple[SaleType, ...]] = None
    """Allowlist; None means every sale type."""
    domain_patterns: Optional[tuple[str, ...]] = None
    """Extra wildcard filter on the event domain; None means any."""


@dataclass(frozen=True, slots=True)
class TransferConditions:
    direction: Optional[TransferDirection] = None
    only_owner_involved: bool = False
    wallet_address: Optional[str] = None
    """Owner wallet bound when the rule was created; required by direction/only_owner_involved."""


@dataclass(frozen=True, slots=True)
class PriceConditions:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    direction: Optional[PriceDirection] = None


@dataclass(frozen=True, slots=True)
class AuctionConditions:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


AlertConditions = Union[
    ExpiryConditions,
    SaleConditions,
    TransferConditions,
    PriceConditions,
    AuctionConditions,
]

_CONDITIONS_BY_KIND: dict[AlertKind, type] = {
    AlertKind.EXPIRY: ExpiryConditions,
    AlertKind.SALE: SaleConditions,
    AlertKind.TRANSFER: TransferConditions,
    AlertKind.PRICE: PriceConditions,
    AlertKind.AUCTION: AuctionConditions,
}

_SALE_TYPE_VALUES = frozenset(s.value for s in SaleType)

_ALLOWED_KEYS: dict[AlertKind, frozenset[str]] = {
    AlertKind.EXPIRY: frozenset({"daysThreshold", "minUrgency"}),
    AlertKind.SALE: frozenset({"minPrice", "maxPrice", "saleTypes", "domainPatterns"}),
    AlertKind.TRANSFER: frozenset({"direction", "onlyOwnerInvolved", "walletAddress"}),
    AlertKind.PRICE: frozenset({"minPrice", "maxPrice", "direction"}),
    AlertKind.AUCTION: frozenset({"minPrice", "maxPrice"}),
}


def parse_decimal(value: Any, field: str) -> Optional[Decimal]:
    """Parse an optional non-negative amount; raise ValueError on bad input."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"{field} must be a number") from e
    if not d.is_finite() or d < 0:
        raise ValueError(f"{field} must be a non-negative number")
    return d


def parse_int(value: Any, field: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{field} must be a non-negative integer")
    return value


def parse_enum[E: Enum](enum_cls: type[E], value: Any, field: str) -> Optional[E]:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{field} must be one of: {allowed}") from e


def parse_str_list(value: Any, field: str) -> Optional[tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"{field} must be a list of strings")
    items = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"{field} must contain non-empty strings")
        items.append(item.strip())
    return tuple(items)


def check_price_bounds(min_price: Optional[Decimal], max_price: Optional[Decimal]) -> None:
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValueError("minPrice must not exceed maxPrice")


def parse_alert_conditions(kind: AlertKind, raw: Optional[Mapping[str, Any]]) -> AlertConditions:
    """Build typed conditions for ``kind`` from a raw (camelCase) mapping.

    Raises:
        ValueError: unknown keys or values of the wrong shape.
    """
    raw = dict(raw or {})
    unknown = set(raw) - _ALLOWED_KEYS[kind]
    if unknown:
        raise ValueError(f"unknown {kind.value} condition(s): {', '.join(sorted(unknown))}")

    if kind == AlertKind.EXPIRY:
        return ExpiryConditions(
            days_threshold=parse_int(raw.get("daysThreshold"), "daysThreshold"),
            min_urgency=parse_enum(Urgency, raw.get("minUrgency"), "minUrgency"),
        )
    if kind == AlertKind.SALE:
        min_price = parse_decimal(raw.get("minPrice"), "minPrice")
        max_price = parse_decimal(raw.get("maxPrice"), "maxPrice")
        check_price_bounds(min_price, max_price)
        names = parse_str_list(raw.get("saleTypes"), "saleTypes")
        sale_types: Optional[tuple[SaleType, ...]] = None
        if names is not None:
            sale_types = tuple(SaleType(n) for n in names if n in _SALE_TYPE_VALUES)
            if len(sale_types) != len(names):
                raise ValueError(
                    f"saleTypes must be drawn from: {', '.join(sorted(_SALE_TYPE_VALUES))}"
                )
        return SaleConditions(
            min_price=min_price,
            max_price=max_price,
            sale_types=sale_types,
            domain_patterns=parse_str_list(raw.get("domainPatterns"), "domainPatterns"),
        )
    if kind == AlertKind.TRANSFER:
        only_owner = raw.get("onlyOwnerInvolved", False)
        if not isinstance(only_owner, bool):
            raise ValueError("onlyOwnerInvolved must be a boolean")
        wallet = raw.get("walletAddress")
        if wallet is not None and not is_hex_address(wallet):
            raise ValueError("walletAddress must be a 0x address")
        return TransferConditions(
            direction=parse_enum(TransferDirection, raw.get("direction"), "direction"),
            only_owner_involved=only_owner,
            wallet_address=wallet.strip() if wallet else None,
        )
    if kind == AlertKind.PRICE:
        min_price = parse_decimal(raw.get("minPrice"), "minPrice")
        max_price = parse_decimal(raw.get("maxPrice"), "maxPrice")
        check_price_bounds(min_price, max_price)
        return PriceConditions(
            min_price=min_price,
            max_price=max_price,
            direction=parse_enum(PriceDirection, raw.get("direction"), "direction"),
        )
    min_price = parse_decimal(raw.get("minPrice"), "minPrice")
    max_price = parse_decimal(raw.get("maxPrice"), "maxPrice")
    check_price_bounds(min_price, max_price)
    return AuctionConditions(min_price=min_price, max_price=max_price)


@dataclass(frozen=True, slots=True)
class AlertRule:
    """A user's alert subscription.

    Identity: id. Exactly one of ``domain`` / ``domain_pattern`` is set.
    Mutated only through ``with_triggered`` (after a successful send).
    """

    id: str
    owner_id: str
    kind: AlertKind
    conditions: AlertConditions
    platform: Platform
    domain: Optional[str] = None
    """Exact domain (lower-case)."""
    domain_pattern: Optional[str] = None
    """Wildcard pattern; ``*`` matches any run of characters."""
    active: bool = True
    trigger_count: int = 0
    last_triggered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_pattern_rule(self) -> bool:
        return self.domain_pattern is not None

    def with_triggered(self, at: Optional[datetime] = None) -> AlertRule:
        """Return a copy with trigger_count + 1 and last_triggered_at set."""
        return replace(
            self,
            trigger_count=self.trigger_count + 1,
            last_triggered_at=at or datetime.now(UTC),
        )

    def with_active(self, active: bool) -> AlertRule:
        return replace(self, active=active)

    @classmethod
    def create(
        cls,
        owner_id: str,
        kind: AlertKind | str,
        *,
        domain: Optional[str] = None,
        domain_pattern: Optional[str] = None,
        conditions: AlertConditions | Mapping[str, Any] | None = None,
        platform: Platform | str = Platform.TELEGRAM,
        rule_id: Optional[str] = None,
        active: bool = True,
    ) -> AlertRule:
        """Create and validate a new alert rule.

        Raises:
            ValueError: owner missing, domain/pattern not exactly one, or bad conditions.
        """
        owner_id = (owner_id or "").strip()
        if not owner_id:
            raise ValueError("owner_id must be non-empty")
        kind = AlertKind(kind)
        platform = Platform(platform)

        if (domain is None) == (domain_pattern is None):
            raise ValueError("exactly one of domain or domain_pattern must be set")
        if domain is not None:
            domain = normalize_domain(domain)
        if domain_pattern is not None:
            domain_pattern = domain_pattern.strip()
            if not domain_pattern:
                raise ValueError("domain_pattern must be non-empty")

        expected = _CONDITIONS_BY_KIND[kind]
        if conditions is None or isinstance(conditions, Mapping):
            typed = parse_alert_conditions(kind, conditions)
        elif isinstance(conditions, expected):
            typed = conditions
        else:
            raise ValueError(
                f"{type(conditions).__name__} does not fit a {kind.value} rule"
            )

        if isinstance(typed, TransferConditions):
            needs_wallet = typed.direction is not None or typed.only_owner_involved
            if needs_wallet and not is_hex_address(typed.wallet_address):
                raise ValueError(
                    "transfer rules with direction or onlyOwnerInvolved need a bound walletAddress"
                )

        return cls(
            id=rule_id or str(uuid4()),
            owner_id=owner_id,
            kind=kind,
            conditions=typed,
            platform=platform,
            domain=domain,
            domain_pattern=domain_pattern,
            active=active,
            created_at=datetime.now(UTC),
        )
