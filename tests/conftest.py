# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence

import pytest

from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.models.domain_event import ChainRef, DomainEvent, EventKind, Urgency
from domain_watch.models.owner_profile import OwnerProfile, SubscriptionTier
from domain_watch.persistence.repositories.in_memory import (
    InMemoryDigestRepository,
    InMemoryRuleStore,
    InMemorySeenEventRepository,
)

OWNER_WALLET = "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"
SELLER_WALLET = "0x9f8e7d6c5b4a39281706f5e4d3c2b1a098765432"


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class SentMessage:
    owner_id: str
    platform: str
    message: str
    suggested_actions: list[dict[str, str]]
    event_type: str
    payload: Optional[dict[str, Any]]


@dataclass
class FakeNotifier:
    """INotifier that records hand-offs and returns ``result``."""

    result: bool = True
    sent: list[SentMessage] = field(default_factory=list)

    async def send(
        self,
        owner_id: str,
        platform: str,
        message: str,
        suggested_actions: Sequence[dict[str, str]] = (),
        *,
        event_type: str = "domain_alert",
        payload: dict[str, Any] | None = None,
    ) -> bool:
        self.sent.append(
            SentMessage(owner_id, platform, message, list(suggested_actions), event_type, payload)
        )
        return self.result


class RecordingEventBus:
    """Minimal bus: records dispatched events and keeps ``on`` handlers by event name."""

    def __init__(self) -> None:
        self.dispatched: list[Any] = []
        self.handlers: dict[str, list[Callable[..., Any]]] = {}

    def dispatch(self, event: Any) -> Any:
        self.dispatched.append(event)
        return event

    def on(self, event_cls: type, handler: Callable[..., Any]) -> None:
        self.handlers.setdefault(event_cls.__name__, []).append(handler)

    def of_type(self, event_cls: type) -> list[Any]:
        return [e for e in self.dispatched if isinstance(e, event_cls)]


@pytest.fixture
def owner_wallet() -> str:
    return OWNER_WALLET


@pytest.fixture
def seller_wallet() -> str:
    return SELLER_WALLET


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(now_utc: datetime) -> FakeClock:
    return FakeClock(now_utc)


@pytest.fixture
def D() -> Callable[[Any], Decimal]:
    """Decimal helper: D('1.23') -> Decimal('1.23')."""
    return lambda value: Decimal(str(value))


@pytest.fixture
def rule_store() -> InMemoryRuleStore:
    return InMemoryRuleStore()


@pytest.fixture
def seen_events() -> InMemorySeenEventRepository:
    return InMemorySeenEventRepository(maxsize=1000)


@pytest.fixture
def digest_repo() -> InMemoryDigestRepository:
    return InMemoryDigestRepository()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def profile_factory(owner_wallet: str) -> Callable[..., OwnerProfile]:
    """Build OwnerProfile with premium defaults and easy overrides."""

    def _build(owner_id: str = "owner-1", **overrides: Any) -> OwnerProfile:
        return OwnerProfile(
            owner_id=owner_id,
            tier=overrides.pop("tier", SubscriptionTier.PREMIUM),
            monthly_cap=overrides.pop("monthly_cap", Decimal("200")),
            wallet_address=overrides.pop("wallet_address", owner_wallet),
            is_active=overrides.pop("is_active", True),
            contacts=overrides.pop("contacts", {"telegram": "1001"}),
            credentials_ref=overrides.pop("credentials_ref", "cred-1"),
        )

    return _build


@pytest.fixture
def entitlements(profile_factory: Callable[..., OwnerProfile]) -> InMemoryEntitlementService:
    """Entitlements with one premium owner ("owner-1")."""
    return InMemoryEntitlementService([profile_factory()])


@pytest.fixture
def event_factory(now_utc: datetime, owner_wallet: str, seller_wallet: str) -> Callable[..., DomainEvent]:
    """Build DomainEvents per kind with sensible payload defaults."""

    def _build(kind: EventKind = EventKind.LISTED, domain: str = "web3.ape", **overrides: Any) -> DomainEvent:
        tx = overrides.pop("tx", "0xabc123")
        fields: dict[str, Any] = {}
        if kind == EventKind.EXPIRING:
            days = overrides.pop("days", 3)
            fields = {
                "owner": owner_wallet,
                "expiry_time": now_utc + timedelta(days=days),
                "days_until_expiry": days,
                "urgency": Urgency.from_days(days),
            }
        elif kind in (EventKind.LISTED, EventKind.SOLD, EventKind.PRICE_CHANGED):
            fields = {"seller": seller_wallet, "price": Decimal("45")}
        elif kind == EventKind.TRANSFERRED:
            fields = {"from_address": seller_wallet, "to_address": owner_wallet}
        elif kind == EventKind.AUCTION_UPDATED:
            fields = {
                "bidder": seller_wallet,
                "current_bid": Decimal("10"),
                "auction_end": now_utc + timedelta(days=1),
            }
        fields.update(overrides)
        return DomainEvent(
            kind=kind,
            domain=domain,
            timestamp=now_utc,
            chain_ref=ChainRef(block_number=100, transaction_hash=tx),
            **fields,
        )

    return _build
