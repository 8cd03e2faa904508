# -*- coding: utf-8 -*-
"""Unit tests for AutoActionsService: gating, spending limits, locking and submission."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import pytest

from conftest import FakeClock, RecordingEventBus
from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.clients.interfaces.transaction_submitter import (
    ITransactionSubmitter,
    SubmissionRequest,
    SubmissionResult,
)
from domain_watch.events.engine.auto_action_events import (
    AutoActionExecutedEvent,
    AutoActionFailedEvent,
)
from domain_watch.models.action_execution_record import ExecutionStatus
from domain_watch.models.auto_action_rule import ActionKind, AutoActionRule
from domain_watch.models.domain_event import DomainEvent, EventKind
from domain_watch.models.owner_profile import OwnerProfile, SubscriptionTier
from domain_watch.persistence.repositories.in_memory import (
    InMemoryRuleStore,
    InMemorySeenEventRepository,
)
from domain_watch.services.auto_actions import AutoActionsService
from domain_watch.utils.dedupe import action_lock_key

MONTH = "2026-02"


class FakeSubmitter(ITransactionSubmitter):
    """Records requests; optionally waits on ``gate``, raises ``error`` or returns ``result``."""

    def __init__(
        self,
        result: Optional[SubmissionResult] = None,
        *,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
        delay: float = 0.0,
    ) -> None:
        self.result = result or SubmissionResult(success=True, tx_hash="0xconfirmed")
        self.error = error
        self.gate = gate
        self.delay = delay
        self.requests: list[SubmissionRequest] = []

    async def submit(self, request: SubmissionRequest) -> SubmissionResult:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def submitter() -> FakeSubmitter:
    return FakeSubmitter()


@pytest.fixture
def make_service(
    rule_store: InMemoryRuleStore,
    seen_events: InMemorySeenEventRepository,
    entitlements: InMemoryEntitlementService,
    event_bus: RecordingEventBus,
    clock: FakeClock,
) -> Callable[..., AutoActionsService]:
    def _build(submitter: ITransactionSubmitter, **kwargs: Any) -> AutoActionsService:
        return AutoActionsService(
            rule_store,
            seen_events,
            entitlements,
            submitter,
            event_bus=event_bus,
            clock=clock,
            **kwargs,
        )

    return _build


@pytest.fixture
def service(make_service: Callable[..., AutoActionsService], submitter: FakeSubmitter) -> AutoActionsService:
    return make_service(submitter)


def buy_rule(max_amount: str = "50", **conditions: Any) -> AutoActionRule:
    return AutoActionRule.create(
        "owner-1",
        ActionKind.BUY,
        max_amount=max_amount,
        conditions=conditions or {"maxPrice": max_amount},
        rule_id="buy-1",
    )


async def test_buy_under_pattern_rule_end_to_end(
    service: AutoActionsService,
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    event_bus: RecordingEventBus,
    event_factory: Callable[..., DomainEvent],
    seller_wallet: str,
) -> None:
    await rule_store.add_auto_action_rule(buy_rule("50", maxPrice="50", domainPatterns=["*.ape"]))
    event = event_factory(EventKind.LISTED, domain="nft.ape", price=Decimal("45"))

    attempts = await service.process_event(event)

    assert attempts == 1
    assert service.ledger.committed("owner-1", MONTH) == Decimal("45")
    stored = await rule_store.get_auto_action_rule("buy-1")
    assert stored is not None and stored.execution_count == 1
    [record] = await rule_store.list_action_log()
    assert record.status == ExecutionStatus.SUCCESS
    assert record.amount == Decimal("45")
    assert record.tx_hash == "0xconfirmed"
    [request] = submitter.requests
    assert request.kind == ActionKind.BUY
    assert request.credentials_ref == "cred-1"
    assert request.params == {"seller": seller_wallet, "price": "45"}
    [executed] = event_bus.of_type(AutoActionExecutedEvent)
    assert (executed.rule_id, executed.domain, executed.action) == ("buy-1", "nft.ape", "buy")

    assert await service.process_event(event) == 0
    assert len(submitter.requests) == 1


async def test_listing_outside_scope_does_not_execute(
    service: AutoActionsService,
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
) -> None:
    await rule_store.add_auto_action_rule(buy_rule("50", maxPrice="50", domainPatterns=["*.eth"]))

    assert await service.process_event(event_factory(EventKind.LISTED, domain="nft.ape")) == 0
    assert submitter.requests == []


async def test_event_kind_without_action_rules_is_ignored(
    service: AutoActionsService,
    seen_events: InMemorySeenEventRepository,
    event_factory: Callable[..., DomainEvent],
) -> None:
    event = event_factory(EventKind.SOLD)

    assert await service.process_event(event) == 0
    assert not await seen_events.contains(event.dedup_key)


async def test_spending_cap_rejects_then_accepts(
    service: AutoActionsService,
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    event_bus: RecordingEventBus,
    event_factory: Callable[..., DomainEvent],
) -> None:
    service.ledger.record("owner-1", MONTH, Decimal("150"))
    rule = buy_rule("100", maxPrice="100")

    rejected = await service.execute(rule, event_factory(EventKind.LISTED, price=Decimal("60"), tx="0x1"))
    accepted = await service.execute(rule, event_factory(EventKind.LISTED, price=Decimal("40"), tx="0x2"))

    assert rejected is not None and rejected.status == ExecutionStatus.FAILED
    assert rejected.reason == "spending_limit_exceeded"
    assert rejected.amount == Decimal("60")
    assert accepted is not None and accepted.status == ExecutionStatus.SUCCESS
    assert service.ledger.committed("owner-1", MONTH) == Decimal("190")
    assert len(submitter.requests) == 1
    [failed] = event_bus.of_type(AutoActionFailedEvent)
    assert failed.reason == "spending_limit_exceeded"
    assert len(await rule_store.list_action_log()) == 2


async def test_concurrent_execution_on_same_domain_is_locked(
    make_service: Callable[..., AutoActionsService],
    event_factory: Callable[..., DomainEvent],
) -> None:
    gate = asyncio.Event()
    submitter = FakeSubmitter(gate=gate)
    service = make_service(submitter)
    rule = buy_rule()
    event = event_factory(EventKind.LISTED)

    first = asyncio.create_task(service.execute(rule, event))
    while not submitter.requests:
        await asyncio.sleep(0)

    second = await service.execute(rule, event)
    gate.set()
    record = await first

    assert second is None
    assert record is not None and record.status == ExecutionStatus.SUCCESS
    assert len(submitter.requests) == 1
    assert not service.locks.is_held(action_lock_key(rule.id, event.domain))


async def test_stale_lock_is_cleared_and_execution_resumes(
    service: AutoActionsService,
    clock: FakeClock,
    now_utc: datetime,
    event_factory: Callable[..., DomainEvent],
) -> None:
    rule = buy_rule()
    event = event_factory(EventKind.LISTED)
    key = action_lock_key(rule.id, event.domain)
    service.locks.try_acquire(key, now_utc)

    assert await service.execute(rule, event) is None

    clock.advance(minutes=30)
    assert service.cleanup_stale_locks() == []
    clock.advance(minutes=31)
    assert service.cleanup_stale_locks() == [key]

    record = await service.execute(rule, event)
    assert record is not None and record.status == ExecutionStatus.SUCCESS


async def test_free_tier_owner_gets_entitlement_lapsed(
    make_service: Callable[..., AutoActionsService],
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    profile_factory: Callable[..., OwnerProfile],
    event_factory: Callable[..., DomainEvent],
) -> None:
    entitlements = InMemoryEntitlementService([profile_factory(tier=SubscriptionTier.FREE)])
    service = AutoActionsService(rule_store, InMemorySeenEventRepository(), entitlements, submitter)

    record = await service.execute(buy_rule(), event_factory(EventKind.LISTED))

    assert record is not None and record.reason == "entitlement_lapsed"
    assert submitter.requests == []


async def test_unknown_owner_gets_entitlement_lapsed(
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
) -> None:
    service = AutoActionsService(
        rule_store, InMemorySeenEventRepository(), InMemoryEntitlementService(), submitter
    )

    record = await service.execute(buy_rule(), event_factory(EventKind.LISTED))

    assert record is not None and record.reason == "entitlement_lapsed"


async def test_entitlement_lookup_error_skips_without_record(
    rule_store: InMemoryRuleStore,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
) -> None:
    class BrokenEntitlements(InMemoryEntitlementService):
        async def get_profile(self, owner_id: str) -> Optional[OwnerProfile]:
            raise ConnectionError("entitlements down")

    service = AutoActionsService(rule_store, InMemorySeenEventRepository(), BrokenEntitlements(), submitter)

    assert await service.execute(buy_rule(), event_factory(EventKind.LISTED)) is None
    assert await rule_store.list_action_log() == []


async def test_renew_requires_owner_wallet(
    service: AutoActionsService,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
    seller_wallet: str,
) -> None:
    rule = AutoActionRule.create("owner-1", ActionKind.RENEW, max_amount="25", rule_id="renew-1")

    record = await service.execute(rule, event_factory(EventKind.EXPIRING, owner=seller_wallet))

    assert record is not None and record.reason == "not_eligible"
    assert submitter.requests == []


async def test_renew_charges_max_amount_and_sends_duration(
    service: AutoActionsService,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
    owner_wallet: str,
) -> None:
    rule = AutoActionRule.create(
        "owner-1",
        ActionKind.RENEW,
        max_amount="25",
        conditions={"renewalDuration": 30},
        rule_id="renew-1",
    )

    record = await service.execute(rule, event_factory(EventKind.EXPIRING, owner=owner_wallet.upper()))

    assert record is not None and record.status == ExecutionStatus.SUCCESS
    [request] = submitter.requests
    assert request.amount == Decimal("25")
    assert request.params == {"renewal_duration_seconds": 30 * 86400}


async def test_buy_refused_when_owner_is_seller(
    service: AutoActionsService,
    event_factory: Callable[..., DomainEvent],
    owner_wallet: str,
) -> None:
    record = await service.execute(buy_rule(), event_factory(EventKind.LISTED, seller=owner_wallet))

    assert record is not None and record.reason == "not_eligible"


@pytest.mark.parametrize(
    ("current_bid", "increment", "stop", "expected"),
    [
        ("10", "1", "20", Decimal("11")),
        ("10", "5", "12", Decimal("12")),
    ],
)
async def test_bid_amount_is_capped_by_stop_price(
    service: AutoActionsService,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
    current_bid: str,
    increment: str,
    stop: str,
    expected: Decimal,
) -> None:
    rule = AutoActionRule.create(
        "owner-1",
        ActionKind.BID,
        max_amount="100",
        conditions={"stopPrice": stop, "bidIncrement": increment},
    )

    record = await service.execute(
        rule, event_factory(EventKind.AUCTION_UPDATED, current_bid=Decimal(current_bid))
    )

    assert record is not None and record.amount == expected
    assert submitter.requests[0].params == {"current_bid": current_bid}


@pytest.mark.parametrize("current_bid", ["30", "20"])
async def test_bid_at_or_above_stop_price_aborts(
    service: AutoActionsService,
    submitter: FakeSubmitter,
    event_factory: Callable[..., DomainEvent],
    current_bid: str,
) -> None:
    rule = AutoActionRule.create("owner-1", ActionKind.BID, max_amount="100", conditions={"stopPrice": "20"})

    record = await service.execute(
        rule, event_factory(EventKind.AUCTION_UPDATED, current_bid=Decimal(current_bid))
    )

    assert record is not None and record.reason == "stop_limit_exceeded"
    assert submitter.requests == []


async def test_bid_refused_when_owner_is_highest_bidder(
    service: AutoActionsService,
    event_factory: Callable[..., DomainEvent],
    owner_wallet: str,
) -> None:
    rule = AutoActionRule.create("owner-1", ActionKind.BID, max_amount="100", conditions={"stopPrice": "50"})

    record = await service.execute(rule, event_factory(EventKind.AUCTION_UPDATED, bidder=owner_wallet))

    assert record is not None and record.reason == "not_eligible"


@pytest.mark.parametrize(
    ("submitter_kwargs", "reason"),
    [
        ({"result": SubmissionResult(success=False, error="reverted")}, "submission_failed"),
        ({"error": ConnectionError("rpc down")}, "submission_error"),
        ({"delay": 1.0}, "submission_timeout"),
    ],
)
async def test_submission_problems_release_reservation(
    make_service: Callable[..., AutoActionsService],
    rule_store: InMemoryRuleStore,
    event_bus: RecordingEventBus,
    event_factory: Callable[..., DomainEvent],
    submitter_kwargs: dict[str, Any],
    reason: str,
) -> None:
    service = make_service(FakeSubmitter(**submitter_kwargs), submission_timeout_seconds=0.01)

    record = await service.execute(buy_rule(), event_factory(EventKind.LISTED))

    assert record is not None and record.status == ExecutionStatus.FAILED
    assert record.reason == reason
    assert service.ledger.committed("owner-1", MONTH) == Decimal("0")
    assert service.ledger.reserved("owner-1", MONTH) == Decimal("0")
    assert (await rule_store.get_auto_action_rule("buy-1")) is None
    [failed] = event_bus.of_type(AutoActionFailedEvent)
    assert failed.reason == reason


async def test_reset_spending_ledger_drops_previous_months(service: AutoActionsService) -> None:
    service.ledger.record("owner-1", "2026-01", Decimal("120"))
    service.ledger.record("owner-1", MONTH, Decimal("30"))

    assert service.reset_spending_ledger() == 1
    assert service.ledger.committed("owner-1", "2026-01") == Decimal("0")
    assert service.ledger.committed("owner-1", MONTH) == Decimal("30")
