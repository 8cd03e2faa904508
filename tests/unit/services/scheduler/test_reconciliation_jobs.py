# -*- coding: utf-8 -*-
"""Unit tests for ReconciliationJobs (expiry sweep and housekeeping jobs)."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from conftest import FakeClock, FakeNotifier
from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.clients.interfaces.domain_info_service import DomainExpiryInfo, IDomainInfoService
from domain_watch.config import SchedulerSettings
from domain_watch.models.alert_rule import AlertKind, AlertRule
from domain_watch.persistence.repositories.in_memory import (
    InMemoryDigestRepository,
    InMemoryRuleStore,
    InMemorySeenEventRepository,
)
from domain_watch.services.alerts import AlertService, DigestService
from domain_watch.services.auto_actions import AutoActionsService
from domain_watch.services.normalization import EventNormalizer
from domain_watch.services.scheduler import (
    DIGEST_GENERATION,
    EXPIRY_SWEEP,
    LEDGER_RESET,
    STALE_LOCK_CLEANUP,
    DailyTrigger,
    HourlyTrigger,
    MonthlyTrigger,
    ReconciliationJobs,
)


class FakeDomainInfo(IDomainInfoService):
    def __init__(self, infos: dict[str, DomainExpiryInfo], broken: frozenset[str] = frozenset()) -> None:
        self.infos = infos
        self.broken = broken
        self.lookups: list[str] = []

    async def get_expiry_info(self, domain: str) -> Optional[DomainExpiryInfo]:
        self.lookups.append(domain)
        if domain in self.broken:
            raise ConnectionError("rpc down")
        return self.infos.get(domain)


class UnusedSubmitter:
    async def submit(self, request):
        raise AssertionError("no submissions expected")


@pytest.fixture
def domain_info(now_utc: datetime, owner_wallet: str) -> FakeDomainInfo:
    return FakeDomainInfo(
        {"web3.ape": DomainExpiryInfo("web3.ape", now_utc + timedelta(days=3), owner_wallet)},
        broken=frozenset({"broken.ape"}),
    )


@pytest.fixture
def auto_actions(
    rule_store: InMemoryRuleStore, entitlements: InMemoryEntitlementService, clock: FakeClock
) -> AutoActionsService:
    return AutoActionsService(
        rule_store, InMemorySeenEventRepository(), entitlements, UnusedSubmitter(), clock=clock
    )


@pytest.fixture
def jobs(
    auto_actions: AutoActionsService,
    rule_store: InMemoryRuleStore,
    seen_events: InMemorySeenEventRepository,
    entitlements: InMemoryEntitlementService,
    notifier: FakeNotifier,
    digest_repo: InMemoryDigestRepository,
    domain_info: FakeDomainInfo,
    clock: FakeClock,
) -> ReconciliationJobs:
    digest = DigestService(digest_repo, notifier, clock=clock)
    alerts = AlertService(rule_store, seen_events, entitlements, notifier, digest, clock=clock)
    return ReconciliationJobs(
        rule_store,
        domain_info,
        alerts,
        auto_actions,
        digest,
        normalizer=EventNormalizer(clock=clock),
    )


def expiry_rule(rule_id: str, **kwargs) -> AlertRule:
    return AlertRule.create("owner-1", AlertKind.EXPIRY, conditions={"daysThreshold": 7}, rule_id=rule_id, **kwargs)


async def test_expiry_sweep_alerts_each_bound_rule_once(
    jobs: ReconciliationJobs,
    rule_store: InMemoryRuleStore,
    notifier: FakeNotifier,
    domain_info: FakeDomainInfo,
) -> None:
    await rule_store.add_alert_rule(expiry_rule("r1", domain="web3.ape"))
    await rule_store.add_alert_rule(expiry_rule("r2", domain="web3.ape"))
    await rule_store.add_alert_rule(expiry_rule("r3", domain="broken.ape"))
    await rule_store.add_alert_rule(expiry_rule("r4", domain="unknown.ape"))
    await rule_store.add_alert_rule(expiry_rule("r5", domain_pattern="*.ape"))

    assert await jobs.expiry_sweep() == 2
    assert sorted(domain_info.lookups) == ["broken.ape", "unknown.ape", "web3.ape"]
    assert len(notifier.sent) == 2
    assert all(m.message.endswith('Domain "web3.ape" expires in 3 days') for m in notifier.sent)

    assert await jobs.expiry_sweep() == 0
    assert len(notifier.sent) == 2


async def test_expiry_sweep_outside_threshold_sends_nothing(
    jobs: ReconciliationJobs,
    rule_store: InMemoryRuleStore,
    notifier: FakeNotifier,
) -> None:
    await rule_store.add_alert_rule(
        AlertRule.create("owner-1", AlertKind.EXPIRY, domain="web3.ape", conditions={"daysThreshold": 1})
    )

    assert await jobs.expiry_sweep() == 0
    assert notifier.sent == []


async def test_housekeeping_jobs(
    jobs: ReconciliationJobs,
    auto_actions: AutoActionsService,
    now_utc: datetime,
) -> None:
    auto_actions.locks.try_acquire("r1:web3.ape", now_utc - timedelta(hours=2))
    auto_actions.ledger.record("owner-1", "2025-12", Decimal("10"))

    assert await jobs.ledger_reset() == 1
    assert await jobs.stale_lock_cleanup() == 1
    assert await jobs.digest_generation() == 0


def test_build_jobs_uses_scheduler_settings(jobs: ReconciliationJobs) -> None:
    settings = SchedulerSettings(expiry_sweep_minute=5, stale_lock_cleanup_minute=30, digest_hour=8, ledger_reset_hour=2)

    built = {job.name: job for job in jobs.build_jobs(settings)}

    assert set(built) == {EXPIRY_SWEEP, LEDGER_RESET, STALE_LOCK_CLEANUP, DIGEST_GENERATION}
    assert built[EXPIRY_SWEEP].trigger == HourlyTrigger(5)
    assert built[STALE_LOCK_CLEANUP].trigger == HourlyTrigger(30)
    assert built[LEDGER_RESET].trigger == MonthlyTrigger(1, 2, 0)
    assert built[DIGEST_GENERATION].trigger == DailyTrigger(8, 0)
