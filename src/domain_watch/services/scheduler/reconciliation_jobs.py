# -*- coding: utf-8 -*-
"""ReconciliationJobs: the periodic work behind the Scheduler.

- expiry sweep (hourly): synthetic expiring events for expiry rules bound to a domain
- ledger reset (monthly): drop spending buckets of past months
- stale lock cleanup (hourly): clear in-flight locks older than the max age
- digest generation (daily): one summary per free-tier owner
"""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional

from domain_watch.models.alert_rule import AlertKind
from domain_watch.services.normalization import EventNormalizer
from domain_watch.services.scheduler.scheduler import ScheduledJob
from domain_watch.services.scheduler.triggers import DailyTrigger, HourlyTrigger, MonthlyTrigger

if TYPE_CHECKING:
    from domain_watch.clients.interfaces.domain_info_service import (
        DomainExpiryInfo,
        IDomainInfoService,
    )
    from domain_watch.config import SchedulerSettings
    from domain_watch.persistence.repositories.interfaces.rule_store import IRuleStore
    from domain_watch.services.alerts import AlertService, DigestService
    from domain_watch.services.auto_actions import AutoActionsService

EXPIRY_SWEEP = "expiry_sweep"
LEDGER_RESET = "ledger_reset"
STALE_LOCK_CLEANUP = "stale_lock_cleanup"
DIGEST_GENERATION = "digest_generation"


class ReconciliationJobs:
    """Job bodies. Each returns a count (or list) for the scheduler's completion log."""

    def __init__(
        self,
        rule_store: "IRuleStore",
        domain_info: "IDomainInfoService",
        alert_service: "AlertService",
        auto_actions: "AutoActionsService",
        digest_service: "DigestService",
        normalizer: Optional[EventNormalizer] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._rules = rule_store
        self._domain_info = domain_info
        self._alerts = alert_service
        self._auto_actions = auto_actions
        self._digest = digest_service
        self._normalizer = normalizer or EventNormalizer()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def expiry_sweep(self) -> int:
        """Dispatch expiring alerts for domain-bound expiry rules. Returns alerts dispatched.

        Domain lookups are cached for the duration of one sweep; a failed lookup
        skips that domain only.
        """
        rules = await self._rules.find_active_alert_rules(AlertKind.EXPIRY)
        self._alerts.retain_sweep_state({rule.id for rule in rules})
        infos: dict[str, Optional["DomainExpiryInfo"]] = {}
        dispatched = 0
        for rule in rules:
            if rule.domain is None:
                continue
            domain = rule.domain
            if domain not in infos:
                try:
                    infos[domain] = await self._domain_info.get_expiry_info(domain)
                except Exception as e:
                    self._logger.warning(
                        "expiry_sweep_lookup_failed",
                        domain=domain,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    infos[domain] = None
            info = infos[domain]
            if info is None:
                continue
            event = self._normalizer.synthesize_expiring(domain, info.expiry_time, info.owner)
            try:
                outcome = await self._alerts.dispatch_synthetic(rule, event)
            except Exception as e:
                self._logger.exception(
                    "expiry_sweep_dispatch_failed",
                    rule_id=rule.id,
                    domain=domain,
                    error=str(e),
                )
                continue
            if outcome is not None:
                dispatched += 1
        self._logger.info(
            "expiry_sweep_complete",
            rules=len(rules),
            domains=len(infos),
            dispatched=dispatched,
        )
        return dispatched

    async def ledger_reset(self) -> int:
        return self._auto_actions.reset_spending_ledger()

    async def stale_lock_cleanup(self) -> int:
        return len(self._auto_actions.cleanup_stale_locks())

    async def digest_generation(self) -> int:
        return await self._digest.generate()

    def build_jobs(self, settings: "SchedulerSettings") -> list[ScheduledJob]:
        """The four jobs with triggers from SCHEDULER__* settings."""
        return [
            ScheduledJob(EXPIRY_SWEEP, HourlyTrigger(settings.expiry_sweep_minute), self.expiry_sweep),
            ScheduledJob(LEDGER_RESET, MonthlyTrigger(1, settings.ledger_reset_hour, 0), self.ledger_reset),
            ScheduledJob(
                STALE_LOCK_CLEANUP,
                HourlyTrigger(settings.stale_lock_cleanup_minute),
                self.stale_lock_cleanup,
            ),
            ScheduledJob(DIGEST_GENERATION, DailyTrigger(settings.digest_hour, 0), self.digest_generation),
        ]
