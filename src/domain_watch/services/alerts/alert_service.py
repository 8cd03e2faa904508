# -*- coding: utf-8 -*-
"""AlertService: turns DomainEvents into tier-gated user notifications.

For each event: dedup on the event key, collect direct and pattern rules for
every alert kind the event maps to, check conditions, then dispatch. Free-tier
owners only get critical alerts in real time; everything else goes into their
daily digest. Nothing raised while handling one event escapes process_event.
"""

from __future__ import annotations

import structlog
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from domain_watch.events.engine.alert_events import AlertDispatchedEvent
from domain_watch.models.alert_delivery import AlertDeliveryRecord, DeliveryStatus
from domain_watch.models.domain_event import Urgency
from domain_watch.models.owner_profile import SubscriptionTier
from domain_watch.services.alerts.alert_formatter import AlertFormatter
from domain_watch.services.matching.condition_matcher import (
    ALERT_KINDS_BY_EVENT,
    ConditionMatcher,
)
from domain_watch.utils.dedupe import rule_event_key

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from domain_watch.clients.interfaces.entitlement_service import IEntitlementService
    from domain_watch.models.alert_rule import AlertRule
    from domain_watch.models.domain_event import DomainEvent
    from domain_watch.notifications.types import INotifier
    from domain_watch.persistence.repositories.interfaces.rule_store import IRuleStore
    from domain_watch.persistence.repositories.interfaces.seen_event_repository import (
        ISeenEventRepository,
    )
    from domain_watch.services.alerts.digest_service import DigestService


class DispatchOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    DIGESTED = "digested"
    SKIPPED = "skipped"


class AlertService:
    """Alert dispatcher: dedup, rule lookup, condition matching, frequency gate, hand-off."""

    def __init__(
        self,
        rule_store: "IRuleStore",
        seen_events: "ISeenEventRepository",
        entitlements: "IEntitlementService",
        notifier: "INotifier",
        digest_service: "DigestService",
        matcher: Optional[ConditionMatcher] = None,
        formatter: Optional[AlertFormatter] = None,
        event_bus: Optional["EventBus"] = None,
        clock: Optional[Callable[[], datetime]] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            rule_store: Alert rules, trigger counts and delivery log.
            seen_events: This dispatcher's dedup window.
            entitlements: Owner tier / active flag.
            notifier: Delivery sink (returns True on successful hand-off).
            digest_service: Receives free-tier non-critical alerts.
            matcher: Optional; defaults to ConditionMatcher().
            formatter: Optional; defaults to AlertFormatter().
            event_bus: Optional; if set, emits AlertDispatchedEvent on each send.
            clock: Optional UTC clock (tests).
            get_logger: Logger factory.
            logger_name: Optional logger name.
        """
        self._rules = rule_store
        self._seen = seen_events
        self._entitlements = entitlements
        self._notifier = notifier
        self._digest = digest_service
        self._matcher = matcher or ConditionMatcher(get_logger=get_logger)
        self._formatter = formatter or AlertFormatter()
        self._event_bus = event_bus
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._in_progress: set[str] = set()
        # rule id -> sweep reference last dispatched; kept out of the chain-event window.
        self._swept: dict[str, str] = {}

    async def process_event(self, event: "DomainEvent") -> int:
        """Dispatch every matching alert rule for ``event``. Returns rules dispatched.

        Duplicate events (same dedup key seen or currently in progress) are skipped.
        """
        key = event.dedup_key
        if key in self._in_progress:
            self._logger.debug("alert_event_in_progress_skipped", dedup_key=key)
            return 0
        self._in_progress.add(key)
        try:
            if await self._seen.contains(key):
                self._logger.debug("alert_event_duplicate_skipped", dedup_key=key)
                return 0
            try:
                rules = await self._collect_rules(event)
            except Exception as e:
                self._logger.error(
                    "alert_rule_lookup_failed",
                    dedup_key=key,
                    domain=event.domain,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return 0
            dispatched = 0
            for rule in rules:
                try:
                    if not self._matcher.alert_conditions_match(rule, event):
                        continue
                    await self.dispatch(rule, event)
                    dispatched += 1
                except Exception as e:
                    self._logger.exception(
                        "alert_rule_dispatch_error",
                        rule_id=rule.id,
                        dedup_key=key,
                        error=str(e),
                    )
            await self._seen.add(key)
            self._logger.debug(
                "alert_event_processed",
                dedup_key=key,
                kind=event.kind.value,
                domain=event.domain,
                candidates=len(rules),
                dispatched=dispatched,
            )
            return dispatched
        finally:
            self._in_progress.discard(key)

    async def _collect_rules(self, event: "DomainEvent") -> list["AlertRule"]:
        """Direct rules plus pattern rules whose pattern matches, de-duplicated by id."""
        found: dict[str, "AlertRule"] = {}
        for kind in ALERT_KINDS_BY_EVENT.get(event.kind, ()):
            for rule in await self._rules.find_alert_rules_by_domain(event.domain, kind):
                found.setdefault(rule.id, rule)
            for rule in await self._rules.find_alert_rules_by_pattern(kind):
                if rule.id in found or rule.domain_pattern is None:
                    continue
                if self._matcher.matches_pattern(rule.domain_pattern, event.domain):
                    found[rule.id] = rule
        return list(found.values())

    async def dispatch(self, rule: "AlertRule", event: "DomainEvent") -> DispatchOutcome:
        """Deliver one alert for ``rule``; free tier below critical goes to the digest."""
        profile = await self._entitlements.get_profile(rule.owner_id)
        if profile is None or not profile.is_active:
            self._logger.warning(
                "alert_owner_inactive_skipped",
                rule_id=rule.id,
                owner_id=rule.owner_id,
            )
            return DispatchOutcome.SKIPPED

        formatted = self._formatter.format(event)
        now = self._clock()

        if profile.tier == SubscriptionTier.FREE and event.urgency != Urgency.CRITICAL:
            await self._digest.record(rule, event, formatted.message)
            await self._log_delivery(rule, event, DeliveryStatus.DIGESTED, now)
            self._logger.info(
                "alert_folded_into_digest",
                rule_id=rule.id,
                owner_id=rule.owner_id,
                domain=event.domain,
            )
            return DispatchOutcome.DIGESTED

        try:
            ok = await self._notifier.send(
                rule.owner_id,
                rule.platform.value,
                formatted.message,
                formatted.suggested_actions,
                payload={"domain": event.domain, "kind": event.kind.value},
            )
        except Exception as e:
            self._logger.warning(
                "alert_notifier_error",
                rule_id=rule.id,
                owner_id=rule.owner_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            ok = False

        if not ok:
            await self._log_delivery(rule, event, DeliveryStatus.FAILED, now)
            self._logger.warning(
                "alert_delivery_failed",
                rule_id=rule.id,
                owner_id=rule.owner_id,
                domain=event.domain,
            )
            return DispatchOutcome.FAILED

        await self._rules.increment_alert_trigger(rule.id, now)
        await self._log_delivery(rule, event, DeliveryStatus.SENT, now)
        self._emit_dispatched(rule, event, formatted.message, formatted.suggested_actions)
        self._logger.info(
            "alert_sent",
            rule_id=rule.id,
            owner_id=rule.owner_id,
            domain=event.domain,
            kind=event.kind.value,
            platform=rule.platform.value,
        )
        return DispatchOutcome.SENT

    async def dispatch_synthetic(
        self, rule: "AlertRule", event: "DomainEvent"
    ) -> Optional[DispatchOutcome]:
        """Sweep entry point: dispatch unless this rule already alerted on this synthetic event.

        Sweep dedup is one entry per rule holding the last domain and day count
        alerted, so live chain traffic can never make an hourly sweep repeat itself.
        Returns None when skipped as a duplicate or when conditions do not match.
        """
        key = rule_event_key(rule.id, event.dedup_key)
        if key in self._in_progress or self._swept.get(rule.id) == event.dedup_key:
            return None
        if not self._matcher.alert_conditions_match(rule, event):
            return None
        self._in_progress.add(key)
        try:
            outcome = await self.dispatch(rule, event)
            self._swept[rule.id] = event.dedup_key
            return outcome
        finally:
            self._in_progress.discard(key)

    def retain_sweep_state(self, rule_ids: set[str]) -> None:
        """Forget sweep dedup for rules no longer active."""
        for rule_id in self._swept.keys() - rule_ids:
            del self._swept[rule_id]

    async def _log_delivery(
        self,
        rule: "AlertRule",
        event: "DomainEvent",
        status: DeliveryStatus,
        at: datetime,
    ) -> None:
        await self._rules.append_alert_delivery(
            AlertDeliveryRecord(
                rule_id=rule.id,
                owner_id=rule.owner_id,
                event_kind=event.kind,
                domain=event.domain,
                platform=rule.platform,
                status=status,
                created_at=at,
            )
        )

    def _emit_dispatched(
        self,
        rule: "AlertRule",
        event: "DomainEvent",
        message: str,
        suggested_actions: list[dict[str, str]],
    ) -> None:
        """Emit AlertDispatchedEvent for subscribers (bots, audit)."""
        if self._event_bus is None:
            return
        self._event_bus.dispatch(
            AlertDispatchedEvent(
                rule_id=rule.id,
                owner_id=rule.owner_id,
                event_kind=event.kind.value,
                domain=event.domain,
                platform=rule.platform.value,
                message=message,
                suggested_actions=suggested_actions,
                urgency=event.urgency.value if event.urgency else None,
            )
        )
