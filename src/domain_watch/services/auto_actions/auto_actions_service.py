# -*- coding: utf-8 -*-
"""AutoActionsService: executes renew / buy / bid rules against DomainEvents.

Each execution holds an in-flight lock on ``rule_id:domain`` for its whole
lifetime and walks: entitlement -> eligibility -> amount -> spending
reservation -> submission (bounded wait) -> commit or release. Business aborts
become failed ActionExecutionRecords plus an AutoActionFailedEvent; they never
escape ``execute``.
"""

from __future__ import annotations

import asyncio
import structlog
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Optional

from domain_watch.clients.interfaces.transaction_submitter import SubmissionRequest
from domain_watch.events.engine.auto_action_events import (
    AutoActionExecutedEvent,
    AutoActionFailedEvent,
)
from domain_watch.exceptions.action_exceptions import (
    ActionAborted,
    EntitlementLapsed,
    NotEligible,
    StopLimitExceeded,
)
from domain_watch.models.action_execution_record import ActionExecutionRecord
from domain_watch.models.auto_action_rule import (
    ActionKind,
    BidConditions,
    RenewConditions,
)
from domain_watch.models.owner_profile import DEFAULT_MONTHLY_CAP
from domain_watch.services.auto_actions.action_locks import InFlightLockTable
from domain_watch.services.auto_actions.spending_ledger import SpendingLedger
from domain_watch.services.matching.condition_matcher import (
    ACTION_KINDS_BY_EVENT,
    ConditionMatcher,
)
from domain_watch.utils.dedupe import action_lock_key, month_key
from domain_watch.utils.validation import mask_address, same_address

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from domain_watch.clients.interfaces.entitlement_service import IEntitlementService
    from domain_watch.clients.interfaces.transaction_submitter import ITransactionSubmitter
    from domain_watch.models.auto_action_rule import AutoActionRule
    from domain_watch.models.domain_event import DomainEvent
    from domain_watch.models.owner_profile import OwnerProfile
    from domain_watch.persistence.repositories.interfaces.rule_store import IRuleStore
    from domain_watch.persistence.repositories.interfaces.seen_event_repository import (
        ISeenEventRepository,
    )
    from domain_watch.services.auto_actions.spending_ledger import Reservation

SECONDS_PER_DAY = 86400
DEFAULT_LOCK_MAX_AGE = timedelta(hours=1)


class AutoActionsService:
    """Auto-action engine: matching, locking, spending limits and submission."""

    def __init__(
        self,
        rule_store: "IRuleStore",
        seen_events: "ISeenEventRepository",
        entitlements: "IEntitlementService",
        submitter: "ITransactionSubmitter",
        ledger: Optional[SpendingLedger] = None,
        locks: Optional[InFlightLockTable] = None,
        matcher: Optional[ConditionMatcher] = None,
        event_bus: Optional["EventBus"] = None,
        clock: Optional[Callable[[], datetime]] = None,
        submission_timeout_seconds: float = 120.0,
        lock_max_age: timedelta = DEFAULT_LOCK_MAX_AGE,
        default_monthly_cap: Decimal = DEFAULT_MONTHLY_CAP,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            rule_store: Auto-action rules, execution counts and action log.
            seen_events: This engine's dedup window (separate from the alert dispatcher's).
            entitlements: Owner tier, cap, wallet and credentials reference.
            submitter: Transaction submission collaborator.
            ledger: Optional; defaults to a fresh SpendingLedger.
            locks: Optional; defaults to a fresh InFlightLockTable.
            matcher: Optional; defaults to ConditionMatcher().
            event_bus: Optional; if set, emits AutoActionExecuted / AutoActionFailed events.
            clock: Optional UTC clock (tests).
            submission_timeout_seconds: Max wait for the submitter's confirmation.
            lock_max_age: Locks older than this are cleared by cleanup_stale_locks.
            default_monthly_cap: Cap used when the profile carries none.
            get_logger: Logger factory.
            logger_name: Optional logger name.
        """
        self._rules = rule_store
        self._seen = seen_events
        self._entitlements = entitlements
        self._submitter = submitter
        self._ledger = ledger or SpendingLedger()
        self._locks = locks or InFlightLockTable()
        self._matcher = matcher or ConditionMatcher(get_logger=get_logger)
        self._event_bus = event_bus
        self._clock = clock or (lambda: datetime.now(UTC))
        self._timeout = submission_timeout_seconds
        self._lock_max_age = lock_max_age
        self._default_cap = default_monthly_cap
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._in_progress: set[str] = set()

    @property
    def ledger(self) -> SpendingLedger:
        return self._ledger

    @property
    def locks(self) -> InFlightLockTable:
        return self._locks

    async def process_event(self, event: "DomainEvent") -> int:
        """Execute every active rule whose conditions match ``event``. Returns attempts made."""
        kinds = ACTION_KINDS_BY_EVENT.get(event.kind, ())
        if not kinds:
            return 0
        key = event.dedup_key
        if key in self._in_progress:
            return 0
        self._in_progress.add(key)
        try:
            if await self._seen.contains(key):
                self._logger.debug("auto_action_event_duplicate_skipped", dedup_key=key)
                return 0
            try:
                rules = [r for kind in kinds for r in await self._rules.find_auto_action_rules(kind)]
            except Exception as e:
                self._logger.error(
                    "auto_action_rule_lookup_failed",
                    dedup_key=key,
                    domain=event.domain,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return 0
            attempts = 0
            for rule in rules:
                try:
                    if not self._matcher.action_conditions_match(rule, event):
                        continue
                    if await self.execute(rule, event) is not None:
                        attempts += 1
                except Exception as e:
                    self._logger.exception(
                        "auto_action_rule_error",
                        rule_id=rule.id,
                        dedup_key=key,
                        error=str(e),
                    )
            await self._seen.add(key)
            return attempts
        finally:
            self._in_progress.discard(key)

    async def execute(
        self, rule: "AutoActionRule", event: "DomainEvent"
    ) -> Optional[ActionExecutionRecord]:
        """Run one guarded execution. Returns the appended record, or None if skipped.

        Skipped means the (rule, domain) lock was already held or a collaborator
        needed before submission was unavailable.
        """
        now = self._clock()
        lock_key = action_lock_key(rule.id, event.domain)
        if not self._locks.try_acquire(lock_key, now):
            self._logger.info(
                "auto_action_already_in_progress",
                rule_id=rule.id,
                domain=event.domain,
            )
            return None
        try:
            return await self._execute_locked(rule, event, now)
        finally:
            self._locks.release(lock_key, now)

    async def _execute_locked(
        self, rule: "AutoActionRule", event: "DomainEvent", now: datetime
    ) -> Optional[ActionExecutionRecord]:
        amount: Optional[Decimal] = None
        try:
            profile = await self._entitlements.get_profile(rule.owner_id)
        except Exception as e:
            self._logger.error(
                "auto_action_entitlement_unavailable",
                rule_id=rule.id,
                owner_id=rule.owner_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        try:
            profile = self._check_entitlement(rule, profile)
            self._check_eligibility(rule, event, profile)
            amount = self._compute_amount(rule, event)
            cap = profile.monthly_cap if profile.monthly_cap is not None else self._default_cap
            reservation = self._ledger.reserve(rule.owner_id, month_key(now), amount, cap)
        except ActionAborted as e:
            return await self._fail(rule, event, reason=e.reason, error=str(e), amount=amount)

        request = SubmissionRequest(
            kind=rule.kind,
            domain=event.domain,
            amount=amount,
            credentials_ref=profile.credentials_ref,
            params=self._submission_params(rule, event),
        )
        self._logger.info(
            "auto_action_submitting",
            rule_id=rule.id,
            kind=rule.kind.value,
            domain=event.domain,
            amount=str(amount),
            wallet_masked=mask_address(profile.wallet_address),
        )
        try:
            result = await asyncio.wait_for(self._submitter.submit(request), self._timeout)
        except TimeoutError:
            self._ledger.release(reservation)
            return await self._fail(
                rule,
                event,
                reason="submission_timeout",
                error=f"no confirmation within {self._timeout:g}s",
                amount=amount,
            )
        except Exception as e:
            self._ledger.release(reservation)
            return await self._fail(
                rule, event, reason="submission_error", error=str(e) or type(e).__name__, amount=amount
            )

        if not result.success:
            self._ledger.release(reservation)
            return await self._fail(
                rule,
                event,
                reason="submission_failed",
                error=result.error or "transaction failed",
                amount=amount,
            )
        return await self._succeed(rule, event, reservation, amount, result.tx_hash)

    def _check_entitlement(
        self, rule: "AutoActionRule", profile: Optional["OwnerProfile"]
    ) -> "OwnerProfile":
        if profile is None or not profile.is_active:
            raise EntitlementLapsed("owner is unknown or inactive")
        if not profile.is_premium:
            raise EntitlementLapsed(f"auto-actions need premium, owner is {profile.tier.value}")
        return profile

    def _check_eligibility(
        self, rule: "AutoActionRule", event: "DomainEvent", profile: "OwnerProfile"
    ) -> None:
        wallet = profile.wallet_address
        if rule.kind == ActionKind.RENEW:
            if not same_address(wallet, event.owner):
                raise NotEligible("owner wallet is not the on-chain domain owner")
        elif rule.kind == ActionKind.BUY:
            if same_address(wallet, event.seller):
                raise NotEligible("owner is the seller of this listing")
        elif rule.kind == ActionKind.BID:
            if same_address(wallet, event.bidder):
                raise NotEligible("owner already holds the highest bid")

    def _compute_amount(self, rule: "AutoActionRule", event: "DomainEvent") -> Decimal:
        if rule.kind == ActionKind.RENEW:
            return rule.max_amount
        if rule.kind == ActionKind.BUY:
            if event.price is None:
                raise NotEligible("listing has no price")
            return event.price
        conditions = rule.conditions
        if not isinstance(conditions, BidConditions) or event.current_bid is None:
            raise NotEligible("auction has no current bid")
        current = event.current_bid
        if current > conditions.stop_price:
            raise StopLimitExceeded(
                f"current bid {current} exceeds stop price {conditions.stop_price}"
            )
        amount = min(current + conditions.bid_increment, conditions.stop_price, rule.max_amount)
        if amount <= current:
            raise StopLimitExceeded(f"cannot outbid {current} within the stop price")
        return amount

    @staticmethod
    def _submission_params(rule: "AutoActionRule", event: "DomainEvent") -> dict[str, Any]:
        if rule.kind == ActionKind.RENEW and isinstance(rule.conditions, RenewConditions):
            return {"renewal_duration_seconds": rule.conditions.renewal_duration_days * SECONDS_PER_DAY}
        if rule.kind == ActionKind.BUY:
            return {"seller": event.seller, "price": str(event.price)}
        if rule.kind == ActionKind.BID:
            return {"current_bid": str(event.current_bid)}
        return {}

    async def _succeed(
        self,
        rule: "AutoActionRule",
        event: "DomainEvent",
        reservation: "Reservation",
        amount: Decimal,
        tx_hash: Optional[str],
    ) -> ActionExecutionRecord:
        now = self._clock()
        total = self._ledger.commit(reservation)
        record = ActionExecutionRecord.success(
            rule.id, rule.owner_id, rule.kind, event.domain, amount, tx_hash, at=now
        )
        try:
            await self._rules.increment_action_execution(rule.id, now)
            await self._rules.append_action_log(record)
        except Exception as e:
            self._logger.error(
                "auto_action_bookkeeping_failed",
                rule_id=rule.id,
                domain=event.domain,
                tx_hash=tx_hash,
                error=str(e),
            )
        self._logger.info(
            "auto_action_executed",
            rule_id=rule.id,
            kind=rule.kind.value,
            domain=event.domain,
            amount=str(amount),
            month_total=str(total),
            tx_hash=tx_hash,
        )
        if self._event_bus is not None:
            self._event_bus.dispatch(
                AutoActionExecutedEvent(
                    rule_id=rule.id,
                    owner_id=rule.owner_id,
                    action=rule.kind.value,
                    domain=event.domain,
                    amount=amount,
                    tx_hash=tx_hash,
                )
            )
        return record

    async def _fail(
        self,
        rule: "AutoActionRule",
        event: "DomainEvent",
        *,
        reason: str,
        error: str,
        amount: Optional[Decimal] = None,
    ) -> ActionExecutionRecord:
        record = ActionExecutionRecord.failure(
            rule.id,
            rule.owner_id,
            rule.kind,
            event.domain,
            error=error,
            reason=reason,
            amount=amount if amount is not None else Decimal("0"),
            at=self._clock(),
        )
        try:
            await self._rules.append_action_log(record)
        except Exception as e:
            self._logger.error(
                "auto_action_log_append_failed",
                rule_id=rule.id,
                domain=event.domain,
                error=str(e),
            )
        self._logger.warning(
            "auto_action_failed",
            rule_id=rule.id,
            kind=rule.kind.value,
            domain=event.domain,
            reason=reason,
            error=error,
        )
        if self._event_bus is not None:
            self._event_bus.dispatch(
                AutoActionFailedEvent(
                    rule_id=rule.id,
                    owner_id=rule.owner_id,
                    action=rule.kind.value,
                    domain=event.domain,
                    reason=reason,
                    amount=amount,
                    error_message=error,
                )
            )
        return record

    def cleanup_stale_locks(self, now: Optional[datetime] = None) -> list[str]:
        """Clear locks older than the max age, logging a warning per key."""
        cleared = self._locks.clear_stale(now or self._clock(), self._lock_max_age)
        for key, acquired_at in cleared:
            self._logger.warning(
                "auto_action_stale_lock_cleared",
                lock_key=key,
                acquired_at=acquired_at.isoformat(),
            )
        return [key for key, _ in cleared]

    def reset_spending_ledger(self, now: Optional[datetime] = None) -> int:
        """Drop ledger buckets for months before the current one."""
        current = month_key(now or self._clock())
        removed = self._ledger.reset_before(current)
        self._logger.info("spending_ledger_reset", current_month=current, buckets_removed=removed)
        return removed
