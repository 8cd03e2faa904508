# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from datetime import timedelta

from dependency_injector import containers, providers

from domain_watch.clients.http import AsyncHttpClient
from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.clients.relayer import RelayerClient
from domain_watch.config import Settings, get_settings
from domain_watch.consumers import ChainEventIngestor, DomainEventConsumer
from domain_watch.events.bus import get_event_bus
from domain_watch.models.domain_event import DomainEvent
from domain_watch.notifications.notification_manager import NotificationService
from domain_watch.notifications.strategies.base import BaseNotificationStrategy
from domain_watch.notifications.strategies.console import ConsoleNotifier
from domain_watch.notifications.strategies.telegram import TelegramNotifier
from domain_watch.notifications.stylers.notification_styler import EventNotificationStyler
from domain_watch.persistence.repositories.in_memory import (
    InMemoryDigestRepository,
    InMemoryRuleStore,
    InMemorySeenEventRepository,
)
from domain_watch.queue import InMemoryQueue, QueueMessage
from domain_watch.services.alerts import AlertFormatter, AlertService, DigestService
from domain_watch.services.auto_actions import (
    AutoActionsService,
    InFlightLockTable,
    SpendingLedger,
)
from domain_watch.services.matching import ConditionMatcher
from domain_watch.services.normalization import EventNormalizer
from domain_watch.services.notifications import AutoActionNotifier
from domain_watch.services.scheduler import ReconciliationJobs, Scheduler

ALERTS_CONSUMER = "alerts"
AUTO_ACTIONS_CONSUMER = "auto_actions"


def _build_event_queue(settings: Settings) -> InMemoryQueue[QueueMessage[DomainEvent]]:
    return InMemoryQueue[QueueMessage[DomainEvent]](maxsize=settings.engine.event_queue_size)


def _build_notification_notifiers(
    settings: Settings,
    styler: EventNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    return notifiers


def _build_auto_actions_service(
    settings: Settings,
    rule_store: InMemoryRuleStore,
    seen_events: InMemorySeenEventRepository,
    entitlements: InMemoryEntitlementService,
    submitter: RelayerClient,
    ledger: SpendingLedger,
    locks: InFlightLockTable,
    matcher: ConditionMatcher,
    event_bus: object,
) -> AutoActionsService:
    engine = settings.engine
    return AutoActionsService(
        rule_store=rule_store,
        seen_events=seen_events,
        entitlements=entitlements,
        submitter=submitter,
        ledger=ledger,
        locks=locks,
        matcher=matcher,
        event_bus=event_bus,
        submission_timeout_seconds=engine.submission_timeout_seconds,
        lock_max_age=timedelta(seconds=engine.lock_stale_seconds),
        default_monthly_cap=engine.default_monthly_cap,
    )


def _build_scheduler(settings: Settings, jobs: ReconciliationJobs) -> Scheduler:
    return Scheduler(jobs.build_jobs(settings.scheduler))


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, clients, stores, both dispatchers, consumers, scheduler."""

    config = providers.Callable(get_settings)

    event_bus = providers.Callable(get_event_bus)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    relayer_client = providers.Singleton(
        RelayerClient,
        http_client=http_client,
        settings=config,
    )

    entitlement_service = providers.Singleton(InMemoryEntitlementService)

    rule_store = providers.Singleton(InMemoryRuleStore)

    digest_repository = providers.Singleton(InMemoryDigestRepository)

    alert_seen_events = providers.Singleton(
        InMemorySeenEventRepository,
        maxsize=config.provided.engine.dedup_window_size,
    )

    auto_action_seen_events = providers.Singleton(
        InMemorySeenEventRepository,
        maxsize=config.provided.engine.dedup_window_size,
    )

    notification_styler = providers.Singleton(EventNotificationStyler)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config, notification_styler),
        queue_size=config.provided.notifications.queue_size,
        entitlements=entitlement_service,
    )

    condition_matcher = providers.Singleton(ConditionMatcher)

    alert_formatter = providers.Singleton(AlertFormatter)

    event_normalizer = providers.Singleton(EventNormalizer)

    digest_service = providers.Singleton(
        DigestService,
        digest_repository=digest_repository,
        notifier=notification_service,
    )

    alert_service = providers.Singleton(
        AlertService,
        rule_store=rule_store,
        seen_events=alert_seen_events,
        entitlements=entitlement_service,
        notifier=notification_service,
        digest_service=digest_service,
        matcher=condition_matcher,
        formatter=alert_formatter,
        event_bus=event_bus,
    )

    spending_ledger = providers.Singleton(SpendingLedger)

    action_locks = providers.Singleton(InFlightLockTable)

    auto_actions_service = providers.Singleton(
        _build_auto_actions_service,
        settings=config,
        rule_store=rule_store,
        seen_events=auto_action_seen_events,
        entitlements=entitlement_service,
        submitter=relayer_client,
        ledger=spending_ledger,
        locks=action_locks,
        matcher=condition_matcher,
        event_bus=event_bus,
    )

    auto_action_notifier = providers.Singleton(
        AutoActionNotifier,
        notifier=notification_service,
        event_bus=event_bus,
    )

    alert_queue = providers.Singleton(_build_event_queue, config)

    auto_action_queue = providers.Singleton(_build_event_queue, config)

    chain_event_ingestor = providers.Singleton(
        ChainEventIngestor,
        queues=providers.Dict(
            {ALERTS_CONSUMER: alert_queue, AUTO_ACTIONS_CONSUMER: auto_action_queue}
        ),
        normalizer=event_normalizer,
    )

    alert_consumer = providers.Singleton(
        DomainEventConsumer,
        name=ALERTS_CONSUMER,
        queue=alert_queue,
        handler=alert_service.provided.process_event,
        max_concurrency=config.provided.engine.max_concurrent_events,
    )

    auto_action_consumer = providers.Singleton(
        DomainEventConsumer,
        name=AUTO_ACTIONS_CONSUMER,
        queue=auto_action_queue,
        handler=auto_actions_service.provided.process_event,
        max_concurrency=config.provided.engine.max_concurrent_events,
    )

    reconciliation_jobs = providers.Singleton(
        ReconciliationJobs,
        rule_store=rule_store,
        domain_info=relayer_client,
        alert_service=alert_service,
        auto_actions=auto_actions_service,
        digest_service=digest_service,
        normalizer=event_normalizer,
    )

    scheduler = providers.Singleton(_build_scheduler, config, reconciliation_jobs)
