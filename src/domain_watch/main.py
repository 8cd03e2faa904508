# -*- coding: utf-8 -*-
"""
Entry point for the domain watch engine.

Starts notifications, the alert and auto-action consumers, the auto-action
notifier and the reconciliation scheduler, then waits for SIGINT/SIGTERM.
Chain events enter through ChainEventIngestor.ingest, which fans each event
out to one queue per consumer.

Run with: python -m domain_watch.main
"""
from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Any

import structlog

from domain_watch.config import Settings, get_settings
from domain_watch.DI import Container
from domain_watch.exceptions import MissingRequiredConfigError
from domain_watch.logging.config import configure_logging
from domain_watch.notifications.notification_manager import NotificationService
from domain_watch.notifications.types import NotificationMessage


def _stop_on_signals(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops have no add_signal_handler.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)


def _require(settings: Settings, logger: Any) -> None:
    missing = []
    if not settings.relayer.base_url.strip():
        missing.append("RELAYER__BASE_URL")
    if settings.telegram.enabled and not settings.telegram.api_key:
        missing.append("TELEGRAM__API_KEY")
    if missing:
        logger.error("main_missing_required_config", keys=missing)
        raise MissingRequiredConfigError(", ".join(missing))


def _announce(notifications: NotificationService, event_type: str, text: str) -> None:
    notifications.notify(NotificationMessage(event_type=event_type, message=text))


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    _require(settings, logger)

    container = Container()
    notifications = container.notification_service()
    outcome_notifier = container.auto_action_notifier()
    queues = (container.alert_queue(), container.auto_action_queue())
    consumers = (container.alert_consumer(), container.auto_action_consumer())
    scheduler = container.scheduler()
    http_client = container.http_client()
    container.chain_event_ingestor()

    await notifications.initialize()
    outcome_notifier.start()
    for consumer in consumers:
        await consumer.start()
    if settings.scheduler.enabled:
        scheduler.start()

    stop = asyncio.Event()
    _stop_on_signals(stop)
    logger.info(
        "main_engine_started",
        relayer_url=settings.relayer.base_url,
        consumers=[c.name for c in consumers],
        jobs=scheduler.job_names if settings.scheduler.enabled else [],
    )
    _announce(notifications, "system_started", "Domain watch engine started")

    try:
        await stop.wait()
        logger.info("main_shutdown_requested")
    finally:
        # Events already queued are still handled before the consumers stop.
        await scheduler.stop()
        for queue in queues:
            queue.shutdown()
        for queue in queues:
            await queue.join()
        for consumer in consumers:
            await consumer.stop()
        outcome_notifier.stop()

        _announce(notifications, "system_stopped", "Domain watch engine stopped")
        await notifications.shutdown()
        await http_client.aclose()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
