"""Notification service: owner-addressed hand-off to the delivery strategies."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Sequence

import structlog

from domain_watch.exceptions import QueueFull, QueueShutdown
from domain_watch.notifications.strategies import BaseNotificationStrategy
from domain_watch.notifications.types import PLATFORM_CHANNELS, NotificationMessage
from domain_watch.queue import InMemoryQueue

if TYPE_CHECKING:
    from domain_watch.clients.interfaces import IEntitlementService


@dataclass
class NotificationService:
    """Owner-facing notification sink.

    ``send`` maps the alert platform to channels, resolves the owner's contact
    on each channel and enqueues without blocking the dispatcher. One worker
    drains the queue and fans each message out to the strategies serving its
    channels; a failing strategy does not stop delivery on the others.
    """

    notifiers: list[BaseNotificationStrategy]
    queue_size: int = 1000
    entitlements: Optional["IEntitlementService"] = None
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _pending: InMemoryQueue[NotificationMessage] | None = field(init=False, default=None)
    _worker: asyncio.Task[None] | None = field(init=False, default=None)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    async def initialize(self) -> None:
        await asyncio.gather(*(n.initialize() for n in self.notifiers))
        if not self.notifiers:
            self._logger.info("notification_init_no_notifiers")
            return
        self._pending = InMemoryQueue(maxsize=self.queue_size)
        self._worker = asyncio.create_task(self._drain(self._pending))
        self._logger.debug(
            "notification_init_complete",
            notifiers=[type(n).__name__ for n in self.notifiers],
            queue_size=self.queue_size,
        )

    async def shutdown(self) -> None:
        """Deliver what is already queued, then stop the strategies."""
        pending, worker = self._pending, self._worker
        self._pending = self._worker = None
        if pending is not None:
            pending.shutdown()
            await pending.join()
        if worker is not None:
            await worker
        for notifier in self.notifiers:
            await notifier.shutdown()
        self._logger.debug("notification_shutdown_complete")

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
        """Hand off a message for ``owner_id`` on ``platform``.

        Returns False when no strategy serves the platform or the queue is
        full. Entitlement lookup errors propagate to the caller.
        """
        channels = PLATFORM_CHANNELS.get(platform, (platform,))
        if not self._served(channels):
            self._logger.warning(
                "notification_no_channel_for_platform",
                owner_id=owner_id,
                platform=platform,
            )
            return False
        return self.notify(
            NotificationMessage(
                event_type=event_type,
                message=message,
                payload=payload,
                owner_id=owner_id,
                channels=channels,
                recipients=await self._recipients(owner_id, channels),
                suggested_actions=tuple(suggested_actions),
            )
        )

    def notify(self, message: NotificationMessage) -> bool:
        """Enqueue without waiting. False when dropped."""
        if self._pending is None:
            if not self.notifiers:
                return False
            raise RuntimeError("NotificationService not initialized")
        try:
            self._pending.put_nowait(message)
        except (QueueFull, QueueShutdown) as e:
            self._logger.warning(
                "notification_dropped",
                event_type=message.event_type,
                owner_id=message.owner_id,
                reason=type(e).__name__,
            )
            return False
        return True

    def _served(self, channels: tuple[str, ...]) -> bool:
        return any(n.handles(c) for n in self.notifiers for c in channels)

    async def _recipients(self, owner_id: str, channels: tuple[str, ...]) -> dict[str, str]:
        if self.entitlements is None:
            return {}
        profile = await self.entitlements.get_profile(owner_id)
        if profile is None:
            return {}
        return {c: contact for c in channels if (contact := profile.contact_for(c))}

    def _targets(self, message: NotificationMessage) -> list[BaseNotificationStrategy]:
        if not message.channels:
            return list(self.notifiers)
        return [n for n in self.notifiers if any(n.handles(c) for c in message.channels)]

    async def _drain(self, pending: InMemoryQueue[NotificationMessage]) -> None:
        while True:
            try:
                message = await pending.get()
            except QueueShutdown:
                return
            try:
                targets = self._targets(message)
                results = await asyncio.gather(
                    *(t.send_notification(message) for t in targets),
                    return_exceptions=True,
                )
                for target, result in zip(targets, results):
                    if isinstance(result, Exception):
                        self._logger.error(
                            "notification_delivery_failed",
                            strategy=type(target).__name__,
                            event_type=message.event_type,
                            owner_id=message.owner_id,
                            error=str(result),
                        )
            finally:
                pending.task_done()
