# -*- coding: utf-8 -*-
"""Unit tests for NotificationService hand-off and delivery."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.models.owner_profile import OwnerProfile
from domain_watch.notifications.notification_manager import NotificationService
from domain_watch.notifications.strategies import BaseNotificationStrategy
from domain_watch.notifications.types import NotificationMessage


class RecordingStrategy(BaseNotificationStrategy):
    def __init__(self, channel: str) -> None:
        super().__init__(settings=None)  # type: ignore[arg-type]
        self.channel = channel
        self.running = False
        self.delivered: list[NotificationMessage] = []

    @property
    def is_running(self) -> bool:
        return self.running

    def handles(self, channel: str) -> bool:
        return channel == self.channel

    async def initialize(self) -> None:
        self.running = True

    async def shutdown(self) -> None:
        self.running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        self.delivered.append(message)


@pytest.fixture
def telegram() -> RecordingStrategy:
    return RecordingStrategy("telegram")


async def test_send_resolves_recipients_and_delivers(
    telegram: RecordingStrategy,
    profile_factory: Callable[..., OwnerProfile],
) -> None:
    service = NotificationService(
        notifiers=[telegram],
        entitlements=InMemoryEntitlementService([profile_factory()]),
    )
    await service.initialize()

    accepted = await service.send(
        "owner-1",
        "both",
        "hello",
        [{"text": "Renew Now", "action": "renew", "domain": "web3.ape"}],
        payload={"domain": "web3.ape"},
    )
    await service.shutdown()

    assert accepted is True
    [message] = telegram.delivered
    assert message.channels == ("telegram", "twitter")
    assert message.recipients == {"telegram": "1001"}
    assert message.suggested_actions[0]["action"] == "renew"
    assert message.event_type == "domain_alert"
    assert telegram.running is False


async def test_send_without_channel_for_platform_returns_false(telegram: RecordingStrategy) -> None:
    service = NotificationService(notifiers=[telegram])
    await service.initialize()

    assert await service.send("owner-1", "twitter", "hello") is False

    await service.shutdown()
    assert telegram.delivered == []


async def test_strategy_only_gets_messages_for_its_channels() -> None:
    telegram = RecordingStrategy("telegram")
    web = RecordingStrategy("web")
    service = NotificationService(notifiers=[telegram, web])
    await service.initialize()

    assert await service.send("owner-1", "web", "dashboard update") is True
    await service.shutdown()

    assert telegram.delivered == []
    assert [m.message for m in web.delivered] == ["dashboard update"]


async def test_notify_without_notifiers_returns_false() -> None:
    service = NotificationService(notifiers=[])
    await service.initialize()

    assert service.notify(NotificationMessage(event_type="system_started", message="up")) is False


def test_notify_before_initialize_raises(telegram: RecordingStrategy) -> None:
    service = NotificationService(notifiers=[telegram])

    with pytest.raises(RuntimeError):
        service.notify(NotificationMessage(event_type="system_started", message="up"))
