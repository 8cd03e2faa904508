# -*- coding: utf-8 -*-
"""Contract for a delivery channel (Telegram, console, ...)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from domain_watch.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from domain_watch.config import Settings


class BaseNotificationStrategy(ABC):
    """A delivery channel driven by NotificationService.

    The service only hands a message to strategies whose ``handles`` accepts
    one of the message's channels. Strategies own their retry policy and must
    not raise for delivery failures the owner cannot fix.
    """

    def __init__(self, settings: "Settings"):
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool: ...

    @abstractmethod
    def handles(self, channel: str) -> bool:
        """True if this strategy delivers on ``channel`` ("telegram", "twitter", "web")."""

    @abstractmethod
    async def initialize(self) -> None: ...

    @abstractmethod
    async def shutdown(self) -> None: ...

    @abstractmethod
    async def send_notification(self, message: NotificationMessage) -> None: ...
