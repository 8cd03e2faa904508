"""Notification strategies."""

from domain_watch.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from domain_watch.notifications.strategies.console import ConsoleNotifier
from domain_watch.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
]
