"""Notification subsystem."""

from domain_watch.notifications.notification_manager import (
    NotificationService,
)
from domain_watch.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from domain_watch.notifications.types import (
    PLATFORM_CHANNELS,
    INotifier,
    NotificationMessage,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "INotifier",
    "NotificationMessage",
    "NotificationService",
    "NotificationStyler",
    "PLATFORM_CHANNELS",
    "TelegramNotifier",
]
