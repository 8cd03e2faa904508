"""Configuration subpackage."""

from domain_watch.config.config import (
    AppSettings,
    ConsoleNotificationSettings,
    EngineSettings,
    LoggingSettings,
    NotificationSettings,
    RelayerSettings,
    SchedulerSettings,
    Settings,
    TelegramNotificationSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "ConsoleNotificationSettings",
    "EngineSettings",
    "LoggingSettings",
    "NotificationSettings",
    "RelayerSettings",
    "SchedulerSettings",
    "Settings",
    "TelegramNotificationSettings",
    "get_settings",
]
