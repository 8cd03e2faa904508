# -*- coding: utf-8 -*-
"""Settings read from the environment (and .env) with pydantic-settings.

Every section is addressed as <SECTION>__<FIELD>, e.g. ENGINE__DEDUP_WINDOW_SIZE=5000
or TELEGRAM__API_KEY=... .
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
RotateWhen = Literal["S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"]


class _Section(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")


class AppSettings(_Section):
    """Identity attached to every log line."""

    app_name: str = "domain-watch"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(_Section):
    """Where structlog output goes and at which level."""

    console_level: LogLevel = "INFO"
    file_level: LogLevel = "INFO"
    logfire_level: LogLevel = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/domain_watch.log"
    log_file_when: RotateWhen = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Console only; file output is always JSON.
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class RelayerSettings(_Section):
    """Relayer HTTP API: submits renew/buy/bid transactions and answers expiry lookups."""

    base_url: str = "http://localhost:8545"
    api_key: Optional[str] = Field(default=None, description="Sent as a Bearer token when set.")
    timeout_seconds: float = Field(default=15.0, ge=1.0, le=120.0)
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Attempts per request for 429, 5xx and transport errors.",
    )


class EngineSettings(_Section):
    """Alert dispatcher and auto-action engine tuning."""

    dedup_window_size: int = Field(
        default=1000,
        ge=10,
        le=1_000_000,
        description="Dedup keys remembered per dispatcher; the oldest are forgotten first.",
    )
    event_queue_size: int = Field(default=1000, ge=1, le=100_000)
    max_concurrent_events: int = Field(default=16, ge=1, le=1000)
    submission_timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        le=3600.0,
        description="An unconfirmed transaction is failed after this long.",
    )
    lock_stale_seconds: float = Field(
        default=3600.0,
        ge=60.0,
        description="Age after which the scheduler clears an in-flight action lock.",
    )
    default_monthly_cap: Decimal = Field(
        default=Decimal("200"),
        ge=Decimal("0"),
        description="Monthly auto-action spend (USDC) for owners without their own cap.",
    )


class SchedulerSettings(_Section):
    """Reconciliation job times, UTC."""

    enabled: bool = True
    expiry_sweep_minute: int = Field(default=0, ge=0, le=59)
    stale_lock_cleanup_minute: int = Field(default=0, ge=0, le=59)
    digest_hour: int = Field(default=9, ge=0, le=23)
    ledger_reset_hour: int = Field(default=0, ge=0, le=23)


class TelegramNotificationSettings(_Section):
    """Telegram bot delivery. ``chat_id`` receives system messages and is not an owner fallback."""

    enabled: bool = False
    api_key: Optional[str] = None
    chat_id: Optional[str] = None
    messages_per_minute: int = Field(default=30, ge=1, le=120, description="Per chat.")
    max_retries: int = Field(default=5, ge=0, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(_Section):
    """Mirror every notification to stdout."""

    enabled: bool = True


class NotificationSettings(_Section):
    queue_size: int = Field(default=1000, ge=1, le=100_000)


class Settings(BaseSettings):
    """All configuration sections; nothing else in the package reads the environment."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    relayer: RelayerSettings = Field(default_factory=RelayerSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)


@lru_cache
def get_settings() -> Settings:
    """Settings for this process, loaded once."""
    return Settings()
