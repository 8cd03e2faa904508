# -*- coding: utf-8 -*-
"""structlog on top of stdlib handlers, with optional Logfire export."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

import logfire
import structlog
from structlog.types import EventDict, Processor

from domain_watch.config import LoggingSettings, Settings, get_settings

LOGFIRE_LEVELS: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}


def _with_level(handler: logging.Handler, level: str) -> logging.Handler:
    handler.setLevel(logging.getLevelName(level))
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _handlers(log: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if log.log_to_console:
        handlers.append(_with_level(logging.StreamHandler(), log.console_level))
    if log.log_to_file:
        path = Path(log.log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = TimedRotatingFileHandler(
            path,
            when=log.log_file_when,
            interval=log.log_file_interval,
            backupCount=log.log_file_backup_count,
            encoding="utf-8",
            utc=log.log_file_utc,
        )
        handlers.append(_with_level(rotating, log.file_level))
    return handlers


def _identity(settings: Settings) -> Processor:
    """Stamp every event with the logger name and which deployment emitted it."""
    identity = {"app_name": settings.app.app_name, "environment": settings.app.environment}
    if settings.app.service_name:
        identity["service_name"] = settings.app.service_name
    if settings.app.service_version:
        identity["service_version"] = settings.app.service_version

    def add_identity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        inner = getattr(logger, "_logger", logger)
        event_dict.setdefault("logger", getattr(inner, "name", "") or "")
        event_dict.update(identity)
        return event_dict

    return add_identity


def _processors(settings: Settings, render: bool) -> list[Processor]:
    log = settings.logging
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _identity(settings),
    ]
    if log.logfire_enabled:
        chain.append(logfire.StructlogProcessor())  # type: ignore[arg-type]
    if render:
        # Files are always JSON so they stay machine-readable.
        json_out = log.json_format or log.log_to_file
        chain.append(
            structlog.processors.JSONRenderer() if json_out else structlog.dev.ConsoleRenderer()
        )
    return chain


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib handlers per LOGGING__* settings."""
    settings = settings or get_settings()
    log = settings.logging

    handlers = _handlers(log)
    if handlers:
        logging.basicConfig(level=min(h.level for h in handlers), handlers=handlers, force=True)

    if log.logfire_enabled:
        logfire.configure(
            token=log.logfire_token,
            service_name=settings.app.service_name or settings.app.app_name,
            service_version=settings.app.service_version,
            min_level=LOGFIRE_LEVELS[log.logfire_level],  # type: ignore[arg-type]
            environment=settings.app.environment,
        )

    structlog.configure(
        processors=_processors(settings, render=bool(handlers)),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
