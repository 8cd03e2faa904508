"""structlog / Logfire setup."""

from domain_watch.logging.config import configure_logging

__all__ = ["configure_logging"]
