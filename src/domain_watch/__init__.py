"""Domain watch: on-chain domain lifecycle alerts and auto-actions."""

from domain_watch.config import get_settings
from domain_watch.consumers import ChainEventIngestor
from domain_watch.DI import Container
from domain_watch.services import AlertService, AutoActionsService

__version__ = "0.1.0"
__all__ = [
    "AlertService",
    "AutoActionsService",
    "ChainEventIngestor",
    "Container",
    "get_settings",
]
