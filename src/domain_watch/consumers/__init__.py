"""Event ingestion and queue consumers."""

from domain_watch.consumers.domain_event_consumer import DomainEventConsumer, EventHandler
from domain_watch.consumers.ingestion import ChainEventIngestor

__all__ = [
    "ChainEventIngestor",
    "DomainEventConsumer",
    "EventHandler",
]
