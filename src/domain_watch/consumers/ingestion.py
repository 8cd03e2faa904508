# -*- coding: utf-8 -*-
"""ChainEventIngestor: raw chain events in, normalized DomainEvents out to every consumer queue."""

from __future__ import annotations

import structlog
from typing import Any, Callable, Mapping, Optional

from domain_watch.exceptions import MalformedEventError, QueueFull, QueueShutdown
from domain_watch.models.domain_event import DomainEvent
from domain_watch.models.raw_chain_event import RawChainEvent
from domain_watch.queue import IAsyncQueue, QueueMessage
from domain_watch.services.normalization import EventNormalizer


class ChainEventIngestor:
    """Normalizes raw events and fans them out, one queue per consumer.

    A full queue drops the event for that consumer only; the other consumer
    still receives it.
    """

    def __init__(
        self,
        queues: Mapping[str, IAsyncQueue[QueueMessage[DomainEvent]]],
        normalizer: Optional[EventNormalizer] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._queues = dict(queues)
        self._normalizer = normalizer or EventNormalizer()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def ingest(self, raw: RawChainEvent | Mapping[str, Any]) -> Optional[DomainEvent]:
        """Normalize and enqueue. Returns the DomainEvent, or None if it was malformed."""
        try:
            if not isinstance(raw, RawChainEvent):
                raw = RawChainEvent.from_dict(dict(raw))
            event = self._normalizer.normalize(raw)
        except MalformedEventError as e:
            self._logger.warning(
                "chain_event_malformed_dropped",
                event_name=e.event_name,
                field=e.field,
                error=str(e),
            )
            return None
        except (KeyError, TypeError, ValueError) as e:
            self._logger.warning(
                "chain_event_malformed_dropped",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        self.publish(event)
        return event

    def publish(self, event: DomainEvent) -> int:
        """Put an already-normalized event on every consumer queue. Returns queues reached."""
        delivered = 0
        for name, queue in self._queues.items():
            try:
                queue.put_nowait(QueueMessage.create(event))
                delivered += 1
            except QueueFull:
                self._logger.warning(
                    "domain_event_queue_full_dropped",
                    consumer=name,
                    dedup_key=event.dedup_key,
                    queue_size=queue.qsize(),
                )
            except QueueShutdown:
                self._logger.debug(
                    "domain_event_queue_shutdown_dropped",
                    consumer=name,
                    dedup_key=event.dedup_key,
                )
        self._logger.debug(
            "domain_event_ingested",
            dedup_key=event.dedup_key,
            kind=event.kind.value,
            domain=event.domain,
            queues=delivered,
        )
        return delivered
