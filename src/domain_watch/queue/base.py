# -*- coding: utf-8 -*-
"""Queue contract between ChainEventIngestor (producer) and DomainEventConsumer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IAsyncQueue[T](ABC):
    """FIFO of pending events for one consumer.

    Ingestion only ever uses put_nowait, so a slow consumer loses events
    (QueueFull) instead of stalling the other consumers. Implementations raise
    QueueFull, QueueEmpty and QueueShutdown from domain_watch.exceptions.
    """

    @abstractmethod
    async def put(self, item: T) -> None: ...

    @abstractmethod
    def put_nowait(self, item: T) -> None: ...

    @abstractmethod
    async def get(self) -> T:
        """Wait for the next event. QueueShutdown once shut down and drained."""

    @abstractmethod
    def get_nowait(self) -> T: ...

    @abstractmethod
    def task_done(self) -> None: ...

    @abstractmethod
    def shutdown(self, immediate: bool = False) -> None:
        """Refuse new events; queued ones stay readable unless ``immediate``."""

    @abstractmethod
    async def join(self) -> None:
        """Block until every dequeued event was marked task_done()."""

    @abstractmethod
    def qsize(self) -> int: ...
