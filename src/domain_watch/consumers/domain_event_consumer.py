# -*- coding: utf-8 -*-
"""Consumer that drains one DomainEvent queue into a handler (alerts or auto-actions).

Same start/stop model as the queue itself: the loop blocks on queue.get() and
exits on QueueShutdown (after queue.shutdown() and drain) or on task cancel.
Up to ``max_concurrency`` events are handled at once; a failing handler is
logged and never stops the loop.
"""

from __future__ import annotations

import asyncio
import structlog
from types import TracebackType
from typing import Any, Awaitable, Callable, Optional, Type

from domain_watch.exceptions import QueueShutdown
from domain_watch.models.domain_event import DomainEvent
from domain_watch.queue import IAsyncQueue, QueueMessage

EventHandler = Callable[[DomainEvent], Awaitable[Any]]


class DomainEventConsumer:
    """Consumes DomainEvent messages and delegates each to ``handler``.

    Run via start()/stop() or ``async with consumer``.
    """

    def __init__(
        self,
        name: str,
        queue: IAsyncQueue[QueueMessage[DomainEvent]],
        handler: EventHandler,
        max_concurrency: int = 16,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the consumer.

        Args:
            name: Consumer name for logs ("alerts", "auto_actions").
            queue: This consumer's own queue (filled by ChainEventIngestor).
            handler: Coroutine run once per event, e.g. AlertService.process_event.
            max_concurrency: Max events handled at the same time.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._name = name
        self._queue = queue
        self._handler = handler
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._running = False
        self._lock = asyncio.Lock()
        self._worker_task: Optional[asyncio.Task[None]] = None
        self._handler_tasks: set[asyncio.Task[None]] = set()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._running

    async def __aenter__(self) -> DomainEventConsumer:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> bool:
        await self.stop()
        return False

    async def start(self) -> None:
        """Start the consume loop in a background task. Idempotent."""
        async with self._lock:
            if self._running:
                return
            self._running = True
            self._worker_task = asyncio.create_task(self._consume_loop())

    async def stop(self) -> None:
        """Cancel the loop, then wait for in-flight handlers. Idempotent."""
        async with self._lock:
            task = self._worker_task
            self._running = False
            self._worker_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._handler_tasks:
            await asyncio.gather(*self._handler_tasks, return_exceptions=True)

    async def wait_closed(self) -> None:
        """Wait for the loop to exit on its own (queue shut down and drained)."""
        task = self._worker_task
        if task is not None:
            await asyncio.shield(task)
        if self._handler_tasks:
            await asyncio.gather(*self._handler_tasks, return_exceptions=True)

    async def _consume_loop(self) -> None:
        self._logger.debug("domain_event_consumer_started", consumer=self._name)
        try:
            while True:
                message = await self._queue.get()
                await self._semaphore.acquire()
                task = asyncio.create_task(self._handle(message))
                self._handler_tasks.add(task)
                task.add_done_callback(self._handler_tasks.discard)
        except QueueShutdown:
            self._logger.info(
                "domain_event_consumer_stopped",
                consumer=self._name,
                reason="queue_shutdown",
            )
        except asyncio.CancelledError:
            self._logger.debug("domain_event_consumer_cancelled", consumer=self._name)
            raise
        finally:
            self._running = False

    async def _handle(self, message: QueueMessage[DomainEvent]) -> None:
        event = message.payload
        try:
            await self._handler(event)
        except Exception as e:
            self._logger.exception(
                "domain_event_handler_failed",
                consumer=self._name,
                dedup_key=event.dedup_key,
                kind=event.kind.value,
                error=str(e),
            )
        finally:
            self._semaphore.release()
            self._queue.task_done()
            self._logger.debug(
                "domain_event_handled",
                consumer=self._name,
                dedup_key=event.dedup_key,
                queue_latency_seconds=round(message.age_seconds(), 3),
            )
