# -*- coding: utf-8 -*-
"""asyncio.Queue-backed IAsyncQueue."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Iterator

from domain_watch.exceptions import QueueEmpty, QueueFull, QueueShutdown
from domain_watch.queue.base import IAsyncQueue


@contextmanager
def _translated() -> Iterator[None]:
    """Re-raise asyncio queue errors as the package's own."""
    try:
        yield
    except asyncio.QueueShutDown as e:
        raise QueueShutdown from e
    except asyncio.QueueFull as e:
        raise QueueFull from e
    except asyncio.QueueEmpty as e:
        raise QueueEmpty from e


class InMemoryQueue[T](IAsyncQueue[T]):
    """Process-local bounded queue (maxsize=0 means unbounded)."""

    def __init__(self, maxsize: int = 0) -> None:
        self._inner: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)

    async def put(self, item: T) -> None:
        with _translated():
            await self._inner.put(item)

    def put_nowait(self, item: T) -> None:
        with _translated():
            self._inner.put_nowait(item)

    async def get(self) -> T:
        with _translated():
            return await self._inner.get()

    def get_nowait(self) -> T:
        with _translated():
            return self._inner.get_nowait()

    def task_done(self) -> None:
        self._inner.task_done()

    def shutdown(self, immediate: bool = False) -> None:
        self._inner.shutdown(immediate)

    async def join(self) -> None:
        await self._inner.join()

    def qsize(self) -> int:
        return self._inner.qsize()
