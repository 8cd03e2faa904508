# -*- coding: utf-8 -*-
"""Bounded async queues between ingestion and the event consumers."""

from domain_watch.queue.base import IAsyncQueue
from domain_watch.queue.in_memory_queue import InMemoryQueue
from domain_watch.queue.messages import QueueMessage

__all__ = [
    "IAsyncQueue",
    "InMemoryQueue",
    "QueueMessage",
]
