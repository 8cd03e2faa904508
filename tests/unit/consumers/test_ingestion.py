# -*- coding: utf-8 -*-
"""Unit tests for ChainEventIngestor fan-out."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain_watch.consumers import ChainEventIngestor
from domain_watch.models.domain_event import DomainEvent, EventKind
from domain_watch.queue import InMemoryQueue, QueueMessage
from domain_watch.services.normalization import EventNormalizer

WEI = 10**18


@pytest.fixture
def alert_queue() -> InMemoryQueue[QueueMessage[DomainEvent]]:
    return InMemoryQueue(maxsize=10)


@pytest.fixture
def action_queue() -> InMemoryQueue[QueueMessage[DomainEvent]]:
    return InMemoryQueue(maxsize=1)


@pytest.fixture
def ingestor(
    alert_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    action_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    now_utc: datetime,
) -> ChainEventIngestor:
    return ChainEventIngestor(
        {"alerts": alert_queue, "auto_actions": action_queue},
        normalizer=EventNormalizer(clock=lambda: now_utc),
    )


def listed(tx: str, seller: str, domain: str = "nft.ape") -> dict:
    return {
        "event": "DomainListed",
        "args": [seller, domain, 45 * WEI, 1_700_000_000],
        "blockNumber": 7,
        "transactionHash": tx,
    }


def test_event_reaches_every_queue(
    ingestor: ChainEventIngestor,
    alert_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    action_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    seller_wallet: str,
) -> None:
    event = ingestor.ingest(listed("0x1", seller_wallet))

    assert event is not None and event.kind == EventKind.LISTED
    assert alert_queue.get_nowait().payload is event
    assert action_queue.get_nowait().payload is event


def test_full_queue_only_drops_for_that_consumer(
    ingestor: ChainEventIngestor,
    alert_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    action_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    seller_wallet: str,
) -> None:
    ingestor.ingest(listed("0x1", seller_wallet))
    second = ingestor.ingest(listed("0x2", seller_wallet))

    assert second is not None
    assert alert_queue.qsize() == 2
    assert action_queue.qsize() == 1
    assert ingestor.publish(second) == 1


@pytest.mark.parametrize(
    "raw",
    [
        {"event": "SomethingElse", "args": [], "transactionHash": "0x1"},
        {"event": "DomainListed", "args": ["0xabc", "nft.ape"], "transactionHash": "0x1"},
        {"event": "DomainListed", "args": ["0xabc", "nft.ape", "not-a-number", 1], "transactionHash": "0x1"},
        {"event": "DomainListed", "args": ["0xabc", "nft.ape", 1, 1], "blockNumber": "seven", "transactionHash": "0x1"},
    ],
)
def test_malformed_events_are_dropped(
    ingestor: ChainEventIngestor,
    alert_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    raw: dict,
) -> None:
    assert ingestor.ingest(raw) is None
    assert alert_queue.empty()


def test_shut_down_queue_is_skipped(
    ingestor: ChainEventIngestor,
    alert_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    action_queue: InMemoryQueue[QueueMessage[DomainEvent]],
    seller_wallet: str,
) -> None:
    action_queue.shutdown()

    event = ingestor.ingest(listed("0x1", seller_wallet))

    assert event is not None
    assert alert_queue.qsize() == 1
