# -*- coding: utf-8 -*-
"""Unit tests for DomainEvent helpers."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from domain_watch.models.domain_event import DomainEvent, EventKind, Urgency


@pytest.mark.parametrize(
    ("days", "expected"),
    [(0, Urgency.CRITICAL), (1, Urgency.CRITICAL), (2, Urgency.HIGH), (3, Urgency.HIGH), (4, Urgency.MEDIUM), (30, Urgency.MEDIUM)],
)
def test_urgency_from_days(days: int, expected: Urgency) -> None:
    assert Urgency.from_days(days) == expected


def test_urgency_ranks_are_ordered() -> None:
    ranks = [u.rank for u in (Urgency.LOW, Urgency.MEDIUM, Urgency.HIGH, Urgency.CRITICAL)]
    assert ranks == sorted(ranks)


def test_dedup_key_combines_tx_hash_and_kind(event_factory: Callable[..., DomainEvent]) -> None:
    event = event_factory(EventKind.LISTED, tx="0xfeed")

    assert event.dedup_key == "0xfeed:listed"
    assert event.urgency_rank == Urgency.LOW.rank
    assert not event.is_synthetic


def test_sweep_reference_marks_event_synthetic(event_factory: Callable[..., DomainEvent]) -> None:
    event = event_factory(EventKind.EXPIRING, tx="sweep:web3.ape:3d")

    assert event.is_synthetic
