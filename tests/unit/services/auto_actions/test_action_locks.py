# -*- coding: utf-8 -*-
"""Unit tests for InFlightLockTable."""

from __future__ import annotations

from datetime import datetime, timedelta

from domain_watch.services.auto_actions import InFlightLockTable


def test_second_acquire_fails_until_release(now_utc: datetime) -> None:
    locks = InFlightLockTable()

    assert locks.try_acquire("r1:web3.ape", now_utc) is True
    assert locks.try_acquire("r1:web3.ape", now_utc) is False
    assert locks.try_acquire("r1:other.ape", now_utc) is True

    locks.release("r1:web3.ape")

    assert locks.try_acquire("r1:web3.ape", now_utc) is True


def test_release_with_old_acquisition_time_keeps_newer_lock(now_utc: datetime) -> None:
    locks = InFlightLockTable()
    locks.try_acquire("k", now_utc)
    locks.clear_stale(now_utc + timedelta(hours=2), timedelta(hours=1))
    later = now_utc + timedelta(hours=2)
    locks.try_acquire("k", later)

    locks.release("k", now_utc)

    assert locks.is_held("k")
    assert locks.acquired_at("k") == later


def test_clear_stale_only_removes_old_locks(now_utc: datetime) -> None:
    locks = InFlightLockTable()
    locks.try_acquire("old", now_utc)
    locks.try_acquire("fresh", now_utc + timedelta(minutes=50))

    cleared = locks.clear_stale(now_utc + timedelta(hours=1, minutes=1), timedelta(hours=1))

    assert cleared == [("old", now_utc)]
    assert not locks.is_held("old")
    assert locks.is_held("fresh")
    assert len(locks) == 1
