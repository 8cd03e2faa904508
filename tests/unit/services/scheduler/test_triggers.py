# -*- coding: utf-8 -*-
"""Unit tests for wall-clock triggers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from domain_watch.services.scheduler import DailyTrigger, HourlyTrigger, MonthlyTrigger


def at(month: int, day: int, hour: int, minute: int = 0, year: int = 2026) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


def test_hourly_trigger_is_strictly_after() -> None:
    trigger = HourlyTrigger(minute=15)

    assert trigger.next_after(at(2, 13, 12, 0)) == at(2, 13, 12, 15)
    assert trigger.next_after(at(2, 13, 12, 15)) == at(2, 13, 13, 15)
    assert trigger.next_after(at(2, 13, 23, 30)) == at(2, 14, 0, 15)


def test_daily_trigger_rolls_to_next_day() -> None:
    trigger = DailyTrigger(hour=9)

    assert trigger.next_after(at(2, 13, 8, 59)) == at(2, 13, 9)
    assert trigger.next_after(at(2, 13, 12)) == at(2, 14, 9)


def test_monthly_trigger_rolls_over_year_end() -> None:
    trigger = MonthlyTrigger(day=1)

    assert trigger.next_after(at(2, 13, 12)) == at(3, 1, 0)
    assert trigger.next_after(at(3, 1, 0)) == at(4, 1, 0)
    assert trigger.next_after(at(12, 15, 12)) == at(1, 1, 0, year=2027)


@pytest.mark.parametrize(
    "build",
    [
        lambda: HourlyTrigger(minute=60),
        lambda: DailyTrigger(hour=24),
        lambda: MonthlyTrigger(day=29),
        lambda: MonthlyTrigger(day=1, minute=-1),
    ],
)
def test_out_of_range_fields_rejected(build) -> None:
    with pytest.raises(ValueError):
        build()
