"""Wall-clock triggers (UTC) for scheduled jobs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


class Trigger(Protocol):
    def next_after(self, dt: datetime) -> datetime:
        """First fire time strictly after ``dt``."""
        ...


@dataclass(frozen=True, slots=True)
class HourlyTrigger:
    """Fires every hour at ``minute``."""

    minute: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")

    def next_after(self, dt: datetime) -> datetime:
        candidate = dt.replace(minute=self.minute, second=0, microsecond=0)
        if candidate <= dt:
            candidate += timedelta(hours=1)
        return candidate


@dataclass(frozen=True, slots=True)
class DailyTrigger:
    """Fires every day at ``hour:minute``."""

    hour: int = 0
    minute: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError(f"time out of range: {self.hour}:{self.minute}")

    def next_after(self, dt: datetime) -> datetime:
        candidate = dt.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= dt:
            candidate += timedelta(days=1)
        return candidate


@dataclass(frozen=True, slots=True)
class MonthlyTrigger:
    """Fires on ``day`` of every month at ``hour:minute``. Day is limited to 1..28."""

    day: int = 1
    hour: int = 0
    minute: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.day <= 28:
            raise ValueError(f"day must be 1..28, got {self.day}")
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError(f"time out of range: {self.hour}:{self.minute}")

    def next_after(self, dt: datetime) -> datetime:
        candidate = dt.replace(
            day=self.day, hour=self.hour, minute=self.minute, second=0, microsecond=0
        )
        if candidate <= dt:
            year, month = (dt.year + 1, 1) if dt.month == 12 else (dt.year, dt.month + 1)
            candidate = candidate.replace(year=year, month=month)
        return candidate
