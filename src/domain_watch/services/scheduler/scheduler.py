# -*- coding: utf-8 -*-
"""Scheduler: one asyncio loop per periodic job.

Each loop sleeps until its trigger's next fire time and launches a run. A job
whose previous run is still active is skipped for that tick, never run
re-entrantly. Jobs are independent: a failing or slow job does not delay the
others.
"""

from __future__ import annotations

import asyncio
import structlog
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, Iterable, Optional

from domain_watch.services.scheduler.triggers import Trigger

JobFunc = Callable[[], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ScheduledJob:
    name: str
    trigger: Trigger
    func: JobFunc


class Scheduler:
    """Runs ScheduledJobs on their triggers until stop()."""

    def __init__(
        self,
        jobs: Iterable[ScheduledJob] = (),
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            jobs: Initial jobs; names must be unique.
            clock: Optional UTC clock (tests).
            sleep: Sleep coroutine (tests can pass a fake).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._jobs: dict[str, ScheduledJob] = {}
        self._clock = clock or (lambda: datetime.now(UTC))
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._loops: dict[str, asyncio.Task[None]] = {}
        self._active: dict[str, asyncio.Task[None]] = {}
        for job in jobs:
            self.add_job(job)

    @property
    def job_names(self) -> list[str]:
        return list(self._jobs)

    @property
    def is_running(self) -> bool:
        return bool(self._loops)

    def add_job(self, job: ScheduledJob) -> None:
        if job.name in self._jobs:
            raise ValueError(f"duplicate job name: {job.name}")
        self._jobs[job.name] = job
        if self._loops:
            self._loops[job.name] = asyncio.create_task(self._job_loop(job))

    def is_job_active(self, name: str) -> bool:
        task = self._active.get(name)
        return task is not None and not task.done()

    def start(self) -> None:
        """Start one loop per job. Idempotent."""
        if self._loops:
            return
        for job in self._jobs.values():
            self._loops[job.name] = asyncio.create_task(self._job_loop(job))
        self._logger.info("scheduler_started", jobs=list(self._jobs))

    async def stop(self) -> None:
        """Cancel the loops and let runs already in progress finish."""
        loops = list(self._loops.values())
        self._loops.clear()
        for task in loops:
            task.cancel()
        await asyncio.gather(*loops, return_exceptions=True)
        active = [t for t in self._active.values() if not t.done()]
        if active:
            await asyncio.gather(*active, return_exceptions=True)
        self._logger.info("scheduler_stopped")

    async def run_now(self, name: str) -> bool:
        """Run ``name`` immediately. Returns False if a run of it is already active.

        Raises:
            KeyError: Unknown job name.
        """
        job = self._jobs[name]
        task = self._launch(job)
        if task is None:
            return False
        await task
        return True

    async def _job_loop(self, job: ScheduledJob) -> None:
        fired: Optional[datetime] = None
        while True:
            now = self._clock()
            # Sleep is monotonic and may end just before fire_at on the wall clock.
            fire_at = job.trigger.next_after(now if fired is None else max(now, fired))
            fired = fire_at
            await self._sleep(max((fire_at - now).total_seconds(), 0.0))
            self._launch(job)

    def _launch(self, job: ScheduledJob) -> Optional[asyncio.Task[None]]:
        if self.is_job_active(job.name):
            self._logger.warning("scheduled_job_skipped_still_running", job=job.name)
            return None
        task = asyncio.create_task(self._run(job))
        self._active[job.name] = task
        return task

    async def _run(self, job: ScheduledJob) -> None:
        started = self._clock()
        self._logger.debug("scheduled_job_started", job=job.name)
        try:
            result = await job.func()
        except Exception as e:
            self._logger.exception("scheduled_job_failed", job=job.name, error=str(e))
            return
        self._logger.info(
            "scheduled_job_completed",
            job=job.name,
            result=result if isinstance(result, (int, str)) else None,
            duration_seconds=round((self._clock() - started).total_seconds(), 3),
        )
