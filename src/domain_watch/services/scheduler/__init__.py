"""Periodic jobs: scheduler, triggers and reconciliation job bodies."""

from domain_watch.services.scheduler.reconciliation_jobs import (
    DIGEST_GENERATION,
    EXPIRY_SWEEP,
    LEDGER_RESET,
    STALE_LOCK_CLEANUP,
    ReconciliationJobs,
)
from domain_watch.services.scheduler.scheduler import JobFunc, ScheduledJob, Scheduler
from domain_watch.services.scheduler.triggers import (
    DailyTrigger,
    HourlyTrigger,
    MonthlyTrigger,
    Trigger,
)

__all__ = [
    "DIGEST_GENERATION",
    "EXPIRY_SWEEP",
    "LEDGER_RESET",
    "STALE_LOCK_CLEANUP",
    "DailyTrigger",
    "HourlyTrigger",
    "JobFunc",
    "MonthlyTrigger",
    "ReconciliationJobs",
    "ScheduledJob",
    "Scheduler",
    "Trigger",
]
