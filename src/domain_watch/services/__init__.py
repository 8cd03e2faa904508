# -*- coding: utf-8 -*-
"""Application services."""

from domain_watch.services.alerts import AlertFormatter, AlertService, DigestService, DispatchOutcome
from domain_watch.services.auto_actions import AutoActionsService, InFlightLockTable, SpendingLedger
from domain_watch.services.matching import ConditionMatcher
from domain_watch.services.normalization import EventNormalizer
from domain_watch.services.notifications import AutoActionNotifier
from domain_watch.services.scheduler import ReconciliationJobs, ScheduledJob, Scheduler

__all__ = [
    "AlertFormatter",
    "AlertService",
    "AutoActionNotifier",
    "AutoActionsService",
    "ConditionMatcher",
    "DigestService",
    "DispatchOutcome",
    "EventNormalizer",
    "InFlightLockTable",
    "ReconciliationJobs",
    "ScheduledJob",
    "Scheduler",
    "SpendingLedger",
]
