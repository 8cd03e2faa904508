"""Auto-action engine: execution, spending ledger and in-flight locks."""

from domain_watch.services.auto_actions.action_locks import InFlightLockTable
from domain_watch.services.auto_actions.auto_actions_service import AutoActionsService
from domain_watch.services.auto_actions.spending_ledger import Reservation, SpendingLedger

__all__ = [
    "AutoActionsService",
    "InFlightLockTable",
    "Reservation",
    "SpendingLedger",
]
