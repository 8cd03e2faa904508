"""Business aborts raised inside an auto-action execution.

They never escape AutoActionsService.execute: each one becomes a failed
execution record with ``reason`` as its reason code.
"""

from __future__ import annotations

from domain_watch.exceptions.exceptions import DomainWatchError


class ActionAborted(DomainWatchError):
    """Base class for auto-action aborts."""

    reason: str = "aborted"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class EntitlementLapsed(ActionAborted):
    """Owner is no longer premium or no longer active."""

    reason = "entitlement_lapsed"


class NotEligible(ActionAborted):
    """Owner cannot perform this action on the domain (not the owner, is the seller)."""

    reason = "not_eligible"


class StopLimitExceeded(ActionAborted):
    """Current bid already exceeds the rule's stop price."""

    reason = "stop_limit_exceeded"


class SpendingLimitExceeded(ActionAborted):
    """Reserving the amount would push the owner past the monthly cap."""

    reason = "spending_limit_exceeded"
