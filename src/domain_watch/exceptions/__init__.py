"""Exceptions subpackage."""

from domain_watch.exceptions.action_exceptions import (
    ActionAborted,
    EntitlementLapsed,
    NotEligible,
    SpendingLimitExceeded,
    StopLimitExceeded,
)
from domain_watch.exceptions.exceptions import (
    CollaboratorUnavailable,
    DomainWatchError,
    MalformedEventError,
    MalformedPatternWarning,
    MissingRequiredConfigError,
    QueueEmpty,
    QueueError,
    QueueFull,
    QueueShutdown,
    RelayerAPIError,
)

__all__ = [
    "ActionAborted",
    "CollaboratorUnavailable",
    "DomainWatchError",
    "EntitlementLapsed",
    "MalformedEventError",
    "MalformedPatternWarning",
    "MissingRequiredConfigError",
    "NotEligible",
    "QueueEmpty",
    "QueueError",
    "QueueFull",
    "QueueShutdown",
    "RelayerAPIError",
    "SpendingLimitExceeded",
    "StopLimitExceeded",
]
