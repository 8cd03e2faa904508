"""Custom exceptions for event ingestion, matching and collaborator access."""

from __future__ import annotations


class DomainWatchError(Exception):
    """Base exception for domain-watch errors."""

    pass


class MissingRequiredConfigError(DomainWatchError):
    """Raised when a required configuration value is missing."""

    pass


class MalformedEventError(DomainWatchError):
    """Raised when a raw chain event cannot be normalized.

    Unknown event name, missing or non-numeric positional fields, or a missing
    transaction hash.
    """

    def __init__(
        self,
        message: str,
        *,
        event_name: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.event_name = event_name
        self.field = field


class MalformedPatternWarning(DomainWatchError):
    """Raised by the pattern compiler when a wildcard pattern is unusable.

    Callers treat the rule as non-matching and log a warning.
    """

    def __init__(self, message: str, *, pattern: str | None = None) -> None:
        super().__init__(message)
        self.pattern = pattern


class CollaboratorUnavailable(DomainWatchError):
    """Raised when an external collaborator (rule store, relayer, entitlements) fails."""

    def __init__(
        self,
        message: str,
        *,
        collaborator: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.collaborator = collaborator
        self.cause = cause


class RelayerAPIError(CollaboratorUnavailable):
    """Raised when a relayer HTTP request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, collaborator="relayer", cause=cause)
        self.url = url
        self.status_code = status_code


class QueueError(DomainWatchError):
    """Event queue failure between ingestion and a consumer."""


class QueueFull(QueueError):
    """A consumer queue is at capacity; ingestion drops the event for that consumer only."""


class QueueEmpty(QueueError):
    pass


class QueueShutdown(QueueError):
    """The queue was shut down. Consumers exit once it has drained."""
