"""Notification message types and the notifier sink contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

# Alert platform -> delivery channels.
PLATFORM_CHANNELS: dict[str, tuple[str, ...]] = {
    "telegram": ("telegram",),
    "twitter": ("twitter",),
    "both": ("telegram", "twitter"),
    "web": ("web",),
}


@dataclass(frozen=True)
class NotificationMessage:
    """Message to be sent via one or more notification channels."""

    event_type: str
    message: str
    title: str | None = None
    payload: dict[str, Any] | None = None
    owner_id: str | None = None
    channels: tuple[str, ...] = ()
    """Delivery channels requested for this message (empty: operator broadcast)."""
    recipients: dict[str, str] = field(default_factory=dict)
    """Channel -> recipient id resolved from the owner's contacts."""
    suggested_actions: tuple[dict[str, str], ...] = ()
    """Buttons offered with the message ({"text", "action", "domain", ...})."""


class NotificationStyler(Protocol):
    """Render a message into a formatted string for delivery."""

    def render(self, message: NotificationMessage) -> str:
        """Return a formatted message for the given message."""
        ...


class INotifier(Protocol):
    """Sink the alert dispatcher and digest service hand messages to."""

    async def send(
        self,
        owner_id: str,
        platform: str,
        message: str,
        suggested_actions: Sequence[dict[str, str]] = (),
        *,
        event_type: str = "domain_alert",
        payload: dict[str, Any] | None = None,
    ) -> bool:
        """Hand off a message for ``owner_id``. True if accepted for delivery."""
        ...
