"""Event-bus listeners that notify owners."""

from domain_watch.services.notifications.auto_action_notifier import (
    AutoActionNotifier,
    reason_label,
)

__all__ = ["AutoActionNotifier", "reason_label"]
