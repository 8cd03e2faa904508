# -*- coding: utf-8 -*-
"""Engine events (alerts and auto-actions)."""

from domain_watch.events.engine.alert_events import AlertDispatchedEvent
from domain_watch.events.engine.auto_action_events import (
    AutoActionExecutedEvent,
    AutoActionFailedEvent,
)

__all__ = ["AlertDispatchedEvent", "AutoActionExecutedEvent", "AutoActionFailedEvent"]
