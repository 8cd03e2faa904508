# -*- coding: utf-8 -*-
"""Event bus and event types."""

from domain_watch.events.bus import get_event_bus
from domain_watch.events.engine import (
    AlertDispatchedEvent,
    AutoActionExecutedEvent,
    AutoActionFailedEvent,
)

__all__ = [
    "AlertDispatchedEvent",
    "AutoActionExecutedEvent",
    "AutoActionFailedEvent",
    "get_event_bus",
]
