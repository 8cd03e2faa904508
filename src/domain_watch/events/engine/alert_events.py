# -*- coding: utf-8 -*-
"""Alert dispatch events (emitted by AlertService)."""

from __future__ import annotations

from typing import Optional

from bubus import BaseEvent  # type: ignore[import-untyped]


class AlertDispatchedEvent(BaseEvent[None]):
    """Emitted after an alert was handed off to the notifier successfully."""

    rule_id: str
    owner_id: str
    event_kind: str
    domain: str
    platform: str
    message: str
    suggested_actions: list[dict[str, str]] = []
    urgency: Optional[str] = None
