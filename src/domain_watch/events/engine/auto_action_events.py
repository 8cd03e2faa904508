# -*- coding: utf-8 -*-
"""Auto-action outcome events (emitted by AutoActionsService).

Handled by AutoActionNotifier to tell the owner what happened.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from bubus import BaseEvent  # type: ignore[import-untyped]


class AutoActionExecutedEvent(BaseEvent[None]):
    """Emitted when an auto-action was submitted and confirmed."""

    rule_id: str
    owner_id: str
    action: str
    """One of: renew, buy, bid."""
    domain: str
    amount: Decimal
    tx_hash: Optional[str] = None


class AutoActionFailedEvent(BaseEvent[None]):
    """Emitted when an auto-action attempt ends without a confirmed transaction."""

    rule_id: str
    owner_id: str
    action: str
    domain: str
    reason: str
    """One of: entitlement_lapsed, not_eligible, stop_limit_exceeded,
    spending_limit_exceeded, submission_failed, submission_timeout, submission_error."""

    amount: Optional[Decimal] = None
    error_message: Optional[str] = None
