# -*- coding: utf-8 -*-
"""AutoActionNotifier: tells owners how their auto-actions went.

Listens to AutoActionExecutedEvent and AutoActionFailedEvent on the bus and
hands a message to the NotificationService for the rule's owner.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from domain_watch.events.engine.auto_action_events import (
    AutoActionExecutedEvent,
    AutoActionFailedEvent,
)
from domain_watch.services.alerts.alert_formatter import format_price

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from domain_watch.notifications.types import INotifier

NOTIFY_PLATFORM = "both"

_REASON_LABELS = {
    "entitlement_lapsed": "Premium subscription required",
    "not_eligible": "Not eligible for this action",
    "stop_limit_exceeded": "Bid would exceed your stop price",
    "spending_limit_exceeded": "Monthly spending limit reached",
    "submission_failed": "Transaction failed",
    "submission_timeout": "Transaction not confirmed in time",
    "submission_error": "Transaction could not be submitted",
}

_ACTION_VERBS = {
    "renew": "Renewed",
    "buy": "Bought",
    "bid": "Placed a bid on",
}


def reason_label(reason: str) -> str:
    """Human-readable text for an abort / failure reason code."""
    return _REASON_LABELS.get(reason, reason.replace("_", " ").capitalize())


class AutoActionNotifier:
    """Subscribes to auto-action outcome events and notifies the owner."""

    def __init__(
        self,
        notifier: "INotifier",
        event_bus: Any,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._notifier = notifier
        self._event_bus: "EventBus" = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to AutoActionExecutedEvent and AutoActionFailedEvent."""
        self._event_bus.on(AutoActionExecutedEvent, self._on_executed)
        self._event_bus.on(AutoActionFailedEvent, self._on_failed)
        self._logger.debug("auto_action_notifier_started")

    def stop(self) -> None:
        """Remove this notifier's handlers from the bus."""
        handlers = getattr(self._event_bus, "handlers", {})
        for event_cls, handler in (
            (AutoActionExecutedEvent, self._on_executed),
            (AutoActionFailedEvent, self._on_failed),
        ):
            key = event_cls.__name__
            if key in handlers:
                handlers[key] = [h for h in handlers[key] if h != handler]
        self._logger.debug("auto_action_notifier_stopped")

    async def _on_executed(self, event: AutoActionExecutedEvent) -> None:
        verb = _ACTION_VERBS.get(event.action, event.action.capitalize())
        message = f'{verb} "{event.domain}" for {format_price(Decimal(event.amount))} USDC'
        await self._send(
            event.owner_id,
            "auto_action_executed",
            message,
            {
                "rule_id": event.rule_id,
                "domain": event.domain,
                "action": event.action,
                "amount": str(event.amount),
                "tx_hash": event.tx_hash,
            },
        )

    async def _on_failed(self, event: AutoActionFailedEvent) -> None:
        label = reason_label(event.reason)
        message = f'Auto-{event.action} for "{event.domain}" did not run: {label}'
        payload: dict[str, Any] = {
            "rule_id": event.rule_id,
            "domain": event.domain,
            "action": event.action,
            "reason": label,
        }
        if event.amount is not None:
            payload["amount"] = str(event.amount)
        if event.error_message:
            payload["error_message"] = event.error_message
        await self._send(event.owner_id, "auto_action_failed", message, payload)

    async def _send(
        self, owner_id: str, event_type: str, message: str, payload: dict[str, Any]
    ) -> None:
        try:
            ok = await self._notifier.send(
                owner_id,
                NOTIFY_PLATFORM,
                message,
                event_type=event_type,
                payload=payload,
            )
        except Exception as e:
            self._logger.warning(
                "auto_action_notification_error",
                owner_id=owner_id,
                notification_event_type=event_type,
                error=str(e),
            )
            return
        self._logger.debug(
            "auto_action_notified",
            owner_id=owner_id,
            notification_event_type=event_type,
            domain=payload.get("domain"),
            accepted=ok,
        )
