# -*- coding: utf-8 -*-
"""HTML rendering of notifications for Telegram (and the console mirror)."""

from __future__ import annotations

from html import escape
from typing import Any, Callable

from domain_watch.notifications.types import NotificationMessage, NotificationStyler

RULE = "─" * 12

HEADINGS: dict[str, tuple[str, str]] = {
    "daily_digest": ("📊", "Daily Domain Summary"),
    "auto_action_executed": ("✅", "Auto-Action Executed"),
    "auto_action_failed": ("❌", "Auto-Action Failed"),
    "system_started": ("▶️", "System Started"),
    "system_stopped": ("⏹️", "System Stopped"),
}

# (label, payload key, formatter) rows shown under an auto-action outcome.
AUTO_ACTION_ROWS: tuple[tuple[str, str, Callable[[Any], str]], ...] = (
    ("🌐 Domain", "domain", str),
    ("⚙️ Action", "action", str),
    ("💵 Amount", "amount", lambda v: f"{v} USDC"),
    ("🔗 Transaction", "tx_hash", str),
    ("❓ Reason", "reason", str),
)


def heading(event_type: str) -> str:
    emoji, title = HEADINGS.get(event_type, ("ℹ️", event_type.replace("_", " ").title()))
    return f"{emoji} <b>{escape(title)}</b>"


def _label(label: str) -> str:
    emoji, _, name = label.partition(" ")
    return f"{emoji} <b>{name}:</b>" if name else f"<b>{label}:</b>"


class EventNotificationStyler(NotificationStyler):
    """Alerts are already worded by the dispatcher; other event types get a heading and details."""

    def render(self, message: NotificationMessage) -> str:
        if message.event_type == "domain_alert":
            parts = [escape(message.message), self._suggestions(message)]
        elif message.event_type == "daily_digest":
            count = (message.payload or {}).get("count")
            title = heading(message.event_type) + (f" ({count})" if count else "")
            parts = [title, RULE, escape(message.message)]
        elif message.event_type in ("auto_action_executed", "auto_action_failed"):
            parts = [heading(message.event_type), "", escape(message.message), self._details(message)]
        else:
            parts = [heading(message.event_type), escape(message.message), self._payload(message)]
        return "\n".join(p for p in parts if p is not None).strip()

    @staticmethod
    def _suggestions(message: NotificationMessage) -> str:
        texts = [a["text"] for a in message.suggested_actions if a.get("text")]
        if not texts:
            return ""
        return f"\n👉 <b>Suggested</b>\n{RULE}\n{escape(' · '.join(texts))}"

    @staticmethod
    def _details(message: NotificationMessage) -> str:
        payload = message.payload or {}
        rows = [
            f"{_label(label)} {escape(fmt(payload[key]))}"
            for label, key, fmt in AUTO_ACTION_ROWS
            if payload.get(key)
        ]
        if not rows:
            return ""
        return "\n".join(["", f"📋 <b>Details</b>\n{RULE}", *rows])

    @staticmethod
    def _payload(message: NotificationMessage) -> str:
        payload = message.payload or {}
        return "\n".join(
            f"<b>{escape(key)}:</b> {escape(str(payload[key]))}"
            for key in sorted(payload)
            if payload[key] is not None
        )
