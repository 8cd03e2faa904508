"""Deduplication and lock keys for events and auto-actions."""

from __future__ import annotations

from datetime import datetime


def event_dedup_key(transaction_hash: str, kind: str) -> str:
    """Return the dedup key of a normalized event: ``<tx>:<kind>``."""
    return f"{transaction_hash}:{kind}"


def sweep_reference(domain: str, days_until_expiry: int) -> str:
    """Synthetic chain reference for sweep-generated expiry events.

    Stable for a given domain and day count so one sweep per day count is
    deduplicated like a real event.
    """
    return f"sweep:{domain}:{days_until_expiry}d"


def rule_event_key(rule_id: str, dedup_key: str) -> str:
    """Per-rule dedup key used for synthetic dispatches."""
    return f"{rule_id}|{dedup_key}"


def action_lock_key(rule_id: str, domain: str) -> str:
    """In-flight lock key for an auto-action: ``<rule_id>:<domain>``."""
    return f"{rule_id}:{domain}"


def month_key(at: datetime) -> str:
    """Spending ledger month bucket (``YYYY-MM``)."""
    return f"{at.year:04d}-{at.month:02d}"
