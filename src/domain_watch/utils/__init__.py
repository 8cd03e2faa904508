# -*- coding: utf-8 -*-
"""Utility modules."""

from domain_watch.utils.dedupe import (
    action_lock_key,
    event_dedup_key,
    month_key,
    rule_event_key,
    sweep_reference,
)
from domain_watch.utils.validation import (
    is_hex_address,
    mask_address,
    normalize_domain,
    same_address,
    short_address,
)

__all__ = [
    "action_lock_key",
    "event_dedup_key",
    "is_hex_address",
    "mask_address",
    "month_key",
    "normalize_domain",
    "rule_event_key",
    "same_address",
    "short_address",
    "sweep_reference",
]
