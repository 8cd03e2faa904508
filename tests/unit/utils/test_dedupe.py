# -*- coding: utf-8 -*-
"""Unit tests for dedupe and lock key helpers."""

from __future__ import annotations

from datetime import UTC, datetime

from domain_watch.utils.dedupe import (
    action_lock_key,
    event_dedup_key,
    month_key,
    rule_event_key,
    sweep_reference,
)


def test_event_dedup_key() -> None:
    assert event_dedup_key("0xabc", "listed") == "0xabc:listed"


def test_sweep_reference_is_stable_per_day_count() -> None:
    assert sweep_reference("web3.ape", 3) == "sweep:web3.ape:3d"
    assert sweep_reference("web3.ape", 3) == sweep_reference("web3.ape", 3)
    assert sweep_reference("web3.ape", 2) != sweep_reference("web3.ape", 3)


def test_rule_event_key() -> None:
    assert rule_event_key("rule-1", "0xabc:expiring") == "rule-1|0xabc:expiring"


def test_action_lock_key() -> None:
    assert action_lock_key("rule-1", "nft.ape") == "rule-1:nft.ape"


def test_month_key_zero_pads() -> None:
    assert month_key(datetime(2026, 3, 1, tzinfo=UTC)) == "2026-03"
    assert month_key(datetime(2026, 12, 31, 23, 59, tzinfo=UTC)) == "2026-12"
