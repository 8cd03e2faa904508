# -*- coding: utf-8 -*-
"""Unit tests for address and domain validation helpers."""

from __future__ import annotations

import pytest

from domain_watch.utils.validation import (
    is_hex_address,
    mask_address,
    normalize_domain,
    same_address,
    short_address,
)


def test_is_hex_address(owner_wallet: str) -> None:
    assert is_hex_address(owner_wallet)
    assert not is_hex_address("0x123")
    assert not is_hex_address("zz" + owner_wallet[2:])
    assert not is_hex_address(None)


def test_same_address_ignores_case(owner_wallet: str) -> None:
    assert same_address(owner_wallet.upper().replace("0X", "0x"), owner_wallet)
    assert not same_address(owner_wallet, None)
    assert not same_address(None, None)


def test_normalize_domain() -> None:
    assert normalize_domain(" Web3.APE ") == "web3.ape"
    with pytest.raises(ValueError):
        normalize_domain("   ")


def test_mask_and_short_address(owner_wallet: str) -> None:
    assert mask_address(owner_wallet) == "0x2d27...7706"
    assert mask_address("0x1") == "***"
    assert short_address(owner_wallet) == "0x2d27..."
    assert short_address(None) == "unknown"
