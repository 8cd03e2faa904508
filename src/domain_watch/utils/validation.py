"""Validation helpers for wallet addresses and domain names."""

from __future__ import annotations

from typing import Any


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x wallet address (42 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if len(s) != 42:
        return False
    if not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def same_address(a: str | None, b: str | None) -> bool:
    """Case-insensitive address equality; False when either side is missing."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def normalize_domain(domain: Any) -> str:
    """Return the domain stripped and lower-cased; raise ValueError if empty."""
    if not isinstance(domain, str) or not domain.strip():
        raise ValueError("domain must be a non-empty string")
    return domain.strip().lower()


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"


def short_address(addr: str | None) -> str:
    """Return the address prefix used in user-facing messages (e.g. 0xabcd...)."""
    if not addr:
        return "unknown"
    return f"{addr[:6]}..."
