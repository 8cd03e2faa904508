"""Relayer API request/response types. Keys match the wire format (camelCase)."""

from __future__ import annotations

from typing import Any, Literal, TypedDict


class TransactionRequestSchema(TypedDict, total=False):
    """POST /transactions body."""

    action: Literal["renew", "buy", "bid"]
    domain: str
    amount: str
    """Decimal USDC amount as a string (no float rounding)."""
    credentialsRef: str
    params: dict[str, Any]


class TransactionResultSchema(TypedDict, total=False):
    """POST /transactions response (after confirmation)."""

    success: bool
    transactionHash: str
    error: str


class DomainExpirySchema(TypedDict, total=False):
    """GET /domains/{domain}/expiry response."""

    domain: str
    expiryTime: int
    """Unix seconds."""
    owner: str
