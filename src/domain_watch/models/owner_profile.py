# -*- coding: utf-8 -*-
"""OwnerProfile: what the entitlement service knows about a rule owner."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_MONTHLY_CAP = Decimal("200")


class SubscriptionTier(str, Enum):
    """Subscription tiers. Free gets digests, premium unlocks auto-actions."""

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"


@dataclass(frozen=True, slots=True)
class OwnerProfile:
    owner_id: str
    tier: SubscriptionTier = SubscriptionTier.FREE
    monthly_cap: Decimal = DEFAULT_MONTHLY_CAP
    """Auto-action spending ceiling per calendar month (USDC)."""
    wallet_address: Optional[str] = None
    is_active: bool = True
    contacts: dict[str, str] = field(default_factory=dict)
    """Platform name -> recipient id (e.g. {"telegram": "12345"})."""
    credentials_ref: Optional[str] = None
    """Opaque reference the transaction submitter resolves to signing credentials."""

    @property
    def is_premium(self) -> bool:
        return self.tier == SubscriptionTier.PREMIUM

    def contact_for(self, platform: str) -> Optional[str]:
        return self.contacts.get(platform)
