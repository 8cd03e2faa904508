"""Abstract interface for the entitlement service (tiers, caps, contacts)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from domain_watch.models.owner_profile import (
    DEFAULT_MONTHLY_CAP,
    OwnerProfile,
    SubscriptionTier,
)


class IEntitlementService(ABC):
    """Answers what an owner is entitled to right now.

    Implementations raise CollaboratorUnavailable when the backing service fails.
    """

    @abstractmethod
    async def get_profile(self, owner_id: str) -> Optional[OwnerProfile]:
        """Return the owner's profile, or None if the owner is unknown."""
        ...

    async def get_tier(self, owner_id: str) -> SubscriptionTier:
        """Owner's tier; unknown owners are free."""
        profile = await self.get_profile(owner_id)
        return profile.tier if profile is not None else SubscriptionTier.FREE

    async def get_monthly_cap(self, owner_id: str) -> Decimal:
        """Owner's monthly auto-action cap; unknown owners get the default."""
        profile = await self.get_profile(owner_id)
        return profile.monthly_cap if profile is not None else DEFAULT_MONTHLY_CAP
