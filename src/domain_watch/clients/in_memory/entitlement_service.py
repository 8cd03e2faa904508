# -*- coding: utf-8 -*-
"""In-memory entitlement service (profiles keyed by owner id)."""

from __future__ import annotations

from typing import Optional

from domain_watch.clients.interfaces.entitlement_service import IEntitlementService
from domain_watch.models.owner_profile import OwnerProfile


class InMemoryEntitlementService(IEntitlementService):
    """In-memory implementation of IEntitlementService."""

    def __init__(self, profiles: Optional[list[OwnerProfile]] = None) -> None:
        self._profiles: dict[str, OwnerProfile] = {p.owner_id: p for p in profiles or []}

    async def get_profile(self, owner_id: str) -> Optional[OwnerProfile]:
        return self._profiles.get(owner_id)

    async def save_profile(self, profile: OwnerProfile) -> None:
        """Upsert a profile (by owner_id)."""
        self._profiles[profile.owner_id] = profile
