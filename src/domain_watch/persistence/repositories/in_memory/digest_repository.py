# -*- coding: utf-8 -*-
"""In-memory digest buffer (keyed by owner id)."""

from __future__ import annotations

from domain_watch.models.digest_entry import DigestEntry
from domain_watch.persistence.repositories.interfaces.digest_repository import (
    IDigestRepository,
)


class InMemoryDigestRepository(IDigestRepository):
    """In-memory implementation of IDigestRepository."""

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, list[DigestEntry]] = {}

    async def add(self, entry: DigestEntry) -> None:
        self._store.setdefault(entry.owner_id, []).append(entry)

    async def pop_all(self) -> dict[str, list[DigestEntry]]:
        pending, self._store = self._store, {}
        return pending

    async def list_by_owner(self, owner_id: str) -> list[DigestEntry]:
        return list(self._store.get(owner_id, []))
