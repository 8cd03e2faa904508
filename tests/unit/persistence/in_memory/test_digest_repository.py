# -*- coding: utf-8 -*-
"""Unit tests for InMemoryDigestRepository."""

from __future__ import annotations

from datetime import datetime

from domain_watch.models.alert_rule import Platform
from domain_watch.models.digest_entry import DigestEntry
from domain_watch.models.domain_event import EventKind
from domain_watch.persistence.repositories.in_memory import InMemoryDigestRepository


def _entry(owner_id: str, domain: str, at: datetime) -> DigestEntry:
    return DigestEntry(
        owner_id=owner_id,
        rule_id="r1",
        event_kind=EventKind.LISTED,
        domain=domain,
        message=f"listed {domain}",
        platform=Platform.TELEGRAM,
        observed_at=at,
    )


async def test_pop_all_groups_by_owner_and_clears(digest_repo: InMemoryDigestRepository, now_utc: datetime) -> None:
    await digest_repo.add(_entry("o1", "a.ape", now_utc))
    await digest_repo.add(_entry("o1", "b.ape", now_utc))
    await digest_repo.add(_entry("o2", "c.ape", now_utc))

    pending = await digest_repo.pop_all()

    assert [e.domain for e in pending["o1"]] == ["a.ape", "b.ape"]
    assert [e.domain for e in pending["o2"]] == ["c.ape"]
    assert await digest_repo.pop_all() == {}


async def test_add_batch_restores_entries(digest_repo: InMemoryDigestRepository, now_utc: datetime) -> None:
    await digest_repo.add_batch([_entry("o1", "a.ape", now_utc), _entry("o1", "b.ape", now_utc)])

    assert len(await digest_repo.list_by_owner("o1")) == 2
