# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/."""

from domain_watch.persistence.repositories.interfaces.digest_repository import (
    IDigestRepository,
)
from domain_watch.persistence.repositories.interfaces.rule_store import IRuleStore
from domain_watch.persistence.repositories.interfaces.seen_event_repository import (
    ISeenEventRepository,
)

__all__ = [
    "IDigestRepository",
    "IRuleStore",
    "ISeenEventRepository",
]
