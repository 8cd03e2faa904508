"""In-memory repository implementations."""

from domain_watch.persistence.repositories.in_memory.digest_repository import (
    InMemoryDigestRepository,
)
from domain_watch.persistence.repositories.in_memory.rule_store import InMemoryRuleStore
from domain_watch.persistence.repositories.in_memory.seen_event_repository import (
    InMemorySeenEventRepository,
)

__all__ = [
    "InMemoryDigestRepository",
    "InMemoryRuleStore",
    "InMemorySeenEventRepository",
]
