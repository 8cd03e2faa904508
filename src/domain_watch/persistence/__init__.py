"""Persistence layer (repositories, etc.)."""

from domain_watch.persistence.repositories import (
    IDigestRepository,
    InMemoryDigestRepository,
    InMemoryRuleStore,
    InMemorySeenEventRepository,
    IRuleStore,
    ISeenEventRepository,
)

__all__ = [
    "IDigestRepository",
    "IRuleStore",
    "ISeenEventRepository",
    "InMemoryDigestRepository",
    "InMemoryRuleStore",
    "InMemorySeenEventRepository",
]
