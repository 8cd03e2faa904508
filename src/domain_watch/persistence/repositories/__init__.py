# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from domain_watch.persistence.repositories.interfaces import (
    IDigestRepository,
    IRuleStore,
    ISeenEventRepository,
)
from domain_watch.persistence.repositories.in_memory import (
    InMemoryDigestRepository,
    InMemoryRuleStore,
    InMemorySeenEventRepository,
)

__all__ = [
    "IDigestRepository",
    "IRuleStore",
    "ISeenEventRepository",
    "InMemoryDigestRepository",
    "InMemoryRuleStore",
    "InMemorySeenEventRepository",
]
