"""Abstract interface for submitting on-chain actions and awaiting confirmation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from domain_watch.models.auto_action_rule import ActionKind


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Confirmation outcome from the submitter."""

    success: bool
    tx_hash: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    """What to submit on behalf of an owner."""

    kind: ActionKind
    domain: str
    amount: Decimal
    credentials_ref: Optional[str] = None
    """Opaque reference the submitter resolves to signing credentials."""
    params: dict[str, Any] = field(default_factory=dict)
    """Kind-specific extras (e.g. renewal_duration_seconds, seller)."""


class ITransactionSubmitter(ABC):
    """Signs, submits and waits for one transaction."""

    @abstractmethod
    async def submit(self, request: SubmissionRequest) -> SubmissionResult:
        """Submit and await confirmation. Transport failures raise CollaboratorUnavailable."""
        ...
