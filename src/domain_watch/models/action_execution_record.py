"""ActionExecutionRecord: append-only audit entry for one auto-action attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain_watch.models.auto_action_rule import ActionKind


class ExecutionStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ActionExecutionRecord:
    """Outcome of one execution attempt. Never updated after append."""

    rule_id: str
    owner_id: str
    kind: ActionKind
    domain: str
    amount: Decimal
    status: ExecutionStatus
    created_at: datetime
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None
    """Machine-readable abort code (e.g. spending_limit_exceeded, submission_failed)."""

    @classmethod
    def success(
        cls,
        rule_id: str,
        owner_id: str,
        kind: ActionKind,
        domain: str,
        amount: Decimal,
        tx_hash: Optional[str],
        *,
        at: Optional[datetime] = None,
    ) -> ActionExecutionRecord:
        return cls(
            rule_id=rule_id,
            owner_id=owner_id,
            kind=kind,
            domain=domain,
            amount=amount,
            status=ExecutionStatus.SUCCESS,
            tx_hash=tx_hash,
            created_at=at or datetime.now(UTC),
        )

    @classmethod
    def failure(
        cls,
        rule_id: str,
        owner_id: str,
        kind: ActionKind,
        domain: str,
        *,
        error: str,
        reason: str,
        amount: Decimal = Decimal("0"),
        at: Optional[datetime] = None,
    ) -> ActionExecutionRecord:
        return cls(
            rule_id=rule_id,
            owner_id=owner_id,
            kind=kind,
            domain=domain,
            amount=amount,
            status=ExecutionStatus.FAILED,
            error=error,
            reason=reason,
            created_at=at or datetime.now(UTC),
        )
