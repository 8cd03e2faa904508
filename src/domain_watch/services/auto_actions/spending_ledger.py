# -*- coding: utf-8 -*-
"""SpendingLedger: per-owner, per-month auto-action spend with reservations.

All operations are synchronous, so a check-and-reserve can never interleave
with another coroutine (or with the monthly reset) on the event loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from domain_watch.exceptions.action_exceptions import SpendingLimitExceeded

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Reservation:
    """Amount held against (owner, month) until committed or released."""

    id: str
    owner_id: str
    month: str
    amount: Decimal


class SpendingLedger:
    """Committed and reserved spend keyed by (owner_id, ``YYYY-MM``).

    Invariant: committed + reserved <= cap at reservation time for every bucket.
    """

    def __init__(self) -> None:
        self._committed: dict[tuple[str, str], Decimal] = {}
        self._reservations: dict[str, Reservation] = {}

    def committed(self, owner_id: str, month: str) -> Decimal:
        return self._committed.get((owner_id, month), ZERO)

    def reserved(self, owner_id: str, month: str) -> Decimal:
        return sum(
            (r.amount for r in self._reservations.values() if r.owner_id == owner_id and r.month == month),
            ZERO,
        )

    def headroom(self, owner_id: str, month: str, cap: Decimal) -> Decimal:
        return cap - self.committed(owner_id, month) - self.reserved(owner_id, month)

    def reserve(self, owner_id: str, month: str, amount: Decimal, cap: Decimal) -> Reservation:
        """Hold ``amount`` if committed + reserved + amount <= cap.

        Raises:
            SpendingLimitExceeded: the reservation would overshoot ``cap``.
        """
        if amount < 0:
            raise ValueError("amount must be non-negative")
        used = self.committed(owner_id, month) + self.reserved(owner_id, month)
        if used + amount > cap:
            raise SpendingLimitExceeded(
                f"monthly cap {cap} exceeded: {used} used, {amount} requested"
            )
        reservation = Reservation(id=uuid4().hex, owner_id=owner_id, month=month, amount=amount)
        self._reservations[reservation.id] = reservation
        return reservation

    def commit(self, reservation: Reservation, amount: Optional[Decimal] = None) -> Decimal:
        """Turn a reservation into committed spend. Returns the new committed total."""
        self._reservations.pop(reservation.id, None)
        key = (reservation.owner_id, reservation.month)
        total = self._committed.get(key, ZERO) + (amount if amount is not None else reservation.amount)
        self._committed[key] = total
        return total

    def release(self, reservation: Reservation) -> None:
        """Drop a reservation without spending it. Idempotent."""
        self._reservations.pop(reservation.id, None)

    def record(self, owner_id: str, month: str, amount: Decimal) -> None:
        """Add committed spend directly (e.g. restoring state)."""
        key = (owner_id, month)
        self._committed[key] = self._committed.get(key, ZERO) + amount

    def reset_before(self, month: str) -> int:
        """Drop committed buckets for months before ``month``. Returns buckets removed.

        Reservations are left alone: they belong to in-flight actions.
        """
        stale = [k for k in self._committed if k[1] < month]
        for k in stale:
            del self._committed[k]
        return len(stale)
