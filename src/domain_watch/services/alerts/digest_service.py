# -*- coding: utf-8 -*-
"""DigestService: daily summaries for free-tier owners.

Free-tier alerts below critical urgency are recorded here instead of being
pushed in real time; the scheduler calls ``generate`` once a day.
"""

from __future__ import annotations

import structlog
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from domain_watch.models.digest_entry import DigestEntry

if TYPE_CHECKING:
    from domain_watch.models.alert_rule import AlertRule
    from domain_watch.models.domain_event import DomainEvent
    from domain_watch.notifications.types import INotifier
    from domain_watch.persistence.repositories.interfaces.digest_repository import (
        IDigestRepository,
    )

DIGEST_PLATFORM = "both"
MAX_DIGEST_LINES = 20


class DigestService:
    """Buffers free-tier alerts per owner and sends one summary per owner per run."""

    def __init__(
        self,
        digest_repository: "IDigestRepository",
        notifier: "INotifier",
        clock: Optional[Callable[[], datetime]] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._repo = digest_repository
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def record(self, rule: "AlertRule", event: "DomainEvent", message: str) -> DigestEntry:
        """Fold one matched alert into the owner's pending digest."""
        entry = DigestEntry(
            owner_id=rule.owner_id,
            rule_id=rule.id,
            event_kind=event.kind,
            domain=event.domain,
            message=message,
            platform=rule.platform,
            observed_at=self._clock(),
            urgency=event.urgency,
        )
        await self._repo.add(entry)
        self._logger.debug(
            "digest_entry_recorded",
            owner_id=rule.owner_id,
            rule_id=rule.id,
            domain=event.domain,
        )
        return entry

    async def generate(self) -> int:
        """Send one summary per owner with pending entries. Returns summaries sent.

        Entries whose summary could not be handed off are put back for the next run.
        """
        pending = await self._repo.pop_all()
        sent = 0
        for owner_id, entries in pending.items():
            if not entries:
                continue
            ok = False
            try:
                ok = await self._notifier.send(
                    owner_id,
                    DIGEST_PLATFORM,
                    self.summarize(entries),
                    event_type="daily_digest",
                    payload={"count": len(entries)},
                )
            except Exception as e:
                self._logger.warning(
                    "digest_send_error",
                    owner_id=owner_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            if ok:
                sent += 1
                continue
            await self._repo.add_batch(entries)
            self._logger.warning(
                "digest_send_failed_kept",
                owner_id=owner_id,
                entries=len(entries),
            )
        self._logger.info("digest_generation_complete", owners=len(pending), sent=sent)
        return sent

    @staticmethod
    def summarize(entries: list[DigestEntry]) -> str:
        """Plain-text summary: a count line then one bullet per alert (oldest first)."""
        n = len(entries)
        lines = [f"📊 Daily summary: {n} domain alert{'s' if n != 1 else ''}"]
        lines.extend(f"• {e.message}" for e in entries[:MAX_DIGEST_LINES])
        if n > MAX_DIGEST_LINES:
            lines.append(f"…and {n - MAX_DIGEST_LINES} more")
        return "\n".join(lines)
