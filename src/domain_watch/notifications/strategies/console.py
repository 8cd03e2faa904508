# -*- coding: utf-8 -*-
"""Console mirror of every outgoing notification (local runs and debugging)."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, TextIO

from domain_watch.notifications.strategies.base import BaseNotificationStrategy
from domain_watch.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from domain_watch.config import Settings
    from domain_watch.notifications.types import NotificationStyler


class ConsoleNotifier(BaseNotificationStrategy):
    """Writes each message, tagged with owner and channels, to ``stream`` (stdout)."""

    def __init__(
        self,
        settings: "Settings",
        styler: Optional["NotificationStyler"] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        super().__init__(settings)
        self._styler = styler
        self._stream = stream
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def handles(self, channel: str) -> bool:
        return self.settings.console.enabled

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running:
            return
        body = self._styler.render(message) if self._styler else message.message
        tag = "/".join(message.channels) or "broadcast"
        header = f"[{message.owner_id or 'system'} -> {tag}]"
        print(header, body, sep="\n", file=self._stream or sys.stdout, flush=True)
