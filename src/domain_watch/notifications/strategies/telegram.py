# -*- coding: utf-8 -*-
"""Telegram delivery for owner alerts (python-telegram-bot).

Each owner is reached on their own chat (the ``telegram`` contact resolved by
NotificationService); messages with no owner contact go to the operator chat
when one is configured. Suggested actions are rendered as inline buttons.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog
from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import BadRequest, Forbidden, RetryAfter, TelegramError
from telegram.request import HTTPXRequest

from domain_watch.notifications.strategies.base import BaseNotificationStrategy
from domain_watch.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from domain_watch.config.config import Settings
    from domain_watch.notifications.types import NotificationStyler

CHANNEL = "telegram"
RATE_WINDOW_SECONDS = 60.0
MAX_BACKOFF_SECONDS = 60.0
# Telegram rejects callback_data longer than 64 bytes.
MAX_CALLBACK_DATA = 64


def build_keyboard(suggested_actions: tuple[dict[str, str], ...]) -> Optional[InlineKeyboardMarkup]:
    """One button per row: ``url`` actions open a link, the rest send ``action:target``."""
    rows: list[list[InlineKeyboardButton]] = []
    for action in suggested_actions:
        text = action.get("text")
        if not text:
            continue
        if action.get("url"):
            rows.append([InlineKeyboardButton(text=text, url=action["url"])])
            continue
        target = action.get("domain") or action.get("txHash") or ""
        data = f"{action.get('action', '')}:{target}".encode()[:MAX_CALLBACK_DATA].decode(errors="ignore")
        rows.append([InlineKeyboardButton(text=text, callback_data=data)])
    return InlineKeyboardMarkup(rows) if rows else None


class TelegramNotifier(BaseNotificationStrategy):
    """Delivers alerts and auto-action outcomes to owners' Telegram chats."""

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._styler = styler

        cfg = self.settings.telegram
        if not cfg.enabled or not cfg.api_key:
            raise ValueError("TelegramNotifier needs TELEGRAM__ENABLED and TELEGRAM__API_KEY")
        self._cfg = cfg
        self._operator_chat: Optional[str] = str(cfg.chat_id) if cfg.chat_id else None
        self._bot: Optional[Bot] = None
        self._sent_at: dict[str, deque[float]] = {}

    @property
    def is_running(self) -> bool:
        return self._bot is not None

    def handles(self, channel: str) -> bool:
        return channel == CHANNEL and self.settings.telegram.enabled

    async def initialize(self) -> None:
        if self._bot is not None:
            self._logger.warning("telegram_already_running")
            return
        self._bot = Bot(
            token=str(self._cfg.api_key),
            request=HTTPXRequest(
                connect_timeout=self._cfg.connect_timeout,
                read_timeout=self._cfg.read_timeout,
                write_timeout=self._cfg.write_timeout,
                pool_timeout=self._cfg.pool_timeout,
            ),
        )

    async def shutdown(self) -> None:
        self._bot = None
        self._sent_at.clear()

    def chat_for(self, message: NotificationMessage) -> Optional[str]:
        """Owner's chat, else the operator chat for owner-less (system) messages."""
        contact = message.recipients.get(CHANNEL)
        if contact:
            return contact
        return self._operator_chat if message.owner_id is None else None

    async def send_notification(self, message: NotificationMessage) -> None:
        if self._bot is None:
            self._logger.warning("telegram_not_running_cannot_send", event_type=message.event_type)
            return
        chat_id = self.chat_for(message)
        if chat_id is None:
            self._logger.warning(
                "telegram_no_chat_for_owner",
                owner_id=message.owner_id,
                event_type=message.event_type,
            )
            return
        await self._deliver(
            chat_id,
            self._styler.render(message),
            build_keyboard(message.suggested_actions),
        )

    def retry_delay(self, exc: TelegramError, attempt: int) -> Optional[float]:
        """Seconds to wait before the next attempt, or None when retrying is pointless."""
        if isinstance(exc, (BadRequest, Forbidden)):
            return None
        if isinstance(exc, RetryAfter):
            wait = exc.retry_after
            return wait.total_seconds() if hasattr(wait, "total_seconds") else float(wait)
        return min(MAX_BACKOFF_SECONDS, self._cfg.backoff_base_seconds * 2 ** (attempt - 1))

    async def _deliver(
        self, chat_id: str, text: str, keyboard: Optional[InlineKeyboardMarkup]
    ) -> None:
        assert self._bot is not None
        await self._throttle(chat_id)
        for attempt in range(1, self._cfg.max_retries + 2):
            try:
                await self._bot.send_message(
                    chat_id=chat_id,
                    text=text,
                    parse_mode="HTML",
                    reply_markup=keyboard,
                )
            except TelegramError as exc:
                delay = self.retry_delay(exc, attempt)
                if delay is None:
                    self._logger.error(
                        "telegram_delivery_rejected",
                        chat_id=chat_id,
                        error_type=type(exc).__name__,
                        error_message=str(exc),
                    )
                    return
                self._logger.warning(
                    "telegram_delivery_retry",
                    chat_id=chat_id,
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self._cfg.max_retries,
                    retry_in_seconds=delay,
                )
                await asyncio.sleep(delay)
                continue
            self._sent_at.setdefault(chat_id, deque()).append(time.monotonic())
            return
        self._logger.error("telegram_retries_exhausted_message_dropped", chat_id=chat_id)

    async def _throttle(self, chat_id: str) -> None:
        """Keep each chat under TELEGRAM__MESSAGES_PER_MINUTE."""
        limit = self._cfg.messages_per_minute
        sent = self._sent_at.get(chat_id)
        if limit <= 0 or not sent:
            return
        now = time.monotonic()
        while sent and now - sent[0] >= RATE_WINDOW_SECONDS:
            sent.popleft()
        if len(sent) >= limit:
            await asyncio.sleep(RATE_WINDOW_SECONDS - (now - sent[0]))
