# -*- coding: utf-8 -*-
"""aiohttp client for the relayer: JSON in and out, bounded retries."""

from __future__ import annotations

import asyncio
import random
import uuid
from typing import Any, Callable, Dict, Optional

import aiohttp
import structlog
from structlog.contextvars import bound_contextvars

from domain_watch.config import Settings
from domain_watch.exceptions import RelayerAPIError

MAX_BACKOFF_SECONDS = 4.0


def _retryable_status(status: int) -> bool:
    return status == 429 or status >= 500


class AsyncHttpClient:
    """JSON HTTP client used by RelayerClient.

    Throttling (429), server errors and transport failures are retried up to
    RELAYER__MAX_RETRIES times; any other 4xx is the relayer refusing the
    request and fails immediately. Owns its aiohttp session unless one is
    passed in.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._relayer = settings.relayer
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and return the decoded JSON body. Raises RelayerAPIError."""
        return await self._request("GET", url, params=params or {})

    async def post(self, url: str, *, json: Optional[Dict[str, Any]] = None) -> Any:
        """POST ``json`` to ``url`` and return the decoded JSON body. Raises RelayerAPIError."""
        return await self._request("POST", url, json=json or {})

    def _session_for_request(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self._relayer.api_key:
                headers["Authorization"] = f"Bearer {self._relayer.api_key}"
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._relayer.timeout_seconds),
                headers=headers,
            )
        return self._session

    @staticmethod
    def backoff(attempt: int, retry_after: Optional[float] = None) -> float:
        """Server-requested delay when given, else jittered exponential backoff."""
        if retry_after:
            return retry_after
        return min(MAX_BACKOFF_SECONDS, 0.25 * 2**attempt) + random.uniform(0.0, 0.15)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        attempts = self._relayer.max_retries
        failure: Optional[Exception] = None
        status: Optional[int] = None

        with bound_contextvars(
            relayer_method=method,
            relayer_url=url,
            relayer_request_id=uuid.uuid4().hex[:12],
        ):
            for attempt in range(attempts):
                retry_after: Optional[float] = None
                try:
                    async with self._session_for_request().request(
                        method, url, params=params, json=json
                    ) as response:
                        if response.status < 400:
                            return await response.json()
                        status = response.status
                        failure = aiohttp.ClientResponseError(
                            response.request_info,
                            response.history,
                            status=status,
                            message=response.reason or "",
                        )
                        if not _retryable_status(status):
                            break
                        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    failure, status = e, None

                delay = self.backoff(attempt, retry_after)
                self._logger.debug(
                    "relayer_request_retry",
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    status_code=status,
                    error_type=type(failure).__name__,
                    retry_in_seconds=round(delay, 3),
                )
                await asyncio.sleep(delay)

            self._logger.error(
                "relayer_request_failed",
                status_code=status,
                error_type=type(failure).__name__ if failure else None,
                error_message=str(failure) if failure else None,
            )
            raise RelayerAPIError(
                f"{method} {url} failed (status={status})",
                url=url,
                status_code=status,
                cause=failure,
            ) from failure


def _parse_retry_after(header: Optional[str]) -> Optional[float]:
    try:
        value = float(header) if header else 0.0
    except ValueError:
        return None
    return value if value > 0 else None
