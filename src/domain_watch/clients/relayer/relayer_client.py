# -*- coding: utf-8 -*-
"""Relayer client: submits auto-action transactions and answers domain expiry lookups."""

from __future__ import annotations

import structlog
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Callable, Optional, cast
from urllib.parse import quote
from structlog.contextvars import bound_contextvars

from domain_watch.clients.interfaces.domain_info_service import (
    DomainExpiryInfo,
    IDomainInfoService,
)
from domain_watch.clients.interfaces.transaction_submitter import (
    ITransactionSubmitter,
    SubmissionRequest,
    SubmissionResult,
)
from domain_watch.clients.relayer.schema import (
    DomainExpirySchema,
    TransactionRequestSchema,
    TransactionResultSchema,
)
from domain_watch.config import Settings
from domain_watch.exceptions import RelayerAPIError

if TYPE_CHECKING:
    from domain_watch.clients.http import AsyncHttpClient


class RelayerClient(ITransactionSubmitter, IDomainInfoService):
    """HTTP client for the transaction relayer.

    The relayer holds signing credentials (resolved from ``credentials_ref``),
    submits the transaction and answers once it is confirmed or rejected.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.relayer.base_url).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        return self._settings.relayer.base_url.rstrip("/")

    async def submit(self, request: SubmissionRequest) -> SubmissionResult:
        """POST /transactions and map the confirmation to SubmissionResult.

        Raises:
            RelayerAPIError: transport failure after retries.
        """
        body: TransactionRequestSchema = {
            "action": request.kind.value,
            "domain": request.domain,
            "amount": str(request.amount),
            "params": dict(request.params),
        }
        if request.credentials_ref:
            body["credentialsRef"] = request.credentials_ref

        with bound_contextvars(
            relayer_action=request.kind.value,
            relayer_domain=request.domain,
        ):
            data = await self._http.post(f"{self._base_url()}/transactions", json=dict(body))
            if not isinstance(data, dict):
                self._logger.warning(
                    "relayer_submit_non_dict",
                    relayer_response_type=type(data).__name__,
                )
                return SubmissionResult(success=False, error="unexpected relayer response")
            result = cast(TransactionResultSchema, data)
            success = bool(result.get("success", False))
            self._logger.debug(
                "relayer_submit_result",
                relayer_success=success,
                relayer_tx_hash=result.get("transactionHash"),
            )
            return SubmissionResult(
                success=success,
                tx_hash=result.get("transactionHash"),
                error=None if success else (result.get("error") or "transaction rejected"),
            )

    async def get_expiry_info(self, domain: str) -> Optional[DomainExpiryInfo]:
        """GET /domains/{domain}/expiry. Unknown domains (404) return None."""
        url = f"{self._base_url()}/domains/{quote(domain, safe='')}/expiry"
        with bound_contextvars(relayer_domain=domain):
            try:
                data = await self._http.get(url)
            except RelayerAPIError as e:
                if e.status_code == 404:
                    return None
                raise
            if not isinstance(data, dict):
                self._logger.warning(
                    "relayer_expiry_non_dict",
                    relayer_response_type=type(data).__name__,
                )
                return None
            info = cast(DomainExpirySchema, data)
            expiry = info.get("expiryTime")
            if not isinstance(expiry, (int, float)) or isinstance(expiry, bool):
                self._logger.warning("relayer_expiry_missing_time")
                return None
            return DomainExpiryInfo(
                domain=str(info.get("domain") or domain).lower(),
                expiry_time=datetime.fromtimestamp(int(expiry), UTC),
                owner=info.get("owner"),
            )
