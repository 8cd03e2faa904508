"""HTTP and collaborator clients."""

from domain_watch.clients.http import AsyncHttpClient
from domain_watch.clients.in_memory import InMemoryEntitlementService
from domain_watch.clients.interfaces import (
    DomainExpiryInfo,
    IDomainInfoService,
    IEntitlementService,
    ITransactionSubmitter,
    SubmissionRequest,
    SubmissionResult,
)
from domain_watch.clients.relayer import RelayerClient

__all__ = [
    "AsyncHttpClient",
    "DomainExpiryInfo",
    "IDomainInfoService",
    "IEntitlementService",
    "ITransactionSubmitter",
    "InMemoryEntitlementService",
    "RelayerClient",
    "SubmissionRequest",
    "SubmissionResult",
]
