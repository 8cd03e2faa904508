# -*- coding: utf-8 -*-
"""Collaborator interfaces (abstractions)."""

from domain_watch.clients.interfaces.domain_info_service import (
    DomainExpiryInfo,
    IDomainInfoService,
)
from domain_watch.clients.interfaces.entitlement_service import IEntitlementService
from domain_watch.clients.interfaces.transaction_submitter import (
    ITransactionSubmitter,
    SubmissionRequest,
    SubmissionResult,
)

__all__ = [
    "DomainExpiryInfo",
    "IDomainInfoService",
    "IEntitlementService",
    "ITransactionSubmitter",
    "SubmissionRequest",
    "SubmissionResult",
]
