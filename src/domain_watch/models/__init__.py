# -*- coding: utf-8 -*-
"""Domain models."""

from domain_watch.models.action_execution_record import (
    ActionExecutionRecord,
    ExecutionStatus,
)
from domain_watch.models.alert_delivery import AlertDeliveryRecord, DeliveryStatus
from domain_watch.models.alert_rule import (
    AlertConditions,
    AlertKind,
    AlertRule,
    AuctionConditions,
    ExpiryConditions,
    Platform,
    PriceConditions,
    PriceDirection,
    SaleConditions,
    SaleType,
    TransferConditions,
    TransferDirection,
    parse_alert_conditions,
)
from domain_watch.models.auto_action_rule import (
    ActionConditions,
    ActionKind,
    AutoActionRule,
    BidConditions,
    BuyConditions,
    RenewConditions,
    parse_action_conditions,
)
from domain_watch.models.digest_entry import DigestEntry
from domain_watch.models.domain_event import ChainRef, DomainEvent, EventKind, Urgency
from domain_watch.models.owner_profile import (
    DEFAULT_MONTHLY_CAP,
    OwnerProfile,
    SubscriptionTier,
)
from domain_watch.models.raw_chain_event import RawChainEvent

__all__ = [
    "ActionConditions",
    "ActionExecutionRecord",
    "ActionKind",
    "AlertConditions",
    "AlertDeliveryRecord",
    "AlertKind",
    "AlertRule",
    "AuctionConditions",
    "AutoActionRule",
    "BidConditions",
    "BuyConditions",
    "ChainRef",
    "DEFAULT_MONTHLY_CAP",
    "DeliveryStatus",
    "DigestEntry",
    "DomainEvent",
    "EventKind",
    "ExecutionStatus",
    "ExpiryConditions",
    "OwnerProfile",
    "Platform",
    "PriceConditions",
    "PriceDirection",
    "RawChainEvent",
    "RenewConditions",
    "SaleConditions",
    "SaleType",
    "SubscriptionTier",
    "TransferConditions",
    "TransferDirection",
    "Urgency",
    "parse_action_conditions",
    "parse_alert_conditions",
]
