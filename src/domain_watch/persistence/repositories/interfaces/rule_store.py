"""Abstract interface for the rule store (alert rules, auto-action rules, audit logs)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from domain_watch.models.action_execution_record import ActionExecutionRecord
from domain_watch.models.alert_delivery import AlertDeliveryRecord
from domain_watch.models.alert_rule import AlertKind, AlertRule
from domain_watch.models.auto_action_rule import ActionKind, AutoActionRule


class IRuleStore(ABC):
    """Interface to the store that owns rules and the delivery/action logs.

    Implementations raise CollaboratorUnavailable when the backing store is
    unreachable.
    """

    @abstractmethod
    async def find_alert_rules_by_domain(self, domain: str, kind: AlertKind) -> list[AlertRule]:
        """Active rules of ``kind`` bound to exactly ``domain``."""
        ...

    @abstractmethod
    async def find_alert_rules_by_pattern(self, kind: AlertKind) -> list[AlertRule]:
        """Active rules of ``kind`` with a non-null domain pattern. Pattern test is the caller's job."""
        ...

    @abstractmethod
    async def find_active_alert_rules(self, kind: AlertKind) -> list[AlertRule]:
        """All active rules of ``kind`` (direct and pattern)."""
        ...

    @abstractmethod
    async def get_alert_rule(self, rule_id: str) -> Optional[AlertRule]:
        ...

    @abstractmethod
    async def increment_alert_trigger(self, rule_id: str, at: datetime) -> Optional[AlertRule]:
        """Bump trigger_count and set last_triggered_at. Returns the updated rule or None."""
        ...

    @abstractmethod
    async def append_alert_delivery(self, record: AlertDeliveryRecord) -> None:
        ...

    @abstractmethod
    async def find_auto_action_rules(self, kind: ActionKind) -> list[AutoActionRule]:
        """Active auto-action rules of ``kind``."""
        ...

    @abstractmethod
    async def get_auto_action_rule(self, rule_id: str) -> Optional[AutoActionRule]:
        ...

    @abstractmethod
    async def increment_action_execution(
        self, rule_id: str, at: datetime
    ) -> Optional[AutoActionRule]:
        """Bump execution_count and set last_executed_at. Returns the updated rule or None."""
        ...

    @abstractmethod
    async def append_action_log(self, record: ActionExecutionRecord) -> None:
        ...
