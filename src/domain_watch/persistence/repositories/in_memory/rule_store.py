# -*- coding: utf-8 -*-
"""In-memory rule store (alert rules and auto-action rules keyed by id)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from domain_watch.models.action_execution_record import ActionExecutionRecord
from domain_watch.models.alert_delivery import AlertDeliveryRecord
from domain_watch.models.alert_rule import AlertKind, AlertRule
from domain_watch.models.auto_action_rule import ActionKind, AutoActionRule
from domain_watch.persistence.repositories.interfaces.rule_store import IRuleStore


class InMemoryRuleStore(IRuleStore):
    """In-memory implementation of IRuleStore.

    Rule CRUD is out of scope for the engine; ``add_*`` exists for wiring and
    tests, ``list_*`` exposes the append-only logs.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._alert_rules: dict[str, AlertRule] = {}
        self._action_rules: dict[str, AutoActionRule] = {}
        self._deliveries: list[AlertDeliveryRecord] = []
        self._action_log: list[ActionExecutionRecord] = []

    async def add_alert_rule(self, rule: AlertRule) -> None:
        """Upsert an alert rule (by id)."""
        self._alert_rules[rule.id] = rule

    async def add_auto_action_rule(self, rule: AutoActionRule) -> None:
        """Upsert an auto-action rule (by id)."""
        self._action_rules[rule.id] = rule

    async def find_alert_rules_by_domain(self, domain: str, kind: AlertKind) -> list[AlertRule]:
        d = domain.strip().lower()
        return [
            r
            for r in self._alert_rules.values()
            if r.active and r.kind == kind and r.domain == d
        ]

    async def find_alert_rules_by_pattern(self, kind: AlertKind) -> list[AlertRule]:
        return [
            r
            for r in self._alert_rules.values()
            if r.active and r.kind == kind and r.domain_pattern is not None
        ]

    async def find_active_alert_rules(self, kind: AlertKind) -> list[AlertRule]:
        return [r for r in self._alert_rules.values() if r.active and r.kind == kind]

    async def get_alert_rule(self, rule_id: str) -> Optional[AlertRule]:
        return self._alert_rules.get(rule_id)

    async def increment_alert_trigger(self, rule_id: str, at: datetime) -> Optional[AlertRule]:
        rule = self._alert_rules.get(rule_id)
        if rule is None:
            return None
        updated = rule.with_triggered(at)
        self._alert_rules[rule_id] = updated
        return updated

    async def append_alert_delivery(self, record: AlertDeliveryRecord) -> None:
        self._deliveries.append(record)

    async def find_auto_action_rules(self, kind: ActionKind) -> list[AutoActionRule]:
        return [r for r in self._action_rules.values() if r.active and r.kind == kind]

    async def get_auto_action_rule(self, rule_id: str) -> Optional[AutoActionRule]:
        return self._action_rules.get(rule_id)

    async def increment_action_execution(
        self, rule_id: str, at: datetime
    ) -> Optional[AutoActionRule]:
        rule = self._action_rules.get(rule_id)
        if rule is None:
            return None
        updated = rule.with_executed(at)
        self._action_rules[rule_id] = updated
        return updated

    async def append_action_log(self, record: ActionExecutionRecord) -> None:
        self._action_log.append(record)

    async def list_alert_deliveries(self) -> list[AlertDeliveryRecord]:
        return list(self._deliveries)

    async def list_action_log(self) -> list[ActionExecutionRecord]:
        return list(self._action_log)
