"""Rule condition matching (pure logic, no I/O)."""

from domain_watch.services.matching.condition_matcher import (
    ACTION_KINDS_BY_EVENT,
    ALERT_KINDS_BY_EVENT,
    ConditionMatcher,
    compile_domain_pattern,
    urgency_at_least,
    within_price_bounds,
)

__all__ = [
    "ACTION_KINDS_BY_EVENT",
    "ALERT_KINDS_BY_EVENT",
    "ConditionMatcher",
    "compile_domain_pattern",
    "urgency_at_least",
    "within_price_bounds",
]
