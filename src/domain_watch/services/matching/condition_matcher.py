# -*- coding: utf-8 -*-
"""ConditionMatcher: pure evaluation of rule conditions against a DomainEvent.

No I/O. One check per rule kind, each ``(conditions, event) -> bool``.
Wildcard domain patterns use ``*`` for any run of characters, are anchored and
case-insensitive, and match in linear time (no regex backtracking); a malformed pattern never raises, it simply does not match
(and is logged as a warning).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional

import structlog

from domain_watch.exceptions.exceptions import MalformedPatternWarning
from domain_watch.models.alert_rule import (
    AlertKind,
    AlertRule,
    AuctionConditions,
    ExpiryConditions,
    PriceConditions,
    PriceDirection,
    SaleConditions,
    SaleType,
    TransferConditions,
    TransferDirection,
)
from domain_watch.models.auto_action_rule import (
    ActionKind,
    AutoActionRule,
    BidConditions,
    BuyConditions,
    RenewConditions,
)
from domain_watch.models.domain_event import DomainEvent, EventKind, Urgency
from domain_watch.utils.validation import same_address

MAX_PATTERN_LENGTH = 253
_BAD_PATTERN_CHARS = re.compile(r"[\s\x00-\x1f]")

# Which alert kinds / action kinds an event kind can trigger.
ALERT_KINDS_BY_EVENT: dict[EventKind, tuple[AlertKind, ...]] = {
    EventKind.EXPIRING: (AlertKind.EXPIRY,),
    EventKind.LISTED: (AlertKind.SALE, AlertKind.PRICE),
    EventKind.SOLD: (AlertKind.SALE,),
    EventKind.PRICE_CHANGED: (AlertKind.SALE, AlertKind.PRICE),
    EventKind.TRANSFERRED: (AlertKind.TRANSFER,),
    EventKind.AUCTION_UPDATED: (AlertKind.AUCTION,),
    EventKind.AUTO_ACTION_RESULT: (),
}

ACTION_KINDS_BY_EVENT: dict[EventKind, tuple[ActionKind, ...]] = {
    EventKind.EXPIRING: (ActionKind.RENEW,),
    EventKind.LISTED: (ActionKind.BUY,),
    EventKind.AUCTION_UPDATED: (ActionKind.BID,),
}

SALE_TYPE_BY_EVENT: dict[EventKind, SaleType] = {
    EventKind.LISTED: SaleType.LISTING,
    EventKind.SOLD: SaleType.SALE,
    EventKind.PRICE_CHANGED: SaleType.PRICE_CHANGE,
}


@dataclass(frozen=True, slots=True)
class DomainPattern:
    """A ``*`` wildcard pattern split into its literal, case-folded segments."""

    segments: tuple[str, ...]

    def matches(self, domain: str) -> bool:
        name = domain.casefold()
        if len(self.segments) == 1:
            return name == self.segments[0]
        head, *middle, tail = self.segments
        if len(name) < len(head) + len(tail):
            return False
        if not (name.startswith(head) and name.endswith(tail)):
            return False
        # Leftmost placement of each inner segment leaves the most room for the rest.
        pos, end = len(head), len(name) - len(tail)
        for segment in middle:
            found = name.find(segment, pos, end)
            if found < 0:
                return False
            pos = found + len(segment)
        return True


@lru_cache(maxsize=1024)
def compile_domain_pattern(pattern: str) -> DomainPattern:
    """Parse a ``*`` wildcard pattern into an anchored, case-insensitive DomainPattern.

    Raises:
        MalformedPatternWarning: empty, too long, or contains whitespace/control chars.
    """
    if not isinstance(pattern, str):
        raise MalformedPatternWarning("pattern must be a string", pattern=repr(pattern))
    p = pattern.strip()
    if not p:
        raise MalformedPatternWarning("empty pattern", pattern=pattern)
    if len(p) > MAX_PATTERN_LENGTH:
        raise MalformedPatternWarning("pattern too long", pattern=pattern)
    if _BAD_PATTERN_CHARS.search(p):
        raise MalformedPatternWarning("pattern contains whitespace or control characters", pattern=pattern)
    return DomainPattern(tuple(segment.casefold() for segment in p.split("*")))


def within_price_bounds(
    price: Optional[Decimal],
    min_price: Optional[Decimal],
    max_price: Optional[Decimal],
) -> bool:
    """Inclusive ``min <= price <= max``; both bounds optional. Missing price fails if any bound is set."""
    if min_price is None and max_price is None:
        return True
    if price is None:
        return False
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    return True


def urgency_at_least(event: DomainEvent, min_urgency: Optional[Urgency]) -> bool:
    if min_urgency is None:
        return True
    return event.urgency_rank >= min_urgency.rank


class ConditionMatcher:
    """Evaluates alert and auto-action rule conditions.

    Stateless apart from the logger used to report malformed patterns.
    """

    def __init__(
        self,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._logger = get_logger(logger_name or self.__class__.__name__)

    # Patterns

    def matches_pattern(self, pattern: str, domain: str) -> bool:
        """True if ``domain`` matches the wildcard ``pattern``; malformed patterns never match."""
        try:
            compiled = compile_domain_pattern(pattern)
        except MalformedPatternWarning as e:
            self._logger.warning("malformed_domain_pattern", pattern=pattern, error=str(e))
            return False
        return compiled.matches(domain)

    def matches_any_pattern(self, patterns: Iterable[str], domain: str) -> bool:
        return any(self.matches_pattern(p, domain) for p in patterns)

    def in_scope(
        self,
        domain: str,
        target_domains: Optional[tuple[str, ...]],
        domain_patterns: Optional[tuple[str, ...]],
    ) -> bool:
        """Both filters apply when set; an unset filter passes."""
        if target_domains and domain.lower() not in target_domains:
            return False
        if domain_patterns and not self.matches_any_pattern(domain_patterns, domain):
            return False
        return True

    def rule_targets_domain(self, rule: AlertRule, domain: str) -> bool:
        """Exact-domain or pattern test for an alert rule."""
        if rule.domain is not None:
            return rule.domain == domain.lower()
        if rule.domain_pattern is not None:
            return self.matches_pattern(rule.domain_pattern, domain)
        return False

    # Alert rules

    def match_expiry(self, conditions: ExpiryConditions, event: DomainEvent) -> bool:
        if event.kind != EventKind.EXPIRING:
            return False
        if conditions.days_threshold is not None:
            if event.days_until_expiry is None or event.days_until_expiry > conditions.days_threshold:
                return False
        return urgency_at_least(event, conditions.min_urgency)

    def match_sale(self, conditions: SaleConditions, event: DomainEvent) -> bool:
        sale_type = SALE_TYPE_BY_EVENT.get(event.kind)
        if sale_type is None:
            return False
        if conditions.sale_types is not None and sale_type not in conditions.sale_types:
            return False
        if not within_price_bounds(event.price, conditions.min_price, conditions.max_price):
            return False
        if conditions.domain_patterns and not self.matches_any_pattern(
            conditions.domain_patterns, event.domain
        ):
            return False
        return True

    def match_transfer(self, conditions: TransferConditions, event: DomainEvent) -> bool:
        if event.kind != EventKind.TRANSFERRED:
            return False
        wallet = conditions.wallet_address
        if conditions.only_owner_involved:
            if not (same_address(event.from_address, wallet) or same_address(event.to_address, wallet)):
                return False
        if conditions.direction == TransferDirection.INCOMING and not same_address(event.to_address, wallet):
            return False
        if conditions.direction == TransferDirection.OUTGOING and not same_address(event.from_address, wallet):
            return False
        return True

    def match_price(self, conditions: PriceConditions, event: DomainEvent) -> bool:
        if event.kind not in (EventKind.LISTED, EventKind.PRICE_CHANGED):
            return False
        if not within_price_bounds(event.price, conditions.min_price, conditions.max_price):
            return False
        if conditions.direction is not None:
            if event.price is None or event.old_price is None:
                return False
            if conditions.direction == PriceDirection.UP and not event.price > event.old_price:
                return False
            if conditions.direction == PriceDirection.DOWN and not event.price < event.old_price:
                return False
        return True

    def match_auction(self, conditions: AuctionConditions, event: DomainEvent) -> bool:
        if event.kind != EventKind.AUCTION_UPDATED:
            return False
        return within_price_bounds(event.current_bid, conditions.min_price, conditions.max_price)

    def alert_conditions_match(self, rule: AlertRule, event: DomainEvent) -> bool:
        """Dispatch to the per-kind check. Domain targeting is checked separately."""
        c = rule.conditions
        if rule.kind == AlertKind.EXPIRY and isinstance(c, ExpiryConditions):
            return self.match_expiry(c, event)
        if rule.kind == AlertKind.SALE and isinstance(c, SaleConditions):
            return self.match_sale(c, event)
        if rule.kind == AlertKind.TRANSFER and isinstance(c, TransferConditions):
            return self.match_transfer(c, event)
        if rule.kind == AlertKind.PRICE and isinstance(c, PriceConditions):
            return self.match_price(c, event)
        if rule.kind == AlertKind.AUCTION and isinstance(c, AuctionConditions):
            return self.match_auction(c, event)
        self._logger.warning(
            "alert_rule_conditions_mismatch",
            rule_id=rule.id,
            kind=rule.kind.value,
            conditions_type=type(c).__name__,
        )
        return False

    # Auto-action rules

    def match_renew(self, conditions: RenewConditions, event: DomainEvent) -> bool:
        if event.kind != EventKind.EXPIRING:
            return False
        if not self.in_scope(event.domain, conditions.target_domains, conditions.domain_patterns):
            return False
        if conditions.days_before_expiry is not None:
            if event.days_until_expiry is None or event.days_until_expiry > conditions.days_before_expiry:
                return False
        return urgency_at_least(event, conditions.min_urgency)

    def match_buy(self, conditions: BuyConditions, max_amount: Decimal, event: DomainEvent) -> bool:
        if event.kind != EventKind.LISTED or event.price is None:
            return False
        if event.price > max_amount:
            return False
        if not within_price_bounds(event.price, conditions.min_price, conditions.max_price):
            return False
        if not self.in_scope(event.domain, conditions.target_domains, conditions.domain_patterns):
            return False
        if conditions.exclude_sellers and (event.seller or "").lower() in conditions.exclude_sellers:
            return False
        return True

    def match_bid(self, conditions: BidConditions, event: DomainEvent) -> bool:
        """Scope only: the stop price is enforced at execution (StopLimitExceeded)."""
        if event.kind != EventKind.AUCTION_UPDATED or event.current_bid is None:
            return False
        return self.in_scope(event.domain, conditions.target_domains, conditions.domain_patterns)

    def action_conditions_match(self, rule: AutoActionRule, event: DomainEvent) -> bool:
        c = rule.conditions
        if rule.kind == ActionKind.RENEW and isinstance(c, RenewConditions):
            return self.match_renew(c, event)
        if rule.kind == ActionKind.BUY and isinstance(c, BuyConditions):
            return self.match_buy(c, rule.max_amount, event)
        if rule.kind == ActionKind.BID and isinstance(c, BidConditions):
            return self.match_bid(c, event)
        self._logger.warning(
            "action_rule_conditions_mismatch",
            rule_id=rule.id,
            kind=rule.kind.value,
            conditions_type=type(c).__name__,
        )
        return False
