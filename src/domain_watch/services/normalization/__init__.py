"""Raw chain event normalization."""

from domain_watch.services.normalization.event_normalizer import (
    EVENT_LAYOUTS,
    EventNormalizer,
    wei_to_decimal,
)

__all__ = ["EVENT_LAYOUTS", "EventNormalizer", "wei_to_decimal"]
