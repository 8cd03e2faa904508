"""Alert dispatching, formatting and daily digests."""

from domain_watch.services.alerts.alert_formatter import AlertFormatter, FormattedAlert
from domain_watch.services.alerts.alert_service import AlertService, DispatchOutcome
from domain_watch.services.alerts.digest_service import DigestService

__all__ = [
    "AlertFormatter",
    "AlertService",
    "DigestService",
    "DispatchOutcome",
    "FormattedAlert",
]
