"""Abstract interface for on-chain domain lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class DomainExpiryInfo:
    domain: str
    expiry_time: datetime
    owner: Optional[str] = None


class IDomainInfoService(ABC):
    """Answers the current expiry and owner of a domain."""

    @abstractmethod
    async def get_expiry_info(self, domain: str) -> Optional[DomainExpiryInfo]:
        """Return expiry info, or None if the domain is unknown."""
        ...
