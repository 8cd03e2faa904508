"""RawChainEvent: a decoded contract log before normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class RawChainEvent:
    """Event name plus positional arguments as decoded from the contract ABI."""

    name: str
    """Contract event name (e.g. DomainListed)."""
    args: tuple[Any, ...] = field(default_factory=tuple)
    block_number: int = 0
    transaction_hash: Optional[str] = None
    block_hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawChainEvent:
        """Build from a JSON-like dict ({"event", "args", "blockNumber", "transactionHash"})."""
        return cls(
            name=str(data.get("event") or data.get("name") or ""),
            args=tuple(data.get("args") or ()),
            block_number=int(data.get("blockNumber") or 0),
            transaction_hash=data.get("transactionHash"),
            block_hash=data.get("blockHash"),
        )
