"""Data models for stake module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class StakeEvent:
    """
    One observed stake change for a delegator.

    amount_raw is the delegator's new total stake in raw units (VESTS),
    not a delta. Zero means the delegation was fully withdrawn.
    """

    delegator: str
    amount_raw: Decimal
    block_height: int
    timestamp: datetime


@dataclass(frozen=True)
class StakeEntry:
    """Latest known stake for a single delegator."""

    amount_raw: Decimal
    block_height: int
    timestamp: datetime


@dataclass
class StakeSnapshot:
    """
    Current stake per delegator as of a cutoff date.

    Never contains entries with amount_raw == 0.
    """

    entries: dict[str, StakeEntry] = field(default_factory=dict)
    """Mapping of delegator -> latest stake entry."""

    events_processed: int = 0
    """Number of events folded into this snapshot."""

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, delegator: object) -> bool:
        return delegator in self.entries

    @property
    def delegators(self) -> list[str]:
        """All delegators with a non-zero stake."""
        return list(self.entries.keys())

    def get(self, delegator: str) -> StakeEntry | None:
        """Get the entry for a delegator, if any."""
        return self.entries.get(delegator)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "events_processed": self.events_processed,
            "entries": {
                delegator: {
                    "amount_raw": str(entry.amount_raw),
                    "block_height": entry.block_height,
                    "timestamp": entry.timestamp.isoformat(),
                }
                for delegator, entry in self.entries.items()
            },
        }
