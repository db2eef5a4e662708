"""Interfaces the distribution core consumes from external collaborators."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from curation_rewards.stake import StakeEvent

    from .models import AccrualStats


class StakeEventSource(Protocol):
    """Source of stake-change events for an account."""

    async def fetch_stake_events(
        self, account: str, cutoff_date: date
    ) -> list[StakeEvent]:
        """Events at/after cutoff_date, ordered by block height ascending."""
        ...


class UnitConverter(Protocol):
    """Converts raw stake units to stake units."""

    async def convert(self, amount_raw: Decimal) -> float:
        """Convert using the current global exchange ratio."""
        ...


class AccrualSource(Protocol):
    """Reward accrual totals for an account."""

    async def fetch_accrual_stats(self, account: str) -> AccrualStats:
        """Totals for the fixed 24h/7d/30d windows."""
        ...

    async def fetch_accrual_for_range(
        self, account: str, start: datetime, end: datetime
    ) -> float:
        """Total accrued in [start, end]."""
        ...
