"""Data models for filters module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_TIME_PERIOD_DAYS = 30
DEFAULT_MINIMUM_STAKE = 50.0
MAX_TIME_PERIOD_DAYS = 365


class AccrualWindow(str, Enum):
    """Fixed accrual windows reported by the accrual stats source."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"


@dataclass(frozen=True)
class Filter:
    """
    Canonical eligibility filter for one distribution run.

    Always produced by the normalizer, so every field is within range.
    """

    time_period_days: int = DEFAULT_TIME_PERIOD_DAYS
    """Look-back period in days (1-365). Defines the cutoff date."""

    minimum_stake: float = DEFAULT_MINIMUM_STAKE
    """Delegators below this stake (in stake units) are not eligible."""

    excluded_accounts: frozenset[str] = field(default_factory=frozenset)
    """Accounts manually excluded from the distribution."""

    applied: bool = True
    """False when the filter is a fallback after a decode failure."""

    accrual_window: AccrualWindow = AccrualWindow.MONTH
    """Window used to resolve the reward pool when none is given."""

    accrual_value: float = 0.0
    """Reward pool override. Zero means "use the pool base"."""

    def is_excluded(self, account: str) -> bool:
        """Check if an account is in the manual exclusion list."""
        return account in self.excluded_accounts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "time_period_days": self.time_period_days,
            "minimum_stake": self.minimum_stake,
            "excluded_accounts": sorted(self.excluded_accounts),
            "applied": self.applied,
            "accrual_window": self.accrual_window.value,
            "accrual_value": self.accrual_value,
        }

    def to_transport(self) -> dict[str, Any]:
        """
        Convert to the camelCase shape used by the URL transport.

        Inverse of the normalizer for valid filters.
        """
        return {
            "timePeriod": self.time_period_days,
            "minimumHP": self.minimum_stake,
            "excludedUsers": sorted(self.excluded_accounts),
            "applied": self.applied,
            "curationPeriod": self.accrual_window.value,
            "curationValue": self.accrual_value,
        }
