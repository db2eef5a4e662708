"""Data models for incentives module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from curation_rewards.chain.models import AccrualStats
    from curation_rewards.filters import Filter


@dataclass(frozen=True)
class DelegatorStake:
    """A delegator's current stake after unit conversion."""

    delegator: str
    stake_unit: float
    block_height: int
    timestamp: datetime


@dataclass(frozen=True)
class DelegatorContribution:
    """
    An eligible delegator and its share of the reward pool.

    share_percent and payout_amount are always computed together.
    """

    delegator: str
    stake_unit: float
    share_percent: float
    payout_amount: float
    block_height: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "delegator": self.delegator,
            "stake_unit": round(self.stake_unit, 6),
            "share_percent": round(self.share_percent, 6),
            "payout_amount": round(self.payout_amount, 6),
            "block_height": self.block_height,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class DistributionResult:
    """
    Proportional distribution of a reward pool.

    Contributions are sorted by stake, largest first. Empty with zero totals
    when no delegator is eligible.
    """

    contributions: tuple[DelegatorContribution, ...]
    total_stake_unit: float
    total_payout_pool: float
    cutoff_date: date
    events_processed: int

    @property
    def delegator_count(self) -> int:
        """Number of eligible delegators."""
        return len(self.contributions)

    @property
    def is_empty(self) -> bool:
        """True when no delegator is eligible."""
        return not self.contributions

    def get(self, delegator: str) -> DelegatorContribution | None:
        """Get contribution for a delegator (None if not eligible)."""
        for contribution in self.contributions:
            if contribution.delegator == delegator:
                return contribution
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "cutoff_date": self.cutoff_date.isoformat(),
            "events_processed": self.events_processed,
            "total_stake_unit": round(self.total_stake_unit, 6),
            "total_payout_pool": round(self.total_payout_pool, 6),
            "contributions": [c.to_dict() for c in self.contributions],
        }


@dataclass(frozen=True)
class RateDecision:
    """Outcome of the dynamic rate calculation."""

    rate_percent: float
    """Final payout rate after clamping to the configured range."""

    accrual_unit: float
    """Accrual of the selected window, in stake units."""

    window: str
    """Selected window: "24h", "7d", "30d" or "custom"."""

    stats: AccrualStats
    """Fixed-window stats used for the decision."""


@dataclass(frozen=True)
class DelegatorPayment:
    """Payment owed to one delegator at the dynamic rate."""

    delegator: str
    stake_unit: float
    share_percent: float
    payout_amount: float
    last_delegation_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "delegator": self.delegator,
            "stake_unit": round(self.stake_unit, 6),
            "share_percent": round(self.share_percent, 6),
            "payout_amount": round(self.payout_amount, 6),
            "last_delegation_at": self.last_delegation_at.isoformat(),
        }


@dataclass(frozen=True)
class DynamicPaymentResult:
    """Payments at the dynamic rate for all eligible delegators."""

    rate_percent: float
    accrual_unit: float
    total_pool_considered: float
    """Total eligible stake the rate is applied to."""

    payout_pool: float
    """total_pool_considered * rate_percent / 100."""

    payments: tuple[DelegatorPayment, ...]
    """Sorted by payout amount, largest first."""

    stats: AccrualStats
    window: str
    period_days: int
    applied_filter: Filter
    distribution: DistributionResult | None = None
    calculated_at: datetime | None = None

    @property
    def total_paid(self) -> float:
        """Sum of all payments."""
        return sum(p.payout_amount for p in self.payments)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rate_percent": round(self.rate_percent, 6),
            "accrual_unit": round(self.accrual_unit, 6),
            "window": self.window,
            "period_days": self.period_days,
            "total_pool_considered": round(self.total_pool_considered, 6),
            "payout_pool": round(self.payout_pool, 6),
            "stats": self.stats.to_dict(),
            "filter": self.applied_filter.to_dict(),
            "calculated_at": (
                self.calculated_at.isoformat() if self.calculated_at else None
            ),
            "payments": [p.to_dict() for p in self.payments],
            "distribution": (
                self.distribution.to_dict() if self.distribution else None
            ),
        }
