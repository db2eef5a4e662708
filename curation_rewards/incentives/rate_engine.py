"""Dynamic payout rate derived from recent reward accrual."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from curation_rewards.utils import clock

from .models import DelegatorPayment, DynamicPaymentResult, RateDecision

if TYPE_CHECKING:
    from curation_rewards.chain.models import AccrualStats
    from curation_rewards.chain.ports import AccrualSource
    from curation_rewards.filters import Filter

    from .models import DistributionResult
    from .payment_config import PaymentConfig

logger = logging.getLogger(__name__)

CUSTOM_WINDOW = "custom"


def select_window(time_period_days: int) -> str:
    """
    Accrual window for a look-back period.

    Tiered on the period, not continuous: up to 1 day reads the 24h window,
    up to 7 days the 7d window, up to 30 days the 30d window, and longer
    periods need a custom range total.
    """
    if time_period_days <= 1:
        return "24h"
    if time_period_days <= 7:
        return "7d"
    if time_period_days <= 30:
        return "30d"
    return CUSTOM_WINDOW


def calculate_rate_percent(config: PaymentConfig, accrual_unit: float) -> float:
    """
    Payout rate for an accrual amount, clamped to the configured range.

    With positive accrual the base rate is scaled by itself as a fraction
    (base * base / 100, so 15% becomes 2.25%); with no accrual the raw rate
    is 0. Either way the result is then clamped to [min, max]. This is the
    business rule as deployed, kept as-is.
    """
    factor = config.base_rate_percent / 100 if accrual_unit > 0 else 0.0
    raw_rate = config.base_rate_percent * factor
    return min(max(raw_rate, config.min_rate_percent), config.max_rate_percent)


class DynamicRateEngine:
    """
    Compute the payout rate and per-delegator payments.

    Usage:
        engine = DynamicRateEngine(accrual_source)
        decision = await engine.calculate(account, filter_, config)
        payments = await engine.calculate_payments(distribution, filter_, config)
    """

    def __init__(self, accrual_source: AccrualSource):
        """
        Initialize engine.

        Args:
            accrual_source: Source of accrual stats and custom range totals
        """
        self._accrual = accrual_source

    async def calculate(
        self,
        account: str,
        filter_: Filter,
        config: PaymentConfig,
        stats: AccrualStats | None = None,
        now: datetime | None = None,
    ) -> RateDecision:
        """
        Derive the payout rate for an account.

        Args:
            account: Account whose accrual drives the rate
            filter_: Filter whose time period selects the window
            config: Rate bounds
            stats: Pre-fetched stats. Fetched if None.
            now: Reference time of the run. Uses the module clock if None.

        Returns:
            RateDecision with rate, accrual and the stats used
        """
        if stats is None:
            stats = await self._accrual.fetch_accrual_stats(account)

        window = select_window(filter_.time_period_days)
        if window == CUSTOM_WINDOW:
            end = now or clock.now()
            start = end - timedelta(days=filter_.time_period_days)
            accrual = await self._accrual.fetch_accrual_for_range(account, start, end)
        else:
            accrual = stats.for_window(window)

        rate = calculate_rate_percent(config, accrual)

        logger.info(
            f"Dynamic rate for {account}: {rate:.2f}% "
            f"(window={window}, accrual={accrual:.4f})"
        )

        return RateDecision(
            rate_percent=rate,
            accrual_unit=accrual,
            window=window,
            stats=stats,
        )

    async def calculate_payments(
        self,
        distribution: DistributionResult,
        filter_: Filter,
        config: PaymentConfig,
        stats: AccrualStats | None = None,
        now: datetime | None = None,
    ) -> DynamicPaymentResult:
        """
        Apply the dynamic rate to an allocated distribution.

        The payout pool is the distribution's total stake times the rate.
        Each eligible delegator gets a stake-proportional slice of it.

        Args:
            distribution: Result of the allocator
            filter_: Filter used for the distribution
            config: Rate bounds (config.account drives the accrual)
            stats: Pre-fetched stats. Fetched if None.
            now: Reference time of the run, also used as calculated_at.
                Uses the module clock if None.

        Returns:
            DynamicPaymentResult with payments sorted by amount, largest first
        """
        now = now or clock.now()
        decision = await self.calculate(config.account, filter_, config, stats, now)

        total_stake = distribution.total_stake_unit
        payout_pool = total_stake * decision.rate_percent / 100

        payments: list[DelegatorPayment] = []
        if total_stake > 0:
            payments = [
                DelegatorPayment(
                    delegator=c.delegator,
                    stake_unit=c.stake_unit,
                    share_percent=c.share_percent,
                    payout_amount=c.stake_unit / total_stake * payout_pool,
                    last_delegation_at=c.timestamp,
                )
                for c in distribution.contributions
            ]
            payments.sort(key=lambda p: p.payout_amount, reverse=True)

        logger.info(
            f"Payments: {len(payments)} delegators, "
            f"pool={payout_pool:.4f} at {decision.rate_percent:.2f}%"
        )

        return DynamicPaymentResult(
            rate_percent=decision.rate_percent,
            accrual_unit=decision.accrual_unit,
            total_pool_considered=total_stake,
            payout_pool=payout_pool,
            payments=tuple(payments),
            stats=decision.stats,
            window=decision.window,
            period_days=filter_.time_period_days,
            applied_filter=filter_,
            distribution=distribution,
            calculated_at=now,
        )
