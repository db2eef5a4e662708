"""Eligibility filtering and proportional allocation of a reward pool."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from .models import DelegatorContribution, DelegatorStake, DistributionResult

if TYPE_CHECKING:
    from curation_rewards.filters import Filter

logger = logging.getLogger(__name__)


def calculate_payout_pool(
    filter_: Filter, reward_pool_base: float, interest_percent: float
) -> float:
    """
    Reward pool left for delegators after the off-the-top interest.

    The filter's accrual value overrides the pool base when positive.
    """
    pool = filter_.accrual_value if filter_.accrual_value > 0 else reward_pool_base
    return pool * (100 - interest_percent) / 100


class ProportionalAllocator:
    """
    Split a reward pool among eligible delegators by stake.

    Eligibility, in order:
    1. The account itself is never counted (self-delegation)
    2. Stake below the filter's minimum is dropped
    3. Manually excluded accounts are dropped

    Usage:
        allocator = ProportionalAllocator()
        result = allocator.allocate(
            account="alice",
            stakes=converted_stakes,
            filter_=filter_,
            reward_pool_base=20.0,
            interest_percent=10.0,
            cutoff_date=cutoff,
            events_processed=len(events),
        )
    """

    def allocate(
        self,
        account: str,
        stakes: Sequence[DelegatorStake],
        filter_: Filter,
        reward_pool_base: float,
        interest_percent: float,
        cutoff_date: date,
        events_processed: int = 0,
    ) -> DistributionResult:
        """
        Filter stakes and compute each eligible delegator's share.

        Args:
            account: Account receiving the delegations
            stakes: Converted stakes, one per delegator
            filter_: Eligibility filter
            reward_pool_base: Pool to split when the filter has no accrual value
            interest_percent: Percentage kept off the top of the pool
            cutoff_date: Cutoff date of the run
            events_processed: Number of stake events behind the stakes

        Returns:
            DistributionResult sorted by stake, largest first
        """
        eligible: list[DelegatorStake] = []
        for stake in stakes:
            if stake.delegator == account:
                logger.debug(f"{stake.delegator} excluded: same as account")
                continue
            if stake.stake_unit < filter_.minimum_stake:
                logger.debug(
                    f"{stake.delegator} excluded by minimum stake: "
                    f"{stake.stake_unit:.2f} < {filter_.minimum_stake}"
                )
                continue
            if filter_.is_excluded(stake.delegator):
                logger.debug(f"{stake.delegator} excluded by filter")
                continue
            eligible.append(stake)

        pool = calculate_payout_pool(filter_, reward_pool_base, interest_percent)
        result = self._distribute(eligible, pool, cutoff_date, events_processed)

        logger.info(
            f"Distribution for {account}: {result.delegator_count}/{len(stakes)} "
            f"eligible, total stake={result.total_stake_unit:.2f}, "
            f"pool={result.total_payout_pool:.3f}"
        )
        return result

    def reallocate(
        self,
        result: DistributionResult,
        filter_: Filter,
        reward_pool_base: float,
        interest_percent: float,
    ) -> DistributionResult:
        """
        Apply a new filter to an existing result without refetching.

        Only narrows the eligible set: delegators already dropped from
        result cannot come back.

        Args:
            result: Previous distribution
            filter_: New eligibility filter
            reward_pool_base: Pool to split when the filter has no accrual value
            interest_percent: Percentage kept off the top of the pool

        Returns:
            New DistributionResult with the same cutoff date
        """
        eligible = [
            DelegatorStake(
                delegator=c.delegator,
                stake_unit=c.stake_unit,
                block_height=c.block_height,
                timestamp=c.timestamp,
            )
            for c in result.contributions
            if c.stake_unit >= filter_.minimum_stake
            and not filter_.is_excluded(c.delegator)
        ]

        pool = calculate_payout_pool(filter_, reward_pool_base, interest_percent)
        recalculated = self._distribute(
            eligible, pool, result.cutoff_date, result.events_processed
        )

        logger.info(
            f"Reallocated: {result.delegator_count} -> {recalculated.delegator_count} "
            f"delegators, total stake {result.total_stake_unit:.2f} -> "
            f"{recalculated.total_stake_unit:.2f}"
        )
        return recalculated

    def _distribute(
        self,
        eligible: Sequence[DelegatorStake],
        pool: float,
        cutoff_date: date,
        events_processed: int,
    ) -> DistributionResult:
        total_stake = sum(s.stake_unit for s in eligible)

        if total_stake <= 0:
            return DistributionResult(
                contributions=(),
                total_stake_unit=0.0,
                total_payout_pool=0.0,
                cutoff_date=cutoff_date,
                events_processed=events_processed,
            )

        contributions = [
            DelegatorContribution(
                delegator=s.delegator,
                stake_unit=s.stake_unit,
                share_percent=s.stake_unit / total_stake * 100,
                payout_amount=s.stake_unit / total_stake * pool,
                block_height=s.block_height,
                timestamp=s.timestamp,
            )
            for s in eligible
        ]
        # Stable: equal stakes keep input order
        contributions.sort(key=lambda c: c.stake_unit, reverse=True)

        return DistributionResult(
            contributions=tuple(contributions),
            total_stake_unit=total_stake,
            total_payout_pool=pool,
            cutoff_date=cutoff_date,
            events_processed=events_processed,
        )
