"""Distribution orchestrator - runs one end-to-end reward calculation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from curation_rewards.chain import (
    DEFAULT_GLOBAL_PROPS_TTL,
    HiveAccrualSource,
    HiveClient,
    HiveConfig,
    VestsConverter,
)
from curation_rewards.filters import decode_filter_or_default
from curation_rewards.incentives import (
    DelegatorStake,
    DynamicRateEngine,
    ProportionalAllocator,
)
from curation_rewards.stake import calculate_cutoff_date, reduce_stake_events
from curation_rewards.utils import clock

from .models import OrchestratorConfig

if TYPE_CHECKING:
    from curation_rewards.chain.models import AccrualStats
    from curation_rewards.chain.ports import (
        AccrualSource,
        StakeEventSource,
        UnitConverter,
    )
    from curation_rewards.filters import Filter
    from curation_rewards.incentives import (
        DistributionResult,
        DynamicPaymentResult,
        PaymentConfig,
    )
    from curation_rewards.stake import StakeSnapshot

logger = logging.getLogger(__name__)


class DistributionOrchestrator:
    """
    Coordinates the full distribution pipeline.

    Stateless - all inputs passed explicitly, returns result.
    All dependencies injected.

    Pipeline steps:
    1. Take one reference time and compute the cutoff date from it
    2. Fetch stake events and reduce them to current stake per delegator
    3. Convert raw stake to stake units (concurrently)
    4. Filter eligible delegators and allocate the reward pool
    5. Derive the dynamic rate and per-delegator payments

    Errors from any step propagate unchanged; no partial result is returned.
    """

    def __init__(
        self,
        event_source: StakeEventSource,
        converter: UnitConverter,
        accrual_source: AccrualSource,
        allocator: ProportionalAllocator,
        rate_engine: DynamicRateEngine,
        config: OrchestratorConfig | None = None,
    ):
        """
        Initialize orchestrator with all dependencies.

        Args:
            event_source: Source of stake events
            converter: Raw stake -> stake unit converter
            accrual_source: Source of accrual stats (pool resolution)
            allocator: Eligibility and proportional allocation logic
            rate_engine: Dynamic rate logic
            config: Orchestrator configuration. Uses defaults if None.
        """
        self._event_source = event_source
        self._converter = converter
        self._accrual = accrual_source
        self._allocator = allocator
        self._rate_engine = rate_engine
        self._config = config or OrchestratorConfig()

    @classmethod
    def create(
        cls,
        *,
        hive_config: HiveConfig | None = None,
        global_props_ttl: float = DEFAULT_GLOBAL_PROPS_TTL,
        config: OrchestratorConfig | None = None,
    ) -> DistributionOrchestrator:
        """
        Create orchestrator backed by Hive API nodes.

        Args:
            hive_config: API node configuration. Uses public defaults if None.
            global_props_ttl: Seconds the VESTS/HP ratio stays cached
            config: Orchestrator configuration

        Returns:
            Configured DistributionOrchestrator
        """
        client = HiveClient(hive_config)
        converter = VestsConverter(client, ttl_seconds=global_props_ttl)
        accrual = HiveAccrualSource(client, converter)

        return cls(
            event_source=client,
            converter=converter,
            accrual_source=accrual,
            allocator=ProportionalAllocator(),
            rate_engine=DynamicRateEngine(accrual),
            config=config,
        )

    async def run(
        self,
        account: str,
        filter_: Filter,
        payment_config: PaymentConfig,
        reward_pool_base: float | None = None,
        interest_percent: float | None = None,
    ) -> DynamicPaymentResult:
        """
        Run the full distribution pipeline for an account.

        Args:
            account: Account receiving the delegations
            filter_: Normalized filter (one snapshot for the whole run)
            payment_config: Rate bounds for the account
            reward_pool_base: Pool to split. If None and the filter has no
                accrual value, resolved from accrual stats by the filter's
                accrual window.
            interest_percent: Off-the-top percentage. Uses config default if None.

        Returns:
            DynamicPaymentResult including the underlying distribution

        Raises:
            ValueError: If payment_config belongs to another account
            UpstreamError: If any external fetch fails
        """
        account = account.strip().lower()
        if payment_config.account != account:
            raise ValueError(
                f"Payment config is for @{payment_config.account}, not @{account}"
            )

        if interest_percent is None:
            interest_percent = self._config.interest_percent

        # 1. One reference time and cutoff date for the whole run
        now = clock.now()
        cutoff = calculate_cutoff_date(filter_.time_period_days, now)
        logger.info(
            f"Starting distribution for {account}: cutoff={cutoff}, "
            f"min_stake={filter_.minimum_stake}, excluded={len(filter_.excluded_accounts)}"
        )

        # 2. Stake events -> snapshot
        events = await self._event_source.fetch_stake_events(account, cutoff)
        snapshot = reduce_stake_events(events)
        logger.info(f"Events: {len(events)}, unique delegators: {len(snapshot)}")

        # 3. Unit conversion
        stakes = await self._convert_all(snapshot)

        # Resolve pool base from accrual when not supplied
        stats: AccrualStats | None = None
        if reward_pool_base is None:
            if filter_.accrual_value > 0:
                reward_pool_base = 0.0
            else:
                stats = await self._accrual.fetch_accrual_stats(account)
                reward_pool_base = stats.for_window(filter_.accrual_window.value)
                logger.info(
                    f"Pool base from {filter_.accrual_window.value} accrual: "
                    f"{reward_pool_base:.4f}"
                )

        # 4. Allocation
        distribution = self._allocator.allocate(
            account=account,
            stakes=stakes,
            filter_=filter_,
            reward_pool_base=reward_pool_base,
            interest_percent=interest_percent,
            cutoff_date=cutoff,
            events_processed=snapshot.events_processed,
        )

        # 5. Dynamic rate and payments
        result = await self._rate_engine.calculate_payments(
            distribution, filter_, payment_config, stats, now=now
        )

        logger.info(
            f"Distribution complete for {account}: {distribution.delegator_count} "
            f"delegators, rate={result.rate_percent:.2f}%, "
            f"payout pool={result.payout_pool:.4f}"
        )
        return result

    async def run_encoded(
        self,
        account: str,
        encoded_filter: str,
        payment_config: PaymentConfig,
        reward_pool_base: float | None = None,
        interest_percent: float | None = None,
    ) -> DynamicPaymentResult:
        """
        Run the pipeline with a filter from the URL transport.

        A payload that cannot be decoded falls back to default filters
        with applied=False.
        """
        filter_ = decode_filter_or_default(encoded_filter)
        return await self.run(
            account,
            filter_,
            payment_config,
            reward_pool_base=reward_pool_base,
            interest_percent=interest_percent,
        )

    async def recalculate(
        self,
        previous: DistributionResult,
        filter_: Filter,
        payment_config: PaymentConfig,
        reward_pool_base: float,
        interest_percent: float | None = None,
    ) -> DynamicPaymentResult:
        """
        Re-apply a new filter to a previous distribution without refetching events.

        Args:
            previous: Distribution from an earlier run
            filter_: New filter (minimum stake / exclusions)
            payment_config: Rate bounds for the account
            reward_pool_base: Pool to split when the filter has no accrual value
            interest_percent: Off-the-top percentage. Uses config default if None.
        """
        if interest_percent is None:
            interest_percent = self._config.interest_percent

        distribution = self._allocator.reallocate(
            previous, filter_, reward_pool_base, interest_percent
        )
        return await self._rate_engine.calculate_payments(
            distribution, filter_, payment_config
        )

    async def _convert_all(self, snapshot: StakeSnapshot) -> list[DelegatorStake]:
        """
        Convert every snapshot entry, preserving snapshot order.

        The first failure cancels the remaining conversions and propagates.
        """
        semaphore = asyncio.Semaphore(self._config.max_concurrent_conversions)

        async def convert_with_semaphore(delegator: str) -> DelegatorStake:
            entry = snapshot.entries[delegator]
            async with semaphore:
                stake_unit = await self._converter.convert(entry.amount_raw)
            return DelegatorStake(
                delegator=delegator,
                stake_unit=stake_unit,
                block_height=entry.block_height,
                timestamp=entry.timestamp,
            )

        tasks = [
            asyncio.ensure_future(convert_with_semaphore(delegator))
            for delegator in snapshot.delegators
        ]
        if not tasks:
            return []

        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
