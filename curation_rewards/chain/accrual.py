"""Curation reward accrual totals for the dynamic payout rate."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from curation_rewards.utils import clock

from .models import AccrualStats

if TYPE_CHECKING:
    from .client import HiveClient
    from .converter import VestsConverter

logger = logging.getLogger(__name__)


class HiveAccrualSource:
    """
    Accrual statistics computed from curation reward operations.

    Rewards are fetched once for the last 30 days and bucketed into the
    24h, 7d and 30d windows. Amounts are converted to HP with the converter's
    current ratio.
    """

    def __init__(self, client: HiveClient, converter: VestsConverter):
        """
        Initialize accrual source.

        Args:
            client: Hive client used to fetch reward operations
            converter: Converter for VESTS -> HP
        """
        self._client = client
        self._converter = converter

    async def fetch_accrual_stats(self, account: str) -> AccrualStats:
        """
        Compute reward totals for the fixed windows.

        Args:
            account: Curator account name

        Returns:
            AccrualStats in HP
        """
        now = clock.now()
        since_24h = now - timedelta(hours=24)
        since_7d = now - timedelta(days=7)
        since_30d = now - timedelta(days=30)

        rewards = await self._client.fetch_curation_rewards(account, since_30d, now)
        props = await self._converter.get_global_properties()

        total_24h = total_7d = total_30d = 0.0
        for reward in rewards:
            if reward.timestamp < since_30d:
                continue
            hp = float(props.vests_to_hp(reward.reward_vests))
            total_30d += hp
            if reward.timestamp >= since_7d:
                total_7d += hp
            if reward.timestamp >= since_24h:
                total_24h += hp

        stats = AccrualStats(window_24h=total_24h, window_7d=total_7d, window_30d=total_30d)
        logger.info(
            f"Accrual for {account}: 24h={total_24h:.4f} HP, "
            f"7d={total_7d:.4f} HP, 30d={total_30d:.4f} HP ({len(rewards)} rewards)"
        )
        return stats

    async def fetch_accrual_for_range(
        self, account: str, start: datetime, end: datetime
    ) -> float:
        """
        Total curation rewards in [start, end], in HP.

        Args:
            account: Curator account name
            start: Range start (inclusive)
            end: Range end (inclusive)
        """
        rewards = await self._client.fetch_curation_rewards(account, start, end)
        props = await self._converter.get_global_properties()

        total = sum(
            float(props.vests_to_hp(r.reward_vests))
            for r in rewards
            if start <= r.timestamp <= end
        )
        logger.info(
            f"Accrual for {account} from {start.date()} to {end.date()}: {total:.4f} HP"
        )
        return total
