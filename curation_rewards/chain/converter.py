"""VESTS to HP conversion backed by cached global properties."""

from __future__ import annotations

import asyncio
import logging
import time
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .client import HiveClient
    from .models import GlobalProperties

logger = logging.getLogger(__name__)

DEFAULT_GLOBAL_PROPS_TTL = 300.0  # 5 minutes


class VestsConverter:
    """
    Convert raw stake (VESTS) to stake units (HP).

    The exchange ratio is fetched from the chain and cached on the instance
    for ttl_seconds. The ratio may drift between refreshes within one run.
    Fetch errors propagate; there is no fallback ratio.
    """

    def __init__(self, client: HiveClient, ttl_seconds: float = DEFAULT_GLOBAL_PROPS_TTL):
        """
        Initialize converter.

        Args:
            client: Hive client used to fetch global properties
            ttl_seconds: How long fetched properties stay valid
        """
        self._client = client
        self._ttl = ttl_seconds
        self._props: GlobalProperties | None = None
        self._fetched_at = 0.0
        self._lock = asyncio.Lock()

    def invalidate(self) -> None:
        """Drop cached global properties."""
        self._props = None

    async def get_global_properties(self) -> GlobalProperties:
        """Return cached properties, refreshing them once the TTL expires."""
        async with self._lock:
            if self._props is None or time.monotonic() - self._fetched_at >= self._ttl:
                logger.debug("Refreshing global properties (cache expired or empty)")
                self._props = await self._client.get_global_properties()
                self._fetched_at = time.monotonic()
            return self._props

    async def convert(self, amount_raw: Decimal) -> float:
        """
        Convert a VESTS amount to HP.

        Args:
            amount_raw: Amount in VESTS

        Returns:
            Amount in HP
        """
        props = await self.get_global_properties()
        return float(props.vests_to_hp(Decimal(amount_raw)))
