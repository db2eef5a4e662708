"""Tests for VestsConverter."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from curation_rewards.chain import GlobalProperties, UpstreamConnectionError, VestsConverter

PROPS = GlobalProperties(
    total_vesting_fund_hive=Decimal("500"),
    total_vesting_shares=Decimal("1000000"),
)


@pytest.fixture
def mock_client():
    """Create mock Hive client returning fixed global properties."""
    client = MagicMock()
    client.get_global_properties = AsyncMock(return_value=PROPS)
    return client


class TestVestsConverter:
    """Tests for VestsConverter."""

    async def test_convert(self, mock_client):
        """VESTS are converted with the chain ratio."""
        converter = VestsConverter(mock_client)

        assert await converter.convert(Decimal("2000000")) == pytest.approx(1000.0)

    async def test_properties_cached_within_ttl(self, mock_client):
        """Repeated conversions reuse one fetch."""
        converter = VestsConverter(mock_client, ttl_seconds=300)

        for _ in range(5):
            await converter.convert(Decimal("1"))

        mock_client.get_global_properties.assert_awaited_once()

    async def test_concurrent_conversions_fetch_once(self, mock_client):
        """Concurrent callers share a single refresh."""
        converter = VestsConverter(mock_client, ttl_seconds=300)

        await asyncio.gather(*(converter.convert(Decimal("1")) for _ in range(10)))

        mock_client.get_global_properties.assert_awaited_once()

    async def test_expired_ttl_refreshes(self, mock_client):
        """A zero TTL refreshes on every call."""
        converter = VestsConverter(mock_client, ttl_seconds=0)

        await converter.convert(Decimal("1"))
        await converter.convert(Decimal("1"))

        assert mock_client.get_global_properties.await_count == 2

    async def test_invalidate_forces_refresh(self, mock_client):
        converter = VestsConverter(mock_client, ttl_seconds=300)

        await converter.convert(Decimal("1"))
        converter.invalidate()
        await converter.convert(Decimal("1"))

        assert mock_client.get_global_properties.await_count == 2

    async def test_fetch_error_propagates(self, mock_client):
        """There is no fallback ratio when the node is unreachable."""
        mock_client.get_global_properties.side_effect = UpstreamConnectionError("down")
        converter = VestsConverter(mock_client)

        with pytest.raises(UpstreamConnectionError):
            await converter.convert(Decimal("1"))
