"""Tests for chain data models."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from curation_rewards.chain import (
    AccountOperation,
    AccrualStats,
    CurationReward,
    GlobalProperties,
    UpstreamResponseError,
    parse_asset,
)


class TestParseAsset:
    """Tests for parse_asset."""

    def test_nai_object(self):
        """NAI amounts are scaled by precision."""
        asset = {"amount": "123456789", "precision": 6, "nai": "@@000000037"}

        assert parse_asset(asset) == Decimal("123.456789")

    def test_legacy_string(self):
        assert parse_asset("1.500 HIVE") == Decimal("1.500")

    @pytest.mark.parametrize("value", [None, 12, {"amount": "1"}, "", "abc VESTS"])
    def test_malformed_raises(self, value):
        with pytest.raises(UpstreamResponseError, match="Malformed asset"):
            parse_asset(value)


class TestGlobalProperties:
    """Tests for GlobalProperties."""

    def test_from_rpc_response(self):
        props = GlobalProperties.from_rpc_response(
            {
                "total_vesting_fund_hive": {"amount": "500000", "precision": 3, "nai": "@@000000021"},
                "total_vesting_shares": {"amount": "1000000000000", "precision": 6, "nai": "@@000000037"},
            }
        )

        assert props.total_vesting_fund_hive == Decimal("500")
        assert props.total_vesting_shares == Decimal("1000000")

    def test_vests_to_hp(self):
        props = GlobalProperties(Decimal("500"), Decimal("1000000"))

        assert props.vests_to_hp(Decimal("2000")) == Decimal("1")

    def test_missing_key_raises(self):
        with pytest.raises(UpstreamResponseError, match="Missing global property"):
            GlobalProperties.from_rpc_response({"total_vesting_shares": "1.000000 VESTS"})

    def test_zero_shares_raises(self):
        with pytest.raises(UpstreamResponseError, match="must be positive"):
            GlobalProperties.from_rpc_response(
                {"total_vesting_fund_hive": "1.000 HIVE", "total_vesting_shares": "0.000000 VESTS"}
            )


class TestAccountOperation:
    """Tests for AccountOperation parsing."""

    def test_from_api_response(self):
        op = AccountOperation.from_api_response(
            {
                "block": 100,
                "operation_id": "4294967296",
                "timestamp": "2024-06-01T12:00:00",
                "op": {"type": "curation_reward_operation", "value": {"curator": "x"}},
            }
        )

        assert op.block_height == 100
        assert op.op_type == "curation_reward_operation"
        assert op.timestamp == datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
        assert op.sort_key == (100, 4294967296)

    def test_missing_op_raises(self):
        with pytest.raises(UpstreamResponseError, match="Malformed operation"):
            AccountOperation.from_api_response({"block": 1, "timestamp": "2024-06-01T00:00:00"})

    def test_curation_reward_from_operation(self):
        op = AccountOperation(
            operation_id="7",
            op_type="curation_reward_operation",
            value={
                "curator": "owner",
                "reward": {"amount": "2500000", "precision": 6, "nai": "@@000000037"},
                "comment_author": "writer",
                "comment_permlink": "post",
            },
            block_height=5,
            timestamp=datetime(2024, 6, 1, tzinfo=UTC),
        )

        reward = CurationReward.from_operation(op)

        assert reward.reward_vests == Decimal("2.5")
        assert reward.author == "writer"
        assert reward.permlink == "post"


class TestAccrualStats:
    """Tests for AccrualStats."""

    def test_for_window(self):
        stats = AccrualStats(window_24h=1.0, window_7d=7.0, window_30d=30.0)

        assert stats.for_window("24h") == 1.0
        assert stats.for_window("7d") == 7.0
        assert stats.for_window("30d") == 30.0

    def test_unknown_window_raises(self):
        with pytest.raises(KeyError):
            AccrualStats().for_window("90d")
