"""Type-safe chain data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import UpstreamResponseError

DELEGATE_VESTING_SHARES_OP = 40
CURATION_REWARD_OP = 52


def parse_asset(data: Any) -> Decimal:
    """
    Parse a chain asset into a Decimal amount.

    Supports both formats returned by API nodes:
    - NAI object: {"amount": "123456", "precision": 3, "nai": "@@000000021"}
    - Legacy string: "123.456 HIVE"
    """
    try:
        if isinstance(data, dict):
            return Decimal(str(data["amount"])).scaleb(-int(data["precision"]))
        if isinstance(data, str):
            return Decimal(data.split()[0])
    except (KeyError, IndexError, ValueError, InvalidOperation) as e:
        raise UpstreamResponseError(f"Malformed asset: {data!r}") from e
    raise UpstreamResponseError(f"Malformed asset: {data!r}")


def parse_timestamp(value: str) -> datetime:
    """Parse an API timestamp. Naive timestamps are UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise UpstreamResponseError(f"Malformed timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class GlobalProperties:
    """
    Exchange ratio between raw stake (VESTS) and stake units (HP).

    Taken from the chain's dynamic global properties.
    """

    total_vesting_fund_hive: Decimal
    total_vesting_shares: Decimal

    def vests_to_hp(self, vests: Decimal) -> Decimal:
        """Convert a VESTS amount to HP."""
        return vests * self.total_vesting_fund_hive / self.total_vesting_shares

    @classmethod
    def from_rpc_response(cls, data: dict[str, Any]) -> GlobalProperties:
        """Parse database_api.get_dynamic_global_properties result."""
        try:
            fund = parse_asset(data["total_vesting_fund_hive"])
            shares = parse_asset(data["total_vesting_shares"])
        except KeyError as e:
            raise UpstreamResponseError(f"Missing global property: {e}") from e

        if shares <= 0:
            raise UpstreamResponseError("total_vesting_shares must be positive")

        return cls(total_vesting_fund_hive=fund, total_vesting_shares=shares)


@dataclass(frozen=True)
class AccountOperation:
    """Raw operation from the account history API."""

    operation_id: str
    op_type: str
    value: dict[str, Any]
    block_height: int
    timestamp: datetime

    @property
    def sort_key(self) -> tuple[int, int]:
        """Chain order: block height, then global operation id."""
        op_id = int(self.operation_id) if self.operation_id.isdigit() else 0
        return (self.block_height, op_id)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> AccountOperation:
        """Parse one entry of operations_result."""
        try:
            op = data["op"]
            return cls(
                operation_id=str(data.get("operation_id", "")),
                op_type=op["type"],
                value=op.get("value", {}),
                block_height=int(data["block"]),
                timestamp=parse_timestamp(data["timestamp"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamResponseError(f"Malformed operation: {e}") from e


@dataclass(frozen=True)
class CurationReward:
    """A single curation reward credited to the account."""

    operation_id: str
    timestamp: datetime
    block_height: int
    reward_vests: Decimal
    curator: str
    author: str
    permlink: str

    @classmethod
    def from_operation(cls, operation: AccountOperation) -> CurationReward:
        """Build from a curation_reward_operation."""
        value = operation.value
        return cls(
            operation_id=operation.operation_id,
            timestamp=operation.timestamp,
            block_height=operation.block_height,
            reward_vests=parse_asset(value.get("reward")),
            curator=value.get("curator", ""),
            author=value.get("comment_author", ""),
            permlink=value.get("comment_permlink", ""),
        )


@dataclass(frozen=True)
class AccrualStats:
    """Curation reward totals (in stake units) per fixed window."""

    window_24h: float = 0.0
    window_7d: float = 0.0
    window_30d: float = 0.0

    def for_window(self, window: str) -> float:
        """Total for a window label ("24h", "7d" or "30d")."""
        return {
            "24h": self.window_24h,
            "7d": self.window_7d,
            "30d": self.window_30d,
        }[window]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "window_24h": round(self.window_24h, 6),
            "window_7d": round(self.window_7d, 6),
            "window_30d": round(self.window_30d, 6),
        }
