"""Hive API client for account history and global properties."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from curation_rewards.stake import StakeEvent
from curation_rewards.utils import clock

from .errors import UpstreamConnectionError, UpstreamResponseError
from .models import (
    CURATION_REWARD_OP,
    DELEGATE_VESTING_SHARES_OP,
    AccountOperation,
    CurationReward,
    GlobalProperties,
    parse_asset,
)

logger = logging.getLogger(__name__)

# Retry decorator for read requests: 3 attempts with exponential backoff + jitter
_retry_on_connection_error = retry(
    wait=wait_exponential_jitter(initial=0.1, jitter=0.2),
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type(UpstreamConnectionError),
    reraise=True,
)

_BLOCK_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class HiveConfig:
    """Configuration for Hive API client."""

    rpc_url: str = "https://api.hive.blog"  # JSON-RPC node
    hafah_url: str = "https://api.hive.blog/hafah-api"  # Account history REST API
    timeout: float = 30.0  # Request timeout in seconds
    page_size: int = 200  # Operations per history page
    data_size_limit: int = 150000  # Server-side response size cap


class HiveClient:
    """
    Async HTTP client for Hive API nodes.

    Handles:
    - Fetching delegation operations (stake events)
    - Fetching curation reward operations
    - Fetching dynamic global properties (VESTS/HP ratio)

    Each method creates its own connection - safe for long-running services.
    """

    def __init__(self, config: HiveConfig | None = None):
        """
        Initialize Hive client.

        Args:
            config: API node configuration. Uses public defaults if None.
        """
        self._config = config or HiveConfig()

    def _client(self) -> httpx.AsyncClient:
        """Create a new HTTP client for a request."""
        return httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=self._config.timeout,
        )

    @_retry_on_connection_error
    async def _get_operations_page(
        self, account: str, params: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Fetch one page of account history.

        Retries on transient connection errors (3 attempts with exponential backoff).
        """
        url = f"{self._config.hafah_url.rstrip('/')}/accounts/{account}/operations"
        async with self._client() as client:
            try:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data: dict[str, Any] = response.json()
                return data
            except httpx.HTTPStatusError as e:
                raise UpstreamResponseError(
                    f"History request failed: {e.response.status_code}"
                ) from e
            except httpx.RequestError as e:
                raise UpstreamConnectionError(f"Connection error: {e}") from e
            except ValueError as e:
                raise UpstreamResponseError(f"Invalid JSON response: {e}") from e

    async def get_account_operations(
        self,
        account: str,
        operation_type: int,
        from_block: str,
        to_block: str,
    ) -> list[AccountOperation]:
        """
        Fetch all operations of one type in a date range.

        The history API serves the newest page when no page is given, so the
        first request learns total_pages and the remaining pages are walked
        backwards. Operations are de-duplicated by operation id.

        Args:
            account: Account name
            operation_type: Numeric operation type id
            from_block: Lower bound (block number or date string)
            to_block: Upper bound (block number or date string)

        Returns:
            Operations ordered by block height ascending
        """
        base_params: dict[str, Any] = {
            "operation-types": str(operation_type),
            "page-size": self._config.page_size,
            "data-size-limit": self._config.data_size_limit,
            "from-block": from_block,
            "to-block": to_block,
        }

        first = await self._get_operations_page(account, base_params)
        total_pages = int(first.get("total_pages") or 0)
        pages = [first]

        for page in range(total_pages - 1, 0, -1):
            pages.append(
                await self._get_operations_page(account, {**base_params, "page": page})
            )

        seen: set[str] = set()
        operations: list[AccountOperation] = []
        for data in pages:
            for raw in data.get("operations_result") or []:
                operation = AccountOperation.from_api_response(raw)
                key = operation.operation_id or f"{operation.block_height}:{len(operations)}"
                if key in seen:
                    continue
                seen.add(key)
                operations.append(operation)

        operations.sort(key=lambda op: op.sort_key)

        logger.debug(
            f"Fetched {len(operations)} operations of type {operation_type} "
            f"for {account} ({max(total_pages, 1)} pages)"
        )
        return operations

    async def fetch_stake_events(
        self, account: str, cutoff_date: date
    ) -> list[StakeEvent]:
        """
        Fetch delegation events to an account since the cutoff date.

        Args:
            account: Delegatee account name
            cutoff_date: Earliest date to include

        Returns:
            Stake events ordered by block height ascending
        """
        operations = await self.get_account_operations(
            account,
            DELEGATE_VESTING_SHARES_OP,
            from_block=cutoff_date.isoformat(),
            to_block=clock.now().strftime(_BLOCK_DATE_FORMAT),
        )

        events = []
        for operation in operations:
            if operation.op_type != "delegate_vesting_shares_operation":
                logger.warning(
                    f"Unexpected operation type {operation.op_type} "
                    f"for {operation.operation_id}"
                )
                continue
            try:
                events.append(
                    StakeEvent(
                        delegator=operation.value["delegator"],
                        amount_raw=parse_asset(operation.value["vesting_shares"]),
                        block_height=operation.block_height,
                        timestamp=operation.timestamp,
                    )
                )
            except KeyError as e:
                raise UpstreamResponseError(
                    f"Malformed delegation {operation.operation_id}: missing {e}"
                ) from e

        logger.info(f"Fetched {len(events)} stake events for {account} since {cutoff_date}")
        return events

    async def fetch_curation_rewards(
        self, account: str, start: datetime, end: datetime | None = None
    ) -> list[CurationReward]:
        """
        Fetch curation rewards credited to an account.

        Rewards without a positive VESTS amount are skipped.

        Args:
            account: Curator account name
            start: Earliest time to include
            end: Latest time to include. Uses now if None.

        Returns:
            Curation rewards ordered by block height ascending
        """
        end = end or clock.now()
        operations = await self.get_account_operations(
            account,
            CURATION_REWARD_OP,
            from_block=start.date().isoformat(),
            to_block=end.strftime(_BLOCK_DATE_FORMAT),
        )

        rewards = []
        for operation in operations:
            if operation.op_type != "curation_reward_operation":
                logger.warning(
                    f"Unexpected operation type {operation.op_type} "
                    f"for {operation.operation_id}"
                )
                continue
            reward = CurationReward.from_operation(operation)
            if reward.reward_vests <= 0:
                logger.debug(f"Skipping empty reward {operation.operation_id}")
                continue
            rewards.append(reward)

        logger.debug(f"Fetched {len(rewards)} curation rewards for {account}")
        return rewards

    @_retry_on_connection_error
    async def get_global_properties(self) -> GlobalProperties:
        """
        Fetch dynamic global properties.

        Retries on transient connection errors (3 attempts with exponential backoff).
        """
        payload = {
            "jsonrpc": "2.0",
            "method": "database_api.get_dynamic_global_properties",
            "params": {},
            "id": 1,
        }
        async with self._client() as client:
            try:
                response = await client.post(self._config.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                raise UpstreamResponseError(
                    f"Global properties request failed: {e.response.status_code}"
                ) from e
            except httpx.RequestError as e:
                raise UpstreamConnectionError(f"Connection error: {e}") from e
            except ValueError as e:
                raise UpstreamResponseError(f"Invalid JSON response: {e}") from e

        if "error" in data:
            raise UpstreamResponseError(f"RPC error: {data['error']}")

        return GlobalProperties.from_rpc_response(data.get("result") or {})
