"""
Curation rewards CLI - calculate delegator payouts for a Hive account.

Usage:
    curation-rewards calculate alice --time_period 7 --min_stake 100
    curation-rewards calculate alice --filters "%7B%22timePeriod%22%3A7...%7D" --json
    curation-rewards stats alice
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from curation_rewards.chain import (
    HiveAccrualSource,
    HiveClient,
    HiveConfig,
    UpstreamError,
    VestsConverter,
)
from curation_rewards.filters import (
    Filter,
    decode_filter_or_default,
    normalize_filter,
)
from curation_rewards.incentives import (
    DynamicPaymentResult,
    PaymentConfigError,
    create_payment_config,
)
from curation_rewards.orchestration import DistributionOrchestrator, OrchestratorConfig

from .config import add_args, check_config, config_to_dict, load_env, setup_logging

logger = logging.getLogger(__name__)


def _hive_config(args: argparse.Namespace) -> HiveConfig:
    return HiveConfig(
        rpc_url=args.hive_rpc_url,
        hafah_url=args.hive_hafah_url,
        timeout=args.hive_timeout,
    )


def build_filter(args: argparse.Namespace) -> Filter:
    """Filter from --filters, or from the individual filter flags."""
    if args.filters:
        return decode_filter_or_default(args.filters)

    payload: dict = {"excludedUsers": args.exclude or []}
    if args.time_period is not None:
        payload["timePeriod"] = args.time_period
    if args.min_stake is not None:
        payload["minimumHP"] = args.min_stake
    if args.accrual_window is not None:
        payload["curationPeriod"] = args.accrual_window
    if args.accrual_value is not None:
        payload["curationValue"] = args.accrual_value
    return normalize_filter(payload)


def print_result(result: DynamicPaymentResult) -> None:
    """Print a human-readable payout table."""
    distribution = result.distribution

    print(f"Period:         {result.period_days} days (window {result.window})")
    if distribution is not None:
        print(f"Cutoff date:    {distribution.cutoff_date}")
        print(f"Events:         {distribution.events_processed}")
        print(f"Total stake:    {distribution.total_stake_unit:,.3f} HP")
        print(f"Reward pool:    {distribution.total_payout_pool:,.3f} HIVE")
    print(f"Accrual:        {result.accrual_unit:,.4f} HP")
    print(f"Dynamic rate:   {result.rate_percent:.2f}%")
    print(f"Payout pool:    {result.payout_pool:,.4f} HIVE")
    print()

    if not result.payments:
        print("No eligible delegators.")
        return

    print(f"{'Delegator':<20} {'HP':>14} {'Share':>9} {'Payout':>12}")
    for payment in result.payments:
        print(
            f"{payment.delegator:<20} {payment.stake_unit:>14,.3f} "
            f"{payment.share_percent:>8.2f}% {payment.payout_amount:>12.3f}"
        )


async def _calculate(args: argparse.Namespace) -> DynamicPaymentResult:
    filter_ = build_filter(args)
    if not filter_.applied:
        logger.warning("Filters could not be decoded, using defaults")

    payment_config = create_payment_config(
        args.account,
        base_rate_percent=args.base_rate_percent,
        min_rate_percent=args.min_rate_percent,
        max_rate_percent=args.max_rate_percent,
    )

    orchestrator = DistributionOrchestrator.create(
        hive_config=_hive_config(args),
        global_props_ttl=args.global_props_ttl,
        config=OrchestratorConfig(interest_percent=args.interest_percent),
    )
    return await orchestrator.run(
        args.account,
        filter_,
        payment_config,
        reward_pool_base=args.pool,
    )


def cmd_calculate(args: argparse.Namespace) -> int:
    """Execute the calculate command."""
    try:
        result = asyncio.run(_calculate(args))
    except PaymentConfigError as e:
        print("ERROR: Invalid payment configuration:", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 2
    except UpstreamError as e:
        print(f"ERROR: Failed to fetch chain data: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(result)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Execute the stats command."""
    client = HiveClient(_hive_config(args))
    source = HiveAccrualSource(
        client, VestsConverter(client, ttl_seconds=args.global_props_ttl)
    )

    try:
        stats = asyncio.run(source.fetch_accrual_stats(args.account.strip().lower()))
    except UpstreamError as e:
        print(f"ERROR: Failed to fetch chain data: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
    else:
        print(f"Curation rewards for @{args.account}:")
        print(f"  24h: {stats.window_24h:,.4f} HP")
        print(f"  7d:  {stats.window_7d:,.4f} HP")
        print(f"  30d: {stats.window_30d:,.4f} HP")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="curation-rewards",
        description="Curation reward distribution for Hive delegators",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_args(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    calculate = subparsers.add_parser(
        "calculate", help="Calculate payouts for an account's delegators."
    )
    calculate.add_argument("account", help="Account receiving the delegations.")
    calculate.add_argument(
        "--filters", help="Percent-encoded JSON filters (overrides filter flags)."
    )
    calculate.add_argument("--time_period", type=int, help="Look-back period in days.")
    calculate.add_argument("--min_stake", type=float, help="Minimum delegated HP.")
    calculate.add_argument(
        "--exclude", nargs="*", help="Delegators to exclude from the distribution."
    )
    calculate.add_argument(
        "--accrual_window",
        choices=["24h", "7d", "30d"],
        help="Accrual window used as reward pool when --pool is not given.",
    )
    calculate.add_argument(
        "--accrual_value", type=float, help="Explicit reward pool override."
    )
    calculate.add_argument(
        "--pool", type=float, help="Reward pool base (default: resolved from accrual)."
    )
    calculate.add_argument("--json", action="store_true", help="Print JSON output.")
    calculate.set_defaults(func=cmd_calculate)

    stats = subparsers.add_parser("stats", help="Show curation accrual stats.")
    stats.add_argument("account", help="Curator account.")
    stats.add_argument("--json", action="store_true", help="Print JSON output.")
    stats.set_defaults(func=cmd_stats)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        check_config(args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(args.log_level)
    logger.debug(f"Config: {config_to_dict(args)}")

    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
