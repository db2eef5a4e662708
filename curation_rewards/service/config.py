"""
Service configuration management.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from dotenv import load_dotenv


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add shared service arguments to the parser.

    Arguments can be overridden by environment variables. Numeric defaults
    are passed as strings so argparse converts them and reports bad values.
    """

    parser.add_argument(
        "--hive.rpc_url",
        dest="hive_rpc_url",
        type=str,
        help="JSON-RPC API node URL.",
        default=os.environ.get("HIVE_API_URL", "https://api.hive.blog"),
    )

    parser.add_argument(
        "--hive.hafah_url",
        dest="hive_hafah_url",
        type=str,
        help="Account history (hafah) REST API URL.",
        default=os.environ.get("HAFAH_API_URL", "https://api.hive.blog/hafah-api"),
    )

    parser.add_argument(
        "--hive.timeout",
        dest="hive_timeout",
        type=float,
        help="Request timeout in seconds.",
        default=os.environ.get("REQUEST_TIMEOUT", "30"),
    )

    parser.add_argument(
        "--hive.global_props_ttl",
        dest="global_props_ttl",
        type=float,
        help="Seconds the VESTS/HP ratio stays cached.",
        default=os.environ.get("GLOBAL_PROPS_TTL", "300"),
    )

    parser.add_argument(
        "--payment.interest",
        dest="interest_percent",
        type=float,
        help="Percentage kept off the top of the reward pool.",
        default=os.environ.get("INTEREST_PERCENT", "10"),
    )

    parser.add_argument(
        "--payment.base_rate",
        dest="base_rate_percent",
        type=float,
        help="Base share of curation accrual to distribute (0-100).",
        default=os.environ.get("BASE_RATE_PERCENT", "15"),
    )

    parser.add_argument(
        "--payment.min_rate",
        dest="min_rate_percent",
        type=float,
        help="Minimum guaranteed payout rate.",
        default=os.environ.get("MIN_RATE_PERCENT", "10"),
    )

    parser.add_argument(
        "--payment.max_rate",
        dest="max_rate_percent",
        type=float,
        help="Maximum payout rate.",
        default=os.environ.get("MAX_RATE_PERCENT", "20"),
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "INFO"),
    )


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if not config.hive_rpc_url:
        raise ValueError("--hive.rpc_url is required (or set HIVE_API_URL env var)")

    if not config.hive_hafah_url:
        raise ValueError("--hive.hafah_url is required (or set HAFAH_API_URL env var)")

    if config.hive_timeout <= 0:
        raise ValueError("--hive.timeout must be positive")

    if not 0 <= config.interest_percent <= 100:
        raise ValueError("--payment.interest must be between 0 and 100")


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert config to dictionary for logging."""
    return {
        "hive_rpc_url": config.hive_rpc_url,
        "hive_hafah_url": config.hive_hafah_url,
        "hive_timeout": config.hive_timeout,
        "global_props_ttl": config.global_props_ttl,
        "interest_percent": config.interest_percent,
        "base_rate_percent": config.base_rate_percent,
        "min_rate_percent": config.min_rate_percent,
        "max_rate_percent": config.max_rate_percent,
        "log_level": config.log_level,
    }


def load_env() -> None:
    """Load a .env file from the working directory, if present."""
    load_dotenv()


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
