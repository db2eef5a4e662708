"""
Chain module - Hive adapters for the external data the core consumes.

This module provides:
- HiveClient: account history (delegations, curation rewards) and global properties
- VestsConverter: VESTS -> HP conversion with a TTL-cached exchange ratio
- HiveAccrualSource: curation reward totals per window or custom range
- Ports (StakeEventSource, UnitConverter, AccrualSource) for injecting fakes
"""

from .accrual import HiveAccrualSource
from .client import HiveClient, HiveConfig
from .converter import DEFAULT_GLOBAL_PROPS_TTL, VestsConverter
from .errors import UpstreamConnectionError, UpstreamError, UpstreamResponseError
from .models import (
    AccountOperation,
    AccrualStats,
    CurationReward,
    GlobalProperties,
    parse_asset,
)
from .ports import AccrualSource, StakeEventSource, UnitConverter

__all__ = [
    # Clients
    "HiveClient",
    "HiveConfig",
    "VestsConverter",
    "DEFAULT_GLOBAL_PROPS_TTL",
    "HiveAccrualSource",
    # Ports
    "StakeEventSource",
    "UnitConverter",
    "AccrualSource",
    # Models
    "AccountOperation",
    "AccrualStats",
    "CurationReward",
    "GlobalProperties",
    "parse_asset",
    # Errors
    "UpstreamError",
    "UpstreamConnectionError",
    "UpstreamResponseError",
]
