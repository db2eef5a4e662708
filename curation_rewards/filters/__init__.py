"""
Filters module - eligibility filters for a distribution run.

This module handles:
- Normalizing untrusted filter payloads into a canonical Filter
- Decoding/encoding the percent-encoded JSON transport

Usage:
    from curation_rewards.filters import decode_filter_or_default

    filter_ = decode_filter_or_default(request_param)
    if not filter_.applied:
        ...  # decode failed, defaults in use
"""

from .errors import DecodeError, FilterError
from .models import (
    DEFAULT_MINIMUM_STAKE,
    DEFAULT_TIME_PERIOD_DAYS,
    MAX_TIME_PERIOD_DAYS,
    AccrualWindow,
    Filter,
)
from .normalizer import (
    decode_filter,
    decode_filter_or_default,
    encode_filter,
    is_valid_filter_payload,
    normalize_filter,
)

__all__ = [
    # Models
    "Filter",
    "AccrualWindow",
    "DEFAULT_TIME_PERIOD_DAYS",
    "DEFAULT_MINIMUM_STAKE",
    "MAX_TIME_PERIOD_DAYS",
    # Normalization
    "normalize_filter",
    "is_valid_filter_payload",
    # Transport
    "decode_filter",
    "decode_filter_or_default",
    "encode_filter",
    # Errors
    "FilterError",
    "DecodeError",
]
