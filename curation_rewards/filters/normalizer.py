"""Filter normalization and URL transport codec."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

from .errors import DecodeError
from .models import (
    DEFAULT_MINIMUM_STAKE,
    DEFAULT_TIME_PERIOD_DAYS,
    MAX_TIME_PERIOD_DAYS,
    AccrualWindow,
    Filter,
)

logger = logging.getLogger(__name__)

# Transport key -> internal field name. Both spellings are accepted on input.
_FIELD_ALIASES: dict[str, str] = {
    "timePeriod": "time_period_days",
    "minimumHP": "minimum_stake",
    "excludedUsers": "excluded_accounts",
    "applied": "applied",
    "curationPeriod": "accrual_window",
    "curationValue": "accrual_value",
}

_REQUIRED_TRANSPORT_KEYS = ("timePeriod", "minimumHP", "excludedUsers", "applied")


def _is_number(value: Any) -> bool:
    """True for finite int/float values. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _lookup(payload: Mapping[str, Any], transport_key: str) -> Any:
    """Read a field by transport key, falling back to the internal name."""
    if transport_key in payload:
        return payload[transport_key]
    return payload.get(_FIELD_ALIASES[transport_key])


def _normalize_time_period(value: Any) -> int:
    if not _is_number(value) or value <= 0 or value > MAX_TIME_PERIOD_DAYS:
        return DEFAULT_TIME_PERIOD_DAYS
    days = int(value)
    return days if days >= 1 else DEFAULT_TIME_PERIOD_DAYS


def _normalize_minimum_stake(value: Any) -> float:
    if not _is_number(value) or value < 0:
        return DEFAULT_MINIMUM_STAKE
    return float(value)


def _normalize_excluded(value: Any) -> frozenset[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(
        item.strip() for item in value if isinstance(item, str) and item.strip()
    )


def _normalize_accrual_window(value: Any) -> AccrualWindow:
    if isinstance(value, AccrualWindow):
        return value
    if isinstance(value, str):
        try:
            return AccrualWindow(value)
        except ValueError:
            pass
    return AccrualWindow.MONTH


def _normalize_accrual_value(value: Any) -> float:
    if not _is_number(value) or value < 0:
        return 0.0
    return float(value)


def is_valid_filter_payload(payload: Any) -> bool:
    """
    Strict structural check of a decoded transport payload.

    A payload is valid when all required keys are present with the right
    types and ranges. Invalid payloads are still usable: the normalizer
    repairs them field by field.
    """
    if not isinstance(payload, Mapping):
        return False

    if any(key not in payload for key in _REQUIRED_TRANSPORT_KEYS):
        return False

    time_period = payload["timePeriod"]
    if not _is_number(time_period) or not 1 <= time_period <= MAX_TIME_PERIOD_DAYS:
        return False

    minimum = payload["minimumHP"]
    if not _is_number(minimum) or minimum < 0:
        return False

    if not isinstance(payload["excludedUsers"], list):
        return False

    if not isinstance(payload["applied"], bool):
        return False

    period = payload.get("curationPeriod")
    if period and (
        not isinstance(period, str) or period not in {w.value for w in AccrualWindow}
    ):
        return False

    value = payload.get("curationValue")
    if value and not _is_number(value):
        return False

    return True


def normalize_filter(payload: Any) -> Filter:
    """
    Build a canonical Filter from an arbitrary decoded payload.

    Never raises. Each field that is missing, of the wrong type or out of
    range is replaced with its default; valid fields are kept. Time periods
    above 365 days are out of range and fall back to 30.

    Args:
        payload: Decoded payload (usually a dict from JSON)

    Returns:
        Normalized Filter
    """
    if not isinstance(payload, Mapping):
        return Filter()

    applied = _lookup(payload, "applied")

    return Filter(
        time_period_days=_normalize_time_period(_lookup(payload, "timePeriod")),
        minimum_stake=_normalize_minimum_stake(_lookup(payload, "minimumHP")),
        excluded_accounts=_normalize_excluded(_lookup(payload, "excludedUsers")),
        applied=applied if isinstance(applied, bool) else True,
        accrual_window=_normalize_accrual_window(_lookup(payload, "curationPeriod")),
        accrual_value=_normalize_accrual_value(_lookup(payload, "curationValue")),
    )


def decode_filter(encoded: str) -> Filter:
    """
    Decode a percent-encoded JSON filter and normalize it.

    Args:
        encoded: Percent-encoded JSON object

    Returns:
        Normalized Filter

    Raises:
        DecodeError: If the encoding or the JSON is malformed
    """
    if not isinstance(encoded, str):
        raise DecodeError(f"Expected encoded string, got {type(encoded).__name__}")

    try:
        decoded = unquote(encoded, errors="strict")
        payload = json.loads(decoded)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Failed to decode filters: {e}") from e

    if not is_valid_filter_payload(payload):
        logger.warning("Invalid filter payload, normalizing fields to defaults")

    return normalize_filter(payload)


def decode_filter_or_default(encoded: str) -> Filter:
    """
    Decode a filter, falling back to defaults with applied=False.

    Args:
        encoded: Percent-encoded JSON object

    Returns:
        Decoded filter, or the default filter marked as not applied
    """
    try:
        return decode_filter(encoded)
    except DecodeError as e:
        logger.warning(f"Using default filters: {e}")
        return Filter(applied=False)


def encode_filter(filter_: Filter) -> str:
    """Encode a filter for the URL transport (percent-encoded JSON)."""
    return quote(json.dumps(filter_.to_transport(), separators=(",", ":")), safe="")
