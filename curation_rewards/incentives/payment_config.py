"""Payment configuration for the dynamic payout rate."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from .errors import PaymentConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_RATE_PERCENT = 15.0
DEFAULT_MIN_RATE_PERCENT = 10.0
DEFAULT_MAX_RATE_PERCENT = 20.0


def _is_finite(value: float) -> bool:
    """True for finite int/float values. Booleans are not rates."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_payment_config(
    account: str,
    base_rate_percent: float,
    min_rate_percent: float,
    max_rate_percent: float,
) -> list[str]:
    """
    Check payment configuration invariants.

    Returns:
        Every violated constraint (empty when valid)
    """
    errors: list[str] = []

    if not account or not account.strip():
        errors.append("account is required")

    rates = (base_rate_percent, min_rate_percent, max_rate_percent)
    if not all(_is_finite(rate) for rate in rates):
        errors.append("rates must be finite numbers")
        return errors

    if not 0 <= base_rate_percent <= 100:
        errors.append("base rate must be between 0 and 100%")

    if min_rate_percent < 0:
        errors.append("minimum rate cannot be negative")

    if max_rate_percent > 100:
        errors.append("maximum rate cannot exceed 100%")

    if min_rate_percent > max_rate_percent:
        errors.append("minimum rate cannot be greater than maximum rate")

    return errors


@dataclass(frozen=True)
class PaymentConfig:
    """
    Rate bounds for the dynamic payout rate of an account.

    Validated on construction: an invalid config is never created.
    """

    account: str
    """Account that distributes the rewards."""

    base_rate_percent: float = DEFAULT_BASE_RATE_PERCENT
    """Base share of accrual to distribute (0-100)."""

    min_rate_percent: float = DEFAULT_MIN_RATE_PERCENT
    """Guaranteed minimum rate."""

    max_rate_percent: float = DEFAULT_MAX_RATE_PERCENT
    """Maximum allowed rate."""

    def __post_init__(self) -> None:
        errors = validate_payment_config(
            self.account,
            self.base_rate_percent,
            self.min_rate_percent,
            self.max_rate_percent,
        )
        if errors:
            raise PaymentConfigError(errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "account": self.account,
            "base_rate_percent": self.base_rate_percent,
            "min_rate_percent": self.min_rate_percent,
            "max_rate_percent": self.max_rate_percent,
        }


def create_payment_config(account: str, **overrides: float) -> PaymentConfig:
    """
    Create a payment config for an account with default rate bounds.

    Args:
        account: Account name (trimmed and lowercased)
        **overrides: base_rate_percent, min_rate_percent and/or max_rate_percent

    Returns:
        Validated PaymentConfig

    Raises:
        PaymentConfigError: If the resulting config is invalid
    """
    config = PaymentConfig(account=(account or "").strip().lower(), **overrides)

    logger.info(
        f"Payment config for @{config.account}: base={config.base_rate_percent}%, "
        f"min={config.min_rate_percent}%, max={config.max_rate_percent}%"
    )
    return config
