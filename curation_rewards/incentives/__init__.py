"""
Incentives module for allocating rewards and deriving the payout rate.

This module handles:
- Eligibility filtering and proportional allocation of a reward pool
- Dynamic payout rate from recent accrual, clamped to configured bounds
- Payment config validation

Main components:
- ProportionalAllocator: Splits a pool among eligible delegators by stake
- DynamicRateEngine: Computes the payout rate and per-delegator payments
- PaymentConfig: Validated rate bounds

Usage:
    from curation_rewards.incentives import (
        DynamicRateEngine,
        ProportionalAllocator,
        create_payment_config,
    )

    distribution = ProportionalAllocator().allocate(...)
    config = create_payment_config("alice")
    payments = await DynamicRateEngine(accrual_source).calculate_payments(
        distribution, filter_, config
    )
"""

from .allocator import ProportionalAllocator, calculate_payout_pool
from .errors import IncentiveError, PaymentConfigError
from .models import (
    DelegatorContribution,
    DelegatorPayment,
    DelegatorStake,
    DistributionResult,
    DynamicPaymentResult,
    RateDecision,
)
from .payment_config import (
    DEFAULT_BASE_RATE_PERCENT,
    DEFAULT_MAX_RATE_PERCENT,
    DEFAULT_MIN_RATE_PERCENT,
    PaymentConfig,
    create_payment_config,
    validate_payment_config,
)
from .rate_engine import (
    CUSTOM_WINDOW,
    DynamicRateEngine,
    calculate_rate_percent,
    select_window,
)

__all__ = [
    # Main components
    "ProportionalAllocator",
    "DynamicRateEngine",
    "calculate_payout_pool",
    "calculate_rate_percent",
    "select_window",
    "CUSTOM_WINDOW",
    # Configuration
    "PaymentConfig",
    "create_payment_config",
    "validate_payment_config",
    "DEFAULT_BASE_RATE_PERCENT",
    "DEFAULT_MIN_RATE_PERCENT",
    "DEFAULT_MAX_RATE_PERCENT",
    # Result models
    "DelegatorStake",
    "DelegatorContribution",
    "DistributionResult",
    "RateDecision",
    "DelegatorPayment",
    "DynamicPaymentResult",
    # Errors
    "IncentiveError",
    "PaymentConfigError",
]
