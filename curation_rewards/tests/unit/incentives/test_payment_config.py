"""Tests for payment configuration."""

import pytest

from curation_rewards.incentives import (
    IncentiveError,
    PaymentConfig,
    PaymentConfigError,
    create_payment_config,
    validate_payment_config,
)


class TestValidatePaymentConfig:
    """Tests for validate_payment_config."""

    def test_valid_config_has_no_errors(self):
        assert validate_payment_config("owner", 15, 10, 20) == []

    def test_collects_every_violation(self):
        errors = validate_payment_config("  ", 120, -1, 150)

        assert errors == [
            "account is required",
            "base rate must be between 0 and 100%",
            "minimum rate cannot be negative",
            "maximum rate cannot exceed 100%",
        ]

    def test_min_greater_than_max(self):
        assert validate_payment_config("owner", 15, 20, 10) == [
            "minimum rate cannot be greater than maximum rate"
        ]

    @pytest.mark.parametrize(
        "rates",
        [
            (15, float("nan"), 20),
            (15, 10, float("nan")),
            (float("nan"), 10, 20),
            (15, float("-inf"), 20),
            (15, 10, float("inf")),
        ],
    )
    def test_non_finite_rates_rejected(self, rates):
        """NaN and infinite rates are reported, not silently accepted."""
        assert validate_payment_config("owner", *rates) == ["rates must be finite numbers"]


class TestPaymentConfig:
    """Tests for PaymentConfig construction."""

    def test_defaults(self):
        config = PaymentConfig(account="owner")

        assert config.base_rate_percent == 15.0
        assert config.min_rate_percent == 10.0
        assert config.max_rate_percent == 20.0

    def test_min_above_max_fails(self):
        """Construction fails and lists the min > max inconsistency."""
        with pytest.raises(PaymentConfigError) as exc_info:
            PaymentConfig(account="owner", min_rate_percent=20, max_rate_percent=10)

        assert "minimum rate cannot be greater than maximum rate" in exc_info.value.errors
        assert "Invalid payment config" in str(exc_info.value)

    def test_error_is_incentive_error(self):
        with pytest.raises(IncentiveError):
            PaymentConfig(account="")

    def test_equal_min_and_max_allowed(self):
        config = PaymentConfig(account="owner", min_rate_percent=12, max_rate_percent=12)

        assert config.to_dict()["min_rate_percent"] == 12

    def test_nan_minimum_fails(self):
        with pytest.raises(PaymentConfigError) as exc_info:
            PaymentConfig(account="owner", min_rate_percent=float("nan"))

        assert exc_info.value.errors == ["rates must be finite numbers"]


class TestCreatePaymentConfig:
    """Tests for create_payment_config."""

    def test_account_trimmed_and_lowercased(self):
        assert create_payment_config("  Owner ").account == "owner"

    def test_overrides_applied(self):
        config = create_payment_config("owner", base_rate_percent=18, max_rate_percent=25)

        assert config.base_rate_percent == 18
        assert config.max_rate_percent == 25
        assert config.min_rate_percent == 10.0

    def test_invalid_override_raises(self):
        with pytest.raises(PaymentConfigError):
            create_payment_config("owner", base_rate_percent=101)
