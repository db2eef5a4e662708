"""Exceptions for incentives module."""


class IncentiveError(Exception):
    """Base exception for reward distribution errors."""

    pass


class PaymentConfigError(IncentiveError):
    """
    Raised when a payment configuration violates its invariants.

    Carries every violated constraint, not just the first one.
    """

    def __init__(self, errors: list[str]):
        """
        Initialize PaymentConfigError.

        Args:
            errors: All violated constraints
        """
        super().__init__(f"Invalid payment config: {', '.join(errors)}")
        self.errors = list(errors)
