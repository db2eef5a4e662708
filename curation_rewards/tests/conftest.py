"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest

from curation_rewards.utils import reset_clock, set_clock

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_clock_after_test():
    """
    Reset the module clock after each test.

    This prevents clock state from leaking between tests that use
    set_clock() or the fixed_now fixture.
    """
    yield
    reset_clock()


@pytest.fixture
def fixed_now() -> datetime:
    """Freeze the module clock at 2024-06-15 12:00 UTC."""
    set_clock(lambda: FIXED_NOW)
    return FIXED_NOW
