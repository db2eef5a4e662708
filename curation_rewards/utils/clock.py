"""Injectable UTC clock used for cutoff dates and accrual windows."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime


def _default_clock() -> datetime:
    """Default clock returning current UTC time."""
    return datetime.now(UTC)


# Clock function for testing - defaults to UTC now
_get_now: Callable[[], datetime] = _default_clock


def now() -> datetime:
    """Current time from the active clock."""
    return _get_now()


def set_clock(clock_fn: Callable[[], datetime]) -> None:
    """Set custom clock function for testing."""
    global _get_now
    _get_now = clock_fn


def reset_clock() -> None:
    """Reset clock to default UTC now."""
    global _get_now
    _get_now = _default_clock
