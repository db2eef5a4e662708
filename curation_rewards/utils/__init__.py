"""Shared utilities."""

from .clock import now, reset_clock, set_clock

__all__ = [
    "now",
    "set_clock",
    "reset_clock",
]
