"""Data models for distribution orchestration."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_INTEREST_PERCENT = 10.0


@dataclass(frozen=True)
class OrchestratorConfig:
    """Configuration for the distribution orchestrator."""

    interest_percent: float = DEFAULT_INTEREST_PERCENT
    """Percentage kept off the top of the reward pool when the caller gives none."""

    max_concurrent_conversions: int = 16
    """Maximum number of unit conversions in flight at once."""
