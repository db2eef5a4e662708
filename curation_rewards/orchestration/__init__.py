"""
Distribution orchestration - coordinates the reward calculation pipeline.

This module provides:
- DistributionOrchestrator: Stateless pipeline coordinator
- OrchestratorConfig: Defaults for interest and conversion concurrency

The orchestrator is pure business logic with no infrastructure concerns.
All dependencies are injected, making it easy to test.

Usage:
    from curation_rewards.orchestration import DistributionOrchestrator

    orchestrator = DistributionOrchestrator.create()
    result = await orchestrator.run(account, filter_, payment_config)
"""

from .models import DEFAULT_INTEREST_PERCENT, OrchestratorConfig
from .orchestrator import DistributionOrchestrator

__all__ = [
    "DistributionOrchestrator",
    "OrchestratorConfig",
    "DEFAULT_INTEREST_PERCENT",
]
