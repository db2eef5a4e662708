"""
Stake module - reconstructs current stake per delegator.

Usage:
    from curation_rewards.stake import calculate_cutoff_date, reduce_stake_events

    cutoff = calculate_cutoff_date(filter_.time_period_days)
    events = await source.fetch_stake_events(account, cutoff)
    snapshot = reduce_stake_events(events)
"""

from .models import StakeEntry, StakeEvent, StakeSnapshot
from .reducer import calculate_cutoff_date, reduce_stake_events

__all__ = [
    "StakeEvent",
    "StakeEntry",
    "StakeSnapshot",
    "calculate_cutoff_date",
    "reduce_stake_events",
]
