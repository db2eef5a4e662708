"""Last-writer-wins reduction of stake events into a snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from curation_rewards.utils import clock

from .models import StakeEntry, StakeEvent, StakeSnapshot

logger = logging.getLogger(__name__)


def calculate_cutoff_date(time_period_days: int, now: datetime | None = None) -> date:
    """
    Lower date bound for stake events of a run.

    Args:
        time_period_days: Days to look back from now
        now: Reference time. Uses the module clock if None.

    Returns:
        UTC date time_period_days before now
    """
    reference = now or clock.now()
    return (reference - timedelta(days=time_period_days)).date()


def reduce_stake_events(events: Iterable[StakeEvent]) -> StakeSnapshot:
    """
    Fold stake events into the latest stake per delegator.

    Single pass over the stream. For each delegator only the event with the
    highest block height is retained; on equal heights the later event in the
    stream wins. The source log is assumed to carry at most one update per
    delegator per block. Delegators whose retained stake is zero (full
    withdrawal) are dropped. Self-delegations are kept.

    Args:
        events: Stake events ordered by block height ascending

    Returns:
        StakeSnapshot with non-zero entries only
    """
    latest: dict[str, StakeEntry] = {}
    processed = 0

    for event in events:
        processed += 1
        current = latest.get(event.delegator)
        if current is None or event.block_height >= current.block_height:
            latest[event.delegator] = StakeEntry(
                amount_raw=event.amount_raw,
                block_height=event.block_height,
                timestamp=event.timestamp,
            )

    withdrawn = [d for d, entry in latest.items() if entry.amount_raw == 0]
    for delegator in withdrawn:
        del latest[delegator]

    logger.debug(
        f"Reduced {processed} events to {len(latest)} delegators "
        f"({len(withdrawn)} fully withdrawn)"
    )

    return StakeSnapshot(entries=latest, events_processed=processed)
