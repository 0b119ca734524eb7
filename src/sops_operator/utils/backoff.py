"""Retry delay derived from the persisted status timestamps.

There is no attempt counter. The delay for a failure is twice the time that
actually elapsed since the previous failure was recorded, so the schedule
(1s, 2s, 4s, ... capped at 6h) survives operator restarts: the only state is
``status.lastUpdate`` and ``status.status`` on the resource itself.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ..constants import FAST_RETRY_DELAY, MAX_RETRY_DELAY, STATUS_SUCCESS


def floor_to_second(value: datetime) -> datetime:
    """Drop sub-second precision."""
    return value.replace(microsecond=0)


def next_retry_delay(
    previous_last_update: datetime | None,
    previous_status: str,
    now: datetime,
) -> timedelta:
    """Compute the delay before retrying a failure observed at ``now``.

    Args:
        previous_last_update: ``status.lastUpdate`` before this failure, if any
        previous_status: ``status.status`` before this failure
        now: Time at which this failure is being recorded

    Returns:
        Delay before the next reconciliation attempt
    """
    if previous_last_update is None or previous_status == STATUS_SUCCESS:
        return FAST_RETRY_DELAY

    interval = now - floor_to_second(previous_last_update)
    # Clock skew can make the interval negative; clamp to [FAST_RETRY_DELAY, MAX_RETRY_DELAY]
    return max(min(interval * 2, MAX_RETRY_DELAY), FAST_RETRY_DELAY)
