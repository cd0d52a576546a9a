"""
Lifecycle helpers for time-boxed staking incentives.
"""

from hexbytes import HexBytes

from clamm.exceptions.base import ClammValueError
from clamm.mining.types import Incentive, IncentiveKey, IncentiveStatus, TimeBreakdown
from clamm.types.aliases import Timestamp

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def _get_key(incentive: IncentiveKey | Incentive) -> IncentiveKey:
    return incentive.key if isinstance(incentive, Incentive) else incentive


def compute_incentive_id(key: IncentiveKey) -> HexBytes:
    """
    Calculate the ID used by the staker contract to identify the incentive.
    """

    return key.incentive_id


def get_incentive_status(incentive: IncentiveKey | Incentive, now: Timestamp) -> IncentiveStatus:
    key = _get_key(incentive)
    if now < key.start_time:
        return IncentiveStatus.PENDING
    if now >= key.end_time:
        return IncentiveStatus.ENDED
    return IncentiveStatus.ACTIVE


def get_incentive_duration(incentive: IncentiveKey | Incentive) -> int:
    return _get_key(incentive).duration


def get_incentive_progress(start_time: Timestamp, end_time: Timestamp, now: Timestamp) -> int:
    """
    The percentage of the incentive period that has elapsed, rounded half up to a whole number.
    """

    if end_time < start_time:
        raise ClammValueError(
            message=f"Incentive ends ({end_time}) before it starts ({start_time})"
        )

    if now < start_time:
        return 0
    if now >= end_time:
        return 100

    duration = end_time - start_time
    elapsed = now - start_time
    return (200 * elapsed + duration) // (2 * duration)


def _breakdown(remaining: int) -> TimeBreakdown:
    if remaining <= 0:
        return TimeBreakdown(
            days=0,
            hours=0,
            minutes=0,
            seconds=0,
            total_seconds=0,
            elapsed=True,
        )

    return TimeBreakdown(
        days=remaining // SECONDS_PER_DAY,
        hours=(remaining % SECONDS_PER_DAY) // SECONDS_PER_HOUR,
        minutes=(remaining % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
        seconds=remaining % SECONDS_PER_MINUTE,
        total_seconds=remaining,
        elapsed=False,
    )


def get_time_remaining(end_time: Timestamp, now: Timestamp) -> TimeBreakdown:
    return _breakdown(end_time - now)


def get_time_until_start(start_time: Timestamp, now: Timestamp) -> TimeBreakdown:
    return _breakdown(start_time - now)
