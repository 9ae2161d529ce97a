"""Shared time helpers used across the booking core."""

import math
from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(hours=24)


def to_wire_time(value: datetime) -> str:
    """Format an instant as the UTC ISO-8601 string the platform expects.

    Examples:
        >>> to_wire_time(datetime(2026, 1, 6, 12, 0, tzinfo=timezone.utc))
        '2026-01-06T12:00:00Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up rather than to even."""
    return int(math.floor(value + 0.5))


def whole_days_between(start: datetime, end: datetime) -> int:
    """Number of 24h periods between two instants, rounded half up."""
    return round_half_up((end - start) / ONE_DAY)
