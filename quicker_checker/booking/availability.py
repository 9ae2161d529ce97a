"""
Default daycare window when the platform returns no open times.

Daycare variations are flagged as not bookable online, so open-time
searches usually come back empty even though the location is open.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, TypedDict
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# (open hour, close hour) in location-local time
WEEKDAY_HOURS = (7, 19)
SATURDAY_HOURS = (9, 17)
SATURDAY = 5


class OpenWindow(TypedDict):
    """A single bookable window."""

    begin_at: datetime
    end_at: datetime


def fallback_daycare_window(
    day: date, tz: ZoneInfo, now: Optional[datetime] = None
) -> Optional[OpenWindow]:
    """Open window for ``day``, or None once closing time has passed.

    Same-day requests start at the next full hour once opening time
    has passed.
    """
    start_hour, end_hour = SATURDAY_HOURS if day.weekday() == SATURDAY else WEEKDAY_HOURS

    now_local = (now or datetime.now(tz)).astimezone(tz)
    if now_local.date() == day and now_local.hour >= start_hour:
        start_hour = now_local.hour + 1

    if start_hour >= end_hour:
        logger.debug("No fallback daycare window on %s: closed or time passed", day)
        return None

    return {
        "begin_at": datetime.combine(day, time(start_hour), tzinfo=tz),
        "end_at": datetime.combine(day, time(end_hour), tzinfo=tz),
    }
