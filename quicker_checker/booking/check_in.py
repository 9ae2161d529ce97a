"""Post-booking auto-check-in policy."""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from quicker_checker.schemas.booking_schema import CompiledAppointment
from quicker_checker.schemas.catalog_schema import ServiceFamily

logger = logging.getLogger(__name__)


def decide_auto_check_in(
    appointment: CompiledAppointment,
    tz: Optional[ZoneInfo] = None,
    today: Optional[date] = None,
) -> bool:
    """
    Check in automatically only for daycare that starts today.

    "Today" is the location's calendar date, not UTC. The platform answers
    a check-in on a future appointment with not-found, so future dates and
    every other family are never attempted.
    """
    if appointment.service_family is not ServiceFamily.DAYCARE:
        return False
    if today is None:
        today = datetime.now(tz).date()
    begin_local = appointment.begin_at.astimezone(tz).date()
    if begin_local != today:
        logger.debug("Skipping auto check-in: appointment is on %s, today is %s", begin_local, today)
        return False
    return True
