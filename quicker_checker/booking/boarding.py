"""
Multi-night boarding expansion.

The platform checks duration per unit and rejects one long segment, and
it rejects every duration-override field tried so far. The accepted shape
is one segment per night, each exactly one unit span long. Price is the
per-night price on every segment; the platform multiplies it when the
service is multiplier-enabled and the same service repeats.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.schemas.booking_schema import Segment
from quicker_checker.schemas.catalog_schema import ServiceVariation
from quicker_checker.schemas.service_map_schema import ServiceMap
from quicker_checker.utils import ONE_DAY, whole_days_between

logger = logging.getLogger(__name__)

DEFAULT_NIGHT_MINUTES = 1440


def count_nights(checkin_at: datetime, checkout_at: Optional[datetime] = None) -> int:
    """Nights between check-in and checkout, never fewer than one."""
    if checkout_at is None:
        checkout_at = checkin_at + ONE_DAY
    return max(1, whole_days_between(checkin_at, checkout_at))


def night_span_minutes(
    variation: Optional[ServiceVariation], default_minutes: int = DEFAULT_NIGHT_MINUTES
) -> int:
    """Length of one boarding unit.

    Only the unit span counts here; the nominal catalog duration for
    boarding is the maximum stay, not one night.
    """
    if variation is not None and variation.unit_span_minutes and variation.unit_span_minutes[0] > 0:
        return variation.unit_span_minutes[0]
    return default_minutes


def expand_boarding(
    service_id: str,
    checkin_at: datetime,
    catalog: CatalogCache,
    service_map: ServiceMap,
    checkout_at: Optional[datetime] = None,
    resource_id: Optional[str] = None,
    default_night_minutes: int = DEFAULT_NIGHT_MINUTES,
) -> list[Segment]:
    """Emit one segment per night starting at ``checkin_at``."""
    variation = catalog.lookup(service_id)
    nights = count_nights(checkin_at, checkout_at)
    span = timedelta(minutes=night_span_minutes(catalog.get(service_id), default_night_minutes))
    resource = (
        resource_id
        or service_map.resource_for(service_id)
        or service_map.boarding_resource_id
    )

    segments = [
        Segment(
            service_id=str(service_id),
            resource_id=resource,
            begin_at=checkin_at + i * span,
            end_at=checkin_at + (i + 1) * span,
            unit_price=variation.unit_price,
        )
        for i in range(nights)
    ]
    logger.info(
        "Boarding %s expanded to %d night(s) of %d min, ending %s",
        variation.name or service_id,
        nights,
        int(span.total_seconds() // 60),
        segments[-1].end_at.isoformat(),
    )
    return segments
