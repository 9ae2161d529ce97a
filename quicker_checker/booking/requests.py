"""
Builders that turn front-desk choices into BookingRequests.

Daycare is sold as three variations by day of week, spa add-ons collapse
into a bundle when all of them are picked, and boarding uses fixed
check-in and checkout hours on the chosen dates.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.config import BookingConfig
from quicker_checker.schemas.booking_schema import BookingRequest
from quicker_checker.schemas.catalog_schema import ServiceFamily
from quicker_checker.schemas.service_map_schema import ServiceMap

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def daycare_service_for(day: date, service_map: ServiceMap) -> str:
    """Weekday, Saturday or Sunday daycare variation for a calendar day.

    Raises:
        ValueError: If the service map has no daycare variations.
    """
    services = service_map.daycare_services
    if services is None:
        raise ValueError("Service map has no daycare_services configured")
    if day.weekday() == SATURDAY:
        return services.saturday
    if day.weekday() == SUNDAY:
        return services.sunday
    return services.weekday


def build_daycare_request(
    pet_id: str,
    start_at: datetime,
    service_map: ServiceMap,
    client_id: Optional[str] = None,
    tz=None,
) -> BookingRequest:
    local_day = start_at.astimezone(tz).date()
    return BookingRequest(
        service_type=ServiceFamily.DAYCARE,
        service_ids=[daycare_service_for(local_day, service_map)],
        start_at=start_at,
        pet_id=pet_id,
        client_id=client_id,
    )


def build_evaluation_request(
    pet_id: str,
    start_at: datetime,
    service_map: ServiceMap,
    client_id: Optional[str] = None,
) -> BookingRequest:
    if not service_map.evaluation_service_id:
        raise ValueError("Service map has no evaluation_service_id configured")
    return BookingRequest(
        service_type=ServiceFamily.EVALUATION,
        service_ids=[service_map.evaluation_service_id],
        start_at=start_at,
        pet_id=pet_id,
        client_id=client_id,
    )


def build_boarding_request(
    pet_id: str,
    service_id: str,
    checkin_day: date,
    checkout_day: Optional[date] = None,
    client_id: Optional[str] = None,
    booking_config: Optional[BookingConfig] = None,
) -> BookingRequest:
    """Boarding from the check-in day to the checkout day (default: next day)."""
    config = booking_config or BookingConfig()
    checkout_day = checkout_day or checkin_day + timedelta(days=1)
    start_at = datetime.combine(
        checkin_day, time(config.boarding_checkin_hour_utc), tzinfo=timezone.utc
    )
    end_at = datetime.combine(
        checkout_day, time(config.boarding_checkout_hour_utc), tzinfo=timezone.utc
    )
    return BookingRequest(
        service_type=ServiceFamily.BOARDING,
        service_ids=[service_id],
        start_at=start_at,
        end_at=end_at,
        pet_id=pet_id,
        client_id=client_id,
    )


def select_spa_services(
    primary_name: Optional[str],
    addon_names: list[str],
    catalog: CatalogCache,
    service_map: ServiceMap,
) -> list[str]:
    """Resolve spa selections by name to service ids, primary first.

    When every add-on in the configured bundle is chosen, the single
    bundle service replaces them. Names the catalog does not know are
    dropped with a warning.
    """
    ids: list[str] = []
    if primary_name:
        primary = catalog.find_by_name(primary_name)
        if primary is not None:
            ids.append(primary.id)
        else:
            logger.warning("Spa service %r not found in catalog", primary_name)

    bundle = service_map.spa_bundle
    chosen = {name.strip().lower() for name in addon_names}
    if bundle and bundle.includes and chosen >= {n.lower() for n in bundle.includes}:
        bundle_service = catalog.find_by_name(bundle.name)
        if bundle_service is not None:
            ids.append(bundle_service.id)
            return ids
        logger.warning("Spa bundle %r not found in catalog; booking add-ons separately", bundle.name)

    for name in addon_names:
        addon = catalog.find_by_name(name)
        if addon is None:
            logger.warning("Spa add-on %r not found in catalog", name)
            continue
        ids.append(addon.id)
    return ids


def build_spa_request(
    pet_id: str,
    start_at: datetime,
    service_ids: list[str],
    client_id: Optional[str] = None,
) -> BookingRequest:
    return BookingRequest(
        service_type=ServiceFamily.SPA,
        service_ids=service_ids,
        start_at=start_at,
        pet_id=pet_id,
        client_id=client_id,
    )
