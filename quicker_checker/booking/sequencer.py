"""
Back-to-back layout of a primary service and its add-ons.

The first id is the primary; every later id is an add-on attached to it.
Each segment starts exactly when the previous one ends, so the last
segment's end is also the latest end of the whole appointment.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.schemas.booking_schema import Segment
from quicker_checker.schemas.service_map_schema import ServiceMap

logger = logging.getLogger(__name__)


def anchor_add_ons(
    service_ids: list[str], catalog: CatalogCache, service_map: ServiceMap
) -> list[str]:
    """Prepend the primary spa service when every requested id is an add-on.

    Add-ons cannot be booked without a parent service.
    """
    ids = [str(sid) for sid in service_ids]
    variations = [catalog.get(sid) for sid in ids]
    if ids and all(v is not None and v.is_add_on for v in variations):
        primary = service_map.primary_spa_service_id
        logger.info(
            "Only add-ons requested (%s); prepending primary spa service %s",
            ", ".join(ids),
            primary,
        )
        return [primary] + ids
    return ids


def resource_for_service(
    service_id: str, service_map: ServiceMap, explicit: Optional[str] = None
) -> str:
    """Explicit assignment, else the per-service map, else the spa staff resource."""
    if explicit:
        return explicit
    return service_map.resource_for(service_id) or service_map.spa_resource_id


def sequence_segments(
    service_ids: list[str],
    start_at: datetime,
    catalog: CatalogCache,
    service_map: ServiceMap,
    resource_id: Optional[str] = None,
) -> list[Segment]:
    """Lay out segments back to back from ``start_at``.

    Raises:
        ValueError: If no service ids are given.
    """
    if not service_ids:
        raise ValueError("sequence_segments needs at least one service id")

    ids = anchor_add_ons(service_ids, catalog, service_map)
    primary_id = ids[0]
    segments: list[Segment] = []
    cursor = start_at

    for index, service_id in enumerate(ids):
        variation = catalog.lookup(service_id)
        end = cursor + timedelta(minutes=catalog.resolve_duration(service_id))
        segments.append(
            Segment(
                service_id=service_id,
                resource_id=resource_for_service(service_id, service_map, resource_id),
                begin_at=cursor,
                end_at=end,
                unit_price=variation.unit_price,
                parent_service_id=primary_id if index > 0 else None,
            )
        )
        logger.debug(
            "Segment %d: %s %s -> %s",
            index,
            variation.name or service_map.display_name(service_id),
            cursor.isoformat(),
            end.isoformat(),
        )
        cursor = end

    return segments
