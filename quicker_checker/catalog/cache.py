"""
In-memory service catalog merged from two disagreeing upstream sources.

The primary source knows real unit spans but often reports a zero price;
the secondary source knows prices but has no unit spans. A refresh pulls
both, merges them into one ServiceVariation per id and swaps the whole
map in at once, so concurrent readers see either the old or the new
snapshot and never a half-built one.

Usage:
    cache = CatalogCache(primary, secondary, location_id="158078")
    await cache.refresh(force=True)
    minutes = cache.resolve_duration("99860007")
"""

import logging
from typing import Iterable, Optional

from quicker_checker.catalog.duration import FALLBACK_DURATION_MINUTES, resolve_duration
from quicker_checker.catalog.sources import PrimaryCatalogSource, SecondaryCatalogSource
from quicker_checker.errors import CatalogFetchFailure
from quicker_checker.schemas.catalog_schema import (
    PricingRecord,
    PrimaryServiceRecord,
    ServiceFamily,
    ServiceVariation,
)

logger = logging.getLogger(__name__)


def _entry_price(record: PricingRecord) -> Optional[float]:
    """First pricing entry's list price, else the flat price."""
    if record.price_entries:
        first = record.price_entries[0]
        for candidate in (first.existing_list_price, first.current_list_price, first.price):
            if candidate is not None:
                return candidate
    return record.price


def build_price_lookup(records: Iterable[PricingRecord]) -> dict[str, float]:
    """Map service id to price using the secondary source."""
    lookup: dict[str, float] = {}
    for record in records:
        price = _entry_price(record)
        if price is not None:
            lookup[str(record.id)] = float(price)
    return lookup


def coerce_family(raw: Optional[str]) -> Optional[ServiceFamily]:
    """Map an upstream service category label onto a ServiceFamily.

    Exact labels map silently. A label that contains exactly one family
    name maps with a warning; labels naming several families map to None.
    """
    if not raw:
        return None
    label = raw.strip().lower()
    for family in ServiceFamily:
        if label == family.value:
            return family

    contained = [family for family in ServiceFamily if family.value in label]
    if len(contained) == 1:
        logger.warning(
            "Upstream family %r matched %s by substring; add the service to the service map",
            raw,
            contained[0].value,
        )
        return contained[0]
    if contained:
        logger.warning(
            "Upstream family %r is ambiguous (%s); leaving it unclassified",
            raw,
            ", ".join(family.value for family in contained),
        )
    return None


def merge_catalogs(
    primary: Iterable[PrimaryServiceRecord], prices: dict[str, float]
) -> dict[str, ServiceVariation]:
    """Build canonical records, overriding price with a positive secondary price."""
    merged: dict[str, ServiceVariation] = {}
    for record in primary:
        service_id = str(record.id)
        price = record.price
        override = prices.get(service_id)
        if override is not None and override > 0:
            price = override
        merged[service_id] = ServiceVariation(
            id=service_id,
            name=record.name,
            service_family=coerce_family(record.service_family),
            catalog_duration_minutes=record.catalog_duration_minutes,
            unit_span_minutes=record.unit_span_minutes,
            is_add_on=record.is_add_on,
            multiplier_enabled=record.multiplier_enabled,
            unit_price=price,
        )
    return merged


class CatalogCache:
    """Injectable, process-lifetime cache of merged service metadata."""

    def __init__(
        self,
        primary: PrimaryCatalogSource,
        secondary: SecondaryCatalogSource,
        location_id: str,
        fallback_duration_minutes: int = FALLBACK_DURATION_MINUTES,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._location_id = location_id
        self._fallback_minutes = fallback_duration_minutes
        self._entries: dict[str, ServiceVariation] = {}
        self.last_error: Optional[str] = None

    @property
    def location_id(self) -> str:
        return self._location_id

    @property
    def is_populated(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, service_id: object) -> bool:
        return str(service_id) in self._entries

    def seed(self, variations: Iterable[ServiceVariation]) -> None:
        """Replace the cache contents directly, bypassing the sources."""
        self._entries = {str(v.id): v for v in variations}

    async def refresh(self, force: bool = False) -> None:
        """
        Reload the catalog from both sources.

        A non-forced refresh of a populated cache is a no-op. On any fetch
        failure the previous contents are kept and the failure is recorded
        in ``last_error``; stale data beats no data for booking.
        """
        if not force and self.is_populated:
            return

        try:
            primary = await self._primary.list_services(self._location_id)
            secondary = await self._secondary.list_services(self._location_id)
        except CatalogFetchFailure as exc:
            self.last_error = exc.message
            logger.warning(
                "Catalog refresh failed, keeping %d cached services: %s",
                len(self._entries),
                exc.message,
            )
            return

        merged = merge_catalogs(primary, build_price_lookup(secondary))
        self._entries = merged
        self.last_error = None
        logger.info("Catalog refreshed: %d services", len(merged))

    def get(self, service_id: str) -> Optional[ServiceVariation]:
        return self._entries.get(str(service_id))

    def lookup(self, service_id: str) -> ServiceVariation:
        """Return the cached record, or a zero-price placeholder for unknown ids."""
        variation = self.get(service_id)
        if variation is not None:
            return variation
        logger.warning(
            "Service %s missing from catalog (%d cached); booking with %d min / $0 fallback",
            service_id,
            len(self._entries),
            self._fallback_minutes,
        )
        return ServiceVariation(id=str(service_id))

    def find_by_name(self, name: str) -> Optional[ServiceVariation]:
        """Exact, case-insensitive name match."""
        wanted = name.strip().lower()
        for variation in self._entries.values():
            if variation.name.strip().lower() == wanted:
                return variation
        return None

    def all(self) -> list[ServiceVariation]:
        return list(self._entries.values())

    def resolve_duration(self, service_id: str) -> int:
        """Per-unit duration in minutes for a service id; never raises."""
        return resolve_duration(self.get(service_id), self._fallback_minutes)
