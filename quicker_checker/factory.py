"""Wiring of the booking core against the live MyTime platform."""

from typing import NamedTuple

from quicker_checker.booking.compiler import AppointmentCompiler
from quicker_checker.booking.service import BookingService
from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.clients.mytime import (
    CompanyCatalogSource,
    MarketplaceCheckInSubmitter,
    MyTimeClient,
    PartnerAppointmentSubmitter,
    PartnerCatalogSource,
    marketplace_client,
    partner_client,
)
from quicker_checker.config import AppConfig


class BookingStack(NamedTuple):
    service: BookingService
    partner: MyTimeClient
    marketplace: MyTimeClient

    async def aclose(self) -> None:
        await self.partner.aclose()
        await self.marketplace.aclose()


def build_booking_stack(config: AppConfig) -> BookingStack:
    """Create clients, cache, compiler and service sharing one config."""
    partner = partner_client(config.mytime)
    marketplace = marketplace_client(config.mytime)
    cache = CatalogCache(
        PartnerCatalogSource(partner),
        CompanyCatalogSource(marketplace, config.mytime.company_id),
        location_id=config.mytime.location_id,
        fallback_duration_minutes=config.booking.fallback_duration_minutes,
    )
    compiler = AppointmentCompiler(cache, config.service_map, config.booking)
    service = BookingService(
        compiler,
        PartnerAppointmentSubmitter(partner),
        MarketplaceCheckInSubmitter(marketplace),
        tz=config.booking.tz,
    )
    return BookingStack(service=service, partner=partner, marketplace=marketplace)
