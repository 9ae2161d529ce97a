"""Capability interfaces for the upstream collaborators the core depends on."""

from typing import Protocol

from quicker_checker.schemas.booking_schema import CompiledAppointment
from quicker_checker.schemas.catalog_schema import PricingRecord, PrimaryServiceRecord


class PrimaryCatalogSource(Protocol):
    """Catalog that reports unit spans and nominal durations."""

    async def list_services(self, location_id: str) -> list[PrimaryServiceRecord]: ...


class SecondaryCatalogSource(Protocol):
    """Catalog that reports reliable list prices."""

    async def list_services(self, location_id: str) -> list[PricingRecord]: ...


class BookingSubmitter(Protocol):
    async def create_appointment(self, appointment: CompiledAppointment) -> str: ...


class CheckInSubmitter(Protocol):
    async def check_in(self, appointment_id: str) -> None: ...
