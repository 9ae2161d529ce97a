"""Shared test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Optional

import pytest

from quicker_checker.booking.compiler import AppointmentCompiler
from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.config import BookingConfig, load_service_map
from quicker_checker.errors import CatalogFetchFailure, CheckInFailure, UpstreamValidationRejected
from quicker_checker.schemas.booking_schema import CompiledAppointment
from quicker_checker.schemas.catalog_schema import (
    PriceEntry,
    PricingRecord,
    PrimaryServiceRecord,
    ServiceFamily,
    ServiceVariation,
)

LOCATION_ID = "158078"

DAYCARE_ID = "91629241"
EVALUATION_ID = "91420537"
BOARDING_ID = "91404079"
BATH_ID = "99860007"
TOWNIE_BATH_ID = "99860010"
NAILS_ID = "99860020"
TEETH_ID = "99860021"
FACIAL_ID = "99860022"
BUNDLE_ID = "99860030"


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_variation(
    service_id: str,
    name: str = "",
    unit_span: Optional[tuple[int, int]] = None,
    duration: int = 0,
    is_add_on: bool = False,
    price: float = 0.0,
    family: Optional[ServiceFamily] = None,
    multiplier_enabled: bool = False,
) -> ServiceVariation:
    """Helper to create a merged ServiceVariation."""
    return ServiceVariation(
        id=service_id,
        name=name,
        service_family=family,
        catalog_duration_minutes=duration,
        unit_span_minutes=unit_span,
        is_add_on=is_add_on,
        multiplier_enabled=multiplier_enabled,
        unit_price=price,
    )


def make_primary_record(
    service_id: str,
    name: str = "",
    unit_span: Optional[tuple[int, int]] = None,
    duration: int = 0,
    price: float = 0.0,
    is_add_on: bool = False,
    family: Optional[str] = None,
) -> PrimaryServiceRecord:
    return PrimaryServiceRecord(
        id=service_id,
        name=name,
        service_family=family,
        catalog_duration_minutes=duration,
        unit_span_minutes=unit_span,
        is_add_on=is_add_on,
        price=price,
    )


def make_pricing_record(service_id: str, list_price: Optional[float] = None, flat: Optional[float] = None) -> PricingRecord:
    entries = [PriceEntry(existing_list_price=list_price)] if list_price is not None else []
    return PricingRecord(id=service_id, price_entries=entries, price=flat)


CATALOG = [
    make_variation(DAYCARE_ID, "Daycare (M-F)", duration=600, price=38.0),
    make_variation(EVALUATION_ID, "Evaluation", unit_span=(240, 240), price=0.0),
    make_variation(
        BOARDING_ID,
        "Boarding - 1 Dog Townhome",
        unit_span=(1440, 1440),
        duration=20160,
        price=65.0,
        multiplier_enabled=True,
    ),
    make_variation(BATH_ID, "Bath", unit_span=(1, 1), duration=60, price=30.0),
    make_variation(TOWNIE_BATH_ID, "Townie Bath", unit_span=(15, 15), is_add_on=True, price=12.0),
    make_variation(NAILS_ID, "Nails", duration=10, is_add_on=True, price=15.0),
    make_variation(TEETH_ID, "Teeth brushing", duration=5, is_add_on=True, price=10.0),
    make_variation(FACIAL_ID, "Blueberry Facial", duration=5, is_add_on=True, price=10.0),
    make_variation(BUNDLE_ID, "All Add-Ons", duration=20, is_add_on=True, price=30.0),
]


class FakePrimarySource:
    """Primary catalog source that counts calls."""

    def __init__(self, records: Optional[list[PrimaryServiceRecord]] = None):
        self.records = records or []
        self.calls = 0

    async def list_services(self, location_id: str) -> list[PrimaryServiceRecord]:
        self.calls += 1
        return list(self.records)


class FakeSecondarySource:
    def __init__(self, records: Optional[list[PricingRecord]] = None):
        self.records = records or []
        self.calls = 0

    async def list_services(self, location_id: str) -> list[PricingRecord]:
        self.calls += 1
        return list(self.records)


class FailingSource:
    def __init__(self, message: str = "upstream unavailable"):
        self.message = message
        self.calls = 0

    async def list_services(self, location_id: str):
        self.calls += 1
        raise CatalogFetchFailure(self.message)


class FakeSubmitter:
    """Records submitted appointments and returns a fixed id."""

    def __init__(self, appointment_id: str = "555001", reject_with: Optional[list] = None):
        self.appointment_id = appointment_id
        self.reject_with = reject_with
        self.submitted: list[CompiledAppointment] = []

    async def create_appointment(self, appointment: CompiledAppointment) -> str:
        self.submitted.append(appointment)
        if self.reject_with is not None:
            raise UpstreamValidationRejected(
                "The scheduling platform rejected the appointment.", errors=self.reject_with
            )
        return self.appointment_id


class FakeCheckIn:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.checked_in: list[str] = []

    async def check_in(self, appointment_id: str) -> None:
        if self.fail:
            raise CheckInFailure(f"Check-in failed for appointment {appointment_id}: not found")
        self.checked_in.append(appointment_id)


@pytest.fixture
def service_map():
    return load_service_map()


@pytest.fixture
def booking_config():
    return BookingConfig()


@pytest.fixture
def primary_source():
    return FakePrimarySource(
        [
            make_primary_record(
                v.id,
                v.name,
                unit_span=v.unit_span_minutes,
                duration=v.catalog_duration_minutes,
                price=v.unit_price,
                is_add_on=v.is_add_on,
            )
            for v in CATALOG
        ]
    )


@pytest.fixture
def secondary_source():
    return FakeSecondarySource()


@pytest.fixture
def catalog(primary_source, secondary_source):
    """Cache seeded with the test catalog; refreshes re-read the same data."""
    cache = CatalogCache(primary_source, secondary_source, location_id=LOCATION_ID)
    cache.seed(CATALOG)
    return cache


@pytest.fixture
def compiler(catalog, service_map, booking_config):
    return AppointmentCompiler(catalog, service_map, booking_config)
