"""HTTP clients and adapters for the MyTime scheduling platform."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx
from pydantic import ValidationError

from quicker_checker.config import MyTimeConfig
from quicker_checker.errors import (
    BookingSubmissionFailed,
    CatalogFetchFailure,
    CheckInFailure,
    UpstreamAuthError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRequestError,
    UpstreamValidationRejected,
)
from quicker_checker.schemas.booking_schema import CompiledAppointment
from quicker_checker.schemas.catalog_schema import PriceEntry, PricingRecord, PrimaryServiceRecord
from quicker_checker.utils import to_wire_time

logger = logging.getLogger(__name__)

VALIDATION_STATUSES = {400, 422}

T = TypeVar("T")


def _as_int(value: Optional[str]) -> Any:
    """Numeric ids go upstream as integers; anything else is passed through."""
    if value is None:
        return None
    text = str(value)
    return int(text) if text.isdigit() else text


def _error_payload(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "errors" in body:
        return body["errors"]
    return body


class MyTimeClient:
    """Thin async HTTP client for one MyTime API host."""

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        timeout: float = 30.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **headers,
        }
        self.http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.request(
                method, url, params=params, json=json, headers=self._headers
            )
        except httpx.TimeoutException as exc:
            raise UpstreamConnectionError(f"mytime_timeout: {method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamConnectionError(f"mytime_connection_failed: {exc}") from exc

        if response.status_code in {401, 403}:
            raise UpstreamAuthError("mytime_auth_failed", response.status_code)
        if response.status_code == 404:
            raise UpstreamNotFoundError(
                f"mytime_not_found: {method} {path}", 404, _error_payload(response)
            )
        if response.status_code >= 400:
            payload = _error_payload(response)
            logger.error("MyTime API error: %s %s -> %d %s", method, path, response.status_code, payload)
            raise UpstreamRequestError(
                f"mytime_error_{response.status_code}", response.status_code, payload
            )

        try:
            return response.json()
        except ValueError:
            return {"status_code": response.status_code, "text": response.text}


def partner_client(config: MyTimeConfig, http: httpx.AsyncClient | None = None) -> MyTimeClient:
    """Client for the location-wide Partner API (X-Api-Key auth)."""
    return MyTimeClient(
        config.partner_base_url,
        {"X-Api-Key": config.api_key},
        timeout=config.timeout_seconds,
        http=http,
    )


def marketplace_client(config: MyTimeConfig, http: httpx.AsyncClient | None = None) -> MyTimeClient:
    """Client for the marketplace booking API (Authorization header)."""
    return MyTimeClient(
        config.base_url,
        {"Authorization": config.api_key},
        timeout=config.timeout_seconds,
        http=http,
    )


# ---------------------------------------------------------------------- #
# Catalog sources
# ---------------------------------------------------------------------- #


def _unit_span(raw: Any) -> Optional[tuple[int, int]]:
    """First two integers of a unit range, else None."""
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        return None
    low, high = raw[0], raw[1]
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (low, high)):
        return None
    return (low, high)


def parse_primary_variation(raw: dict[str, Any]) -> PrimaryServiceRecord:
    return PrimaryServiceRecord(
        id=str(raw.get("mytime_id") or raw.get("id")),
        name=raw.get("name") or "",
        service_family=raw.get("service_name"),
        catalog_duration_minutes=int(raw.get("duration") or 0),
        unit_span_minutes=_unit_span(raw.get("unit_duration_range")),
        is_add_on=bool(raw.get("add_on", raw.get("is_add_on", False))),
        multiplier_enabled=bool(raw.get("multiplier_enabled", False)),
        price=float(raw.get("price") or 0),
    )


def parse_pricing_variation(raw: dict[str, Any]) -> PricingRecord:
    return PricingRecord(
        id=str(raw.get("id") or raw.get("mytime_id")),
        price_entries=[PriceEntry.model_validate(p) for p in raw.get("pricings") or []],
        price=raw.get("price"),
    )


def _parse_entries(body: Any, parse: Callable[[dict[str, Any]], T], source: str) -> list[T]:
    """Parse each catalog entry, skipping the ones that do not validate.

    Raises:
        CatalogFetchFailure: If the body has no usable ``variations`` list.
    """
    entries = body.get("variations") if isinstance(body, dict) else None
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise CatalogFetchFailure(
            f"{source} catalog response malformed: variations is {type(entries).__name__}"
        )

    records: list[T] = []
    for raw in entries:
        try:
            records.append(parse(raw))
        except (ValidationError, AttributeError, TypeError, ValueError) as exc:
            entry_id = (raw.get("mytime_id") or raw.get("id")) if isinstance(raw, dict) else raw
            logger.warning("Skipping malformed %s catalog entry %r: %s", source, entry_id, exc)
    return records


class PartnerCatalogSource:
    """Primary catalog: Partner API variations with unit duration ranges."""

    def __init__(self, client: MyTimeClient) -> None:
        self._client = client

    async def list_services(self, location_id: str) -> list[PrimaryServiceRecord]:
        try:
            body = await self._client.call(
                "GET", "/variations", params={"location_mytime_id": location_id}
            )
        except UpstreamError as exc:
            raise CatalogFetchFailure(f"Primary catalog fetch failed: {exc}") from exc
        return _parse_entries(body, parse_primary_variation, "Primary")


class CompanyCatalogSource:
    """Secondary catalog: company variations carrying reliable pricings."""

    def __init__(self, client: MyTimeClient, company_id: str) -> None:
        self._client = client
        self._company_id = company_id

    async def list_services(self, location_id: str) -> list[PricingRecord]:
        try:
            body = await self._client.call(
                "GET",
                f"/companies/{self._company_id}/variations",
                params={"location_id": location_id},
            )
        except UpstreamError as exc:
            raise CatalogFetchFailure(f"Pricing catalog fetch failed: {exc}") from exc
        return _parse_entries(body, parse_pricing_variation, "Pricing")


# ---------------------------------------------------------------------- #
# Booking and check-in
# ---------------------------------------------------------------------- #


def build_appointment_payload(appointment: CompiledAppointment) -> dict[str, Any]:
    """Partner API appointment body for a compiled appointment."""
    variations = []
    for segment in appointment.segments:
        item: dict[str, Any] = {
            "variation_mytime_id": _as_int(segment.service_id),
            "variation_employee_id": _as_int(segment.resource_id),
            "price": segment.unit_price,
            "variation_begin_at": to_wire_time(segment.begin_at),
            "variation_end_at": to_wire_time(segment.end_at),
        }
        if segment.parent_service_id is not None:
            item["parent_variation_mytime_id"] = _as_int(segment.parent_service_id)
        variations.append(item)

    payload: dict[str, Any] = {
        "location_mytime_id": _as_int(appointment.location_id),
        "employee_mytime_id": _as_int(appointment.resource_id),
        "child_id": _as_int(appointment.pet_id),
        "begin_at": to_wire_time(appointment.begin_at),
        "end_at": to_wire_time(appointment.end_at),
        "variations": variations,
        "note": appointment.note,
        "is_existing_customer": True,
        "send_notifications": False,
    }
    if appointment.client_id:
        payload["client_mytime_id"] = _as_int(appointment.client_id)
    return payload


class PartnerAppointmentSubmitter:
    """Creates appointments through the Partner API."""

    def __init__(self, client: MyTimeClient) -> None:
        self._client = client

    async def create_appointment(self, appointment: CompiledAppointment) -> str:
        payload = build_appointment_payload(appointment)
        try:
            body = await self._client.call("POST", "/appointments", json=payload)
        except UpstreamRequestError as exc:
            if exc.status_code in VALIDATION_STATUSES:
                raise UpstreamValidationRejected(
                    "The scheduling platform rejected the appointment.", errors=exc.payload
                ) from exc
            raise BookingSubmissionFailed(str(exc), errors=exc.payload) from exc
        except UpstreamError as exc:
            raise BookingSubmissionFailed(str(exc), errors=exc.payload) from exc

        created = body.get("appointment") or {}
        appointment_id = created.get("id") or created.get("mytime_id")
        if appointment_id is None:
            raise BookingSubmissionFailed(
                "Appointment response did not include an id.", errors=body
            )
        return str(appointment_id)


class MarketplaceCheckInSubmitter:
    """Marks an appointment as checked in."""

    def __init__(self, client: MyTimeClient) -> None:
        self._client = client

    async def check_in(self, appointment_id: str) -> None:
        try:
            await self._client.call("PUT", f"/appointments/{appointment_id}/check_in")
        except UpstreamError as exc:
            raise CheckInFailure(
                f"Check-in failed for appointment {appointment_id}: {exc}",
                errors=exc.payload,
            ) from exc
