"""Booking request, compiled appointment and result models."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from quicker_checker.schemas.catalog_schema import ServiceFamily


def _as_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so all arithmetic is on aware instants."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BookingRequest(BaseModel):
    """Staff intent to book one pet for one or more services."""

    service_type: Optional[ServiceFamily] = None
    service_ids: list[str] = Field(default_factory=list)
    start_at: datetime
    end_at: Optional[datetime] = None
    pet_id: str
    client_id: Optional[str] = None
    resource_id: Optional[str] = None

    @field_validator("service_ids", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        return value

    @field_validator("pet_id", "client_id", "resource_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("start_at", "end_at")
    @classmethod
    def _aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return None if value is None else _as_aware(value)


class Segment(BaseModel):
    """One service line item inside a compiled appointment."""

    service_id: str
    resource_id: str
    begin_at: datetime
    end_at: datetime
    unit_price: float = 0.0
    parent_service_id: Optional[str] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end_at - self.begin_at).total_seconds() // 60)

    @property
    def is_add_on(self) -> bool:
        return self.parent_service_id is not None


class CompiledAppointment(BaseModel):
    """Validation-ready appointment: end equals the latest segment end."""

    location_id: str
    resource_id: str
    client_id: Optional[str] = None
    pet_id: str
    begin_at: datetime
    end_at: datetime
    segments: list[Segment]
    note: str = ""
    service_family: ServiceFamily

    def latest_segment_end(self) -> datetime:
        return max(segment.end_at for segment in self.segments)


class BookingResult(BaseModel):
    """Outcome of a full booking attempt."""

    success: bool
    message: str
    stage: Optional[str] = None
    appointment_id: Optional[str] = None
    appointment: Optional[CompiledAppointment] = None
    checked_in: bool = False
    warnings: list[str] = Field(default_factory=list)
    errors: Optional[Any] = None
    created_at: Optional[datetime] = None
