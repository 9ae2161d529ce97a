"""Service catalog data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ServiceFamily(str, Enum):
    """Coarse service category used to pick a compilation strategy."""

    DAYCARE = "daycare"
    SPA = "spa"
    BOARDING = "boarding"
    EVALUATION = "evaluation"


class ServiceVariation(BaseModel):
    """Canonical, merged metadata for one bookable service."""

    id: str
    name: str = ""
    service_family: Optional[ServiceFamily] = None
    catalog_duration_minutes: int = 0
    unit_span_minutes: Optional[tuple[int, int]] = None
    is_add_on: bool = False
    multiplier_enabled: bool = False
    unit_price: float = 0.0


class PrimaryServiceRecord(BaseModel):
    """One entry from the primary catalog source (durations, unreliable price)."""

    id: str
    name: str = ""
    service_family: Optional[str] = None
    catalog_duration_minutes: int = 0
    unit_span_minutes: Optional[tuple[int, int]] = None
    is_add_on: bool = False
    multiplier_enabled: bool = False
    price: float = 0.0


class PriceEntry(BaseModel):
    existing_list_price: Optional[float] = None
    current_list_price: Optional[float] = None
    price: Optional[float] = None


class PricingRecord(BaseModel):
    """One entry from the secondary catalog source, used only for prices."""

    id: str
    price_entries: list[PriceEntry] = Field(default_factory=list)
    price: Optional[float] = None
