"""Versioned business mapping data: which staff, family and name go with a service."""

from typing import Optional

from pydantic import BaseModel, Field

from quicker_checker.schemas.catalog_schema import ServiceFamily


class DaycareServices(BaseModel):
    weekday: str
    saturday: str
    sunday: str


class SpaBundle(BaseModel):
    """Add-ons that collapse into a single bundle service when all are picked."""

    name: str
    includes: list[str] = Field(default_factory=list)


class ServiceMap(BaseModel):
    """
    Business-specific service mappings loaded from JSON at startup.

    Keeps the compiler free of hardcoded ids. Bump ``version`` whenever
    the upstream catalog is reorganised so logs show which map was active.
    """

    version: int
    resource_by_service: dict[str, str] = Field(default_factory=dict)
    family_by_service: dict[str, ServiceFamily] = Field(default_factory=dict)
    names_by_service: dict[str, str] = Field(default_factory=dict)
    spa_resource_id: str
    boarding_resource_id: str
    primary_spa_service_id: str
    evaluation_service_id: Optional[str] = None
    daycare_services: Optional[DaycareServices] = None
    spa_bundle: Optional[SpaBundle] = None

    def resource_for(self, service_id: str) -> Optional[str]:
        return self.resource_by_service.get(str(service_id))

    def display_name(self, service_id: str) -> str:
        return self.names_by_service.get(str(service_id), str(service_id))
