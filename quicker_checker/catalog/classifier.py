"""
Service family classification.

Resolution order:
  1. explicit ``service_type`` tag on the request
  2. the service map's ``family_by_service`` table
  3. the catalog's upstream ``service_family`` field
  4. keyword match on the service name (last resort, logged)

Name matching breaks silently when a service is renamed upstream, which
is why it only runs when everything else is silent.
"""

import logging
from typing import Optional

from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.schemas.booking_schema import BookingRequest
from quicker_checker.schemas.catalog_schema import ServiceFamily
from quicker_checker.schemas.service_map_schema import ServiceMap

logger = logging.getLogger(__name__)

# Checked in order; the first keyword found in the lowercased name wins.
NAME_KEYWORDS: list[tuple[str, ServiceFamily]] = [
    ("boarding", ServiceFamily.BOARDING),
    ("evaluation", ServiceFamily.EVALUATION),
    ("daycare", ServiceFamily.DAYCARE),
    ("bath", ServiceFamily.SPA),
    ("nail", ServiceFamily.SPA),
    ("spa", ServiceFamily.SPA),
]

# Excluded from boarding even though the name contains the keyword.
BOARDING_EXCLUSIONS = ("shelter",)

DEFAULT_FAMILY = ServiceFamily.SPA


def family_from_name(name: str) -> Optional[ServiceFamily]:
    lowered = name.lower()
    for keyword, family in NAME_KEYWORDS:
        if keyword not in lowered:
            continue
        if family is ServiceFamily.BOARDING and any(x in lowered for x in BOARDING_EXCLUSIONS):
            continue
        return family
    return None


class ServiceClassifier:
    """Decides which family a booking request belongs to."""

    def __init__(self, service_map: ServiceMap) -> None:
        self._service_map = service_map

    def classify_service(self, service_id: str, catalog: CatalogCache) -> ServiceFamily:
        """Family of a single service id, falling back through the resolution order."""
        mapped = self._service_map.family_by_service.get(str(service_id))
        if mapped is not None:
            return mapped

        variation = catalog.get(service_id)
        if variation is not None and variation.service_family is not None:
            return variation.service_family

        name = variation.name if variation is not None else ""
        guessed = family_from_name(name) if name else None
        if guessed is not None:
            logger.warning(
                "Classified service %s (%r) as %s by name match; add it to the service map",
                service_id,
                name,
                guessed.value,
            )
            return guessed

        logger.warning(
            "Could not classify service %s; defaulting to %s",
            service_id,
            DEFAULT_FAMILY.value,
        )
        return DEFAULT_FAMILY

    def classify(self, request: BookingRequest, catalog: CatalogCache) -> ServiceFamily:
        if request.service_type is not None:
            return request.service_type
        return self.classify_service(request.service_ids[0], catalog)
