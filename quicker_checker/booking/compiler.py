"""
Appointment compiler: staff intent in, validation-ready payload out.

The platform accepts an appointment only when its end equals the latest
end among its (non-buffer) segments. Segment durations come from the
merged catalog, so the compiler force-refreshes it first, then picks the
boarding expander or the back-to-back sequencer based on the family.

Usage:
    compiler = AppointmentCompiler(cache, settings.service_map, settings.booking)
    appointment = await compiler.compile(request)
"""

from typing import Optional

from quicker_checker.booking.boarding import DEFAULT_NIGHT_MINUTES, expand_boarding
from quicker_checker.booking.sequencer import sequence_segments
from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.catalog.classifier import ServiceClassifier
from quicker_checker.config import BookingConfig
from quicker_checker.errors import MissingServiceSelection
from quicker_checker.logging_context import get_request_logger
from quicker_checker.schemas.booking_schema import BookingRequest, CompiledAppointment, Segment
from quicker_checker.schemas.catalog_schema import ServiceFamily
from quicker_checker.schemas.service_map_schema import ServiceMap

logger = get_request_logger(__name__)

DEFAULT_NOTE = "Quick check-in via Quicker Checker"


class AppointmentCompiler:
    """Turns a BookingRequest into a CompiledAppointment."""

    def __init__(
        self,
        catalog: CatalogCache,
        service_map: ServiceMap,
        booking_config: Optional[BookingConfig] = None,
        classifier: Optional[ServiceClassifier] = None,
    ) -> None:
        self.catalog = catalog
        self.service_map = service_map
        self._note = booking_config.note if booking_config else DEFAULT_NOTE
        self._night_minutes = (
            booking_config.boarding_night_minutes if booking_config else DEFAULT_NIGHT_MINUTES
        )
        self._classifier = classifier or ServiceClassifier(service_map)

    async def compile(self, request: BookingRequest) -> CompiledAppointment:
        """Refresh the catalog and compile the request.

        Raises:
            MissingServiceSelection: If the request names no services.
        """
        if not request.service_ids:
            raise MissingServiceSelection("Select at least one service before booking.")

        await self.catalog.refresh(force=True)
        return self.compile_cached(request)

    def compile_cached(self, request: BookingRequest) -> CompiledAppointment:
        """Compile against the catalog as it is now, without refreshing."""
        if not request.service_ids:
            raise MissingServiceSelection("Select at least one service before booking.")

        family = self._classifier.classify(request, self.catalog)
        segments = self._build_segments(request, family)
        appointment = CompiledAppointment(
            location_id=self.catalog.location_id,
            resource_id=segments[0].resource_id,
            client_id=request.client_id,
            pet_id=request.pet_id,
            begin_at=request.start_at,
            end_at=max(segment.end_at for segment in segments),
            segments=segments,
            note=self._note,
            service_family=family,
        )
        logger.info(
            "Compiled %s appointment for pet %s: %d segment(s) %s -> %s",
            family.value,
            request.pet_id,
            len(segments),
            appointment.begin_at.isoformat(),
            appointment.end_at.isoformat(),
        )
        return appointment

    def _build_segments(self, request: BookingRequest, family: ServiceFamily) -> list[Segment]:
        if family is ServiceFamily.BOARDING:
            service_id = request.service_ids[0]
            if len(request.service_ids) > 1:
                logger.warning(
                    "Boarding uses one service per stay; ignoring %s",
                    ", ".join(request.service_ids[1:]),
                )
            return expand_boarding(
                service_id,
                request.start_at,
                self.catalog,
                self.service_map,
                checkout_at=request.end_at,
                resource_id=request.resource_id,
                default_night_minutes=self._night_minutes,
            )
        return sequence_segments(
            request.service_ids,
            request.start_at,
            self.catalog,
            self.service_map,
            resource_id=request.resource_id,
        )
