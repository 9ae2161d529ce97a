"""
End-to-end booking: compile -> submit -> optional check-in.

Each step is awaited in order within a single coroutine. Compile-input
errors and upstream rejections end the attempt with a failed result that
names the stage; catalog and check-in problems become warnings on an
otherwise successful result.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from quicker_checker.booking.check_in import decide_auto_check_in
from quicker_checker.booking.compiler import AppointmentCompiler
from quicker_checker.catalog.sources import BookingSubmitter, CheckInSubmitter
from quicker_checker.errors import BookingError, CheckInFailure
from quicker_checker.logging_context import get_request_logger, new_request_id, set_request_id
from quicker_checker.schemas.booking_schema import BookingRequest, BookingResult

logger = get_request_logger(__name__)


class BookingService:
    """Runs one booking attempt per call against injected collaborators."""

    def __init__(
        self,
        compiler: AppointmentCompiler,
        submitter: BookingSubmitter,
        check_in: CheckInSubmitter,
        tz: Optional[ZoneInfo] = None,
    ) -> None:
        self.compiler = compiler
        self._submitter = submitter
        self._check_in = check_in
        self._tz = tz

    async def warm_up(self) -> None:
        """One-shot catalog load at process start."""
        await self.compiler.catalog.refresh(force=False)

    async def book(self, request: BookingRequest) -> BookingResult:
        set_request_id(new_request_id())
        warnings: list[str] = []

        try:
            appointment = await self.compiler.compile(request)
            if self.compiler.catalog.last_error:
                warnings.append(
                    f"Catalog refresh failed; booked with cached data: {self.compiler.catalog.last_error}"
                )
            missing = [s.service_id for s in appointment.segments if s.service_id not in self.compiler.catalog]
            if missing:
                warnings.append(
                    f"Services not in catalog, default duration and $0 price used: {', '.join(sorted(set(missing)))}"
                )
            appointment_id = await self._submitter.create_appointment(appointment)
        except BookingError as exc:
            logger.error("Booking failed at %s: %s", exc.stage, exc.message)
            return BookingResult(
                success=False,
                stage=exc.stage,
                message=exc.message,
                errors=exc.errors,
                warnings=warnings,
            )

        logger.info("Appointment %s created for pet %s", appointment_id, request.pet_id)

        checked_in = False
        if decide_auto_check_in(appointment, tz=self._tz):
            try:
                await self._check_in.check_in(appointment_id)
                checked_in = True
            except CheckInFailure as exc:
                logger.warning("Appointment %s created but not checked in: %s", appointment_id, exc.message)
                warnings.append(f"Appointment created but check-in failed: {exc.message}")

        family = appointment.service_family.value
        message = (
            f"Checked in for {family}."
            if checked_in
            else f"Booked for {family.capitalize()}."
        )
        return BookingResult(
            success=True,
            message=message,
            appointment_id=appointment_id,
            appointment=appointment,
            checked_in=checked_in,
            warnings=warnings,
            created_at=datetime.now(timezone.utc),
        )
