from quicker_checker.booking.availability import fallback_daycare_window
from quicker_checker.booking.boarding import count_nights, expand_boarding
from quicker_checker.booking.check_in import decide_auto_check_in
from quicker_checker.booking.compiler import AppointmentCompiler
from quicker_checker.booking.requests import (
    build_boarding_request,
    build_daycare_request,
    build_evaluation_request,
    build_spa_request,
    daycare_service_for,
    select_spa_services,
)
from quicker_checker.booking.sequencer import sequence_segments
from quicker_checker.booking.service import BookingService

__all__ = [
    "AppointmentCompiler",
    "BookingService",
    "build_boarding_request",
    "build_daycare_request",
    "build_evaluation_request",
    "build_spa_request",
    "count_nights",
    "daycare_service_for",
    "decide_auto_check_in",
    "expand_boarding",
    "fallback_daycare_window",
    "select_spa_services",
    "sequence_segments",
]
