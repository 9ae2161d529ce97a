"""
Error taxonomy for the booking core.

Each domain error names the stage it came from so a failed booking can
tell staff exactly which step went wrong. Catalog and check-in failures
are absorbed into warnings by their callers; the others end the attempt.
"""

from typing import Any, Optional


class BookingError(Exception):
    """Base error for any stage of a booking attempt."""

    stage = "booking"

    def __init__(self, message: str, errors: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors


class MissingServiceSelection(BookingError):
    """No service ids were requested; nothing can be compiled."""

    stage = "compile"


class CatalogFetchFailure(BookingError):
    """A catalog source could not be fetched or parsed."""

    stage = "catalog"


class UpstreamValidationRejected(BookingError):
    """The scheduling platform rejected the compiled appointment."""

    stage = "submit"


class BookingSubmissionFailed(BookingError):
    """The appointment could not be submitted for a non-validation reason."""

    stage = "submit"


class CheckInFailure(BookingError):
    """The appointment was created but could not be checked in."""

    stage = "check_in"


# ---------------------------------------------------------------------- #
# Transport-level errors raised by the HTTP client
# ---------------------------------------------------------------------- #


class UpstreamError(Exception):
    """Base error for scheduling platform request failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class UpstreamAuthError(UpstreamError):
    """Raised when the platform rejects the API key or token."""


class UpstreamNotFoundError(UpstreamError):
    """Raised when the platform reports the resource as missing."""


class UpstreamConnectionError(UpstreamError):
    """Raised when the platform cannot be reached or times out."""


class UpstreamRequestError(UpstreamError):
    """Raised for any other non-success response."""
