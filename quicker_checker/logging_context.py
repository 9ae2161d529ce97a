"""Request ID logging context for tracing one booking attempt across modules.

Provides a request_id-aware logger that attaches a correlation ID to every
log record, so the refresh, compile, submit and check-in steps of a single
booking can be followed in the logs.

Usage:
    from quicker_checker.logging_context import get_request_logger, set_request_id

    set_request_id("BOOK-1a2b3c")
    logger = get_request_logger(__name__)
    logger.info("Compiling appointment")  # record.request_id == "BOOK-1a2b3c"
"""

import logging
import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="NO_REQUEST_ID")

LOG_FORMAT = "%(asctime)s [%(request_id)s] [%(name)s] %(levelname)s: %(message)s"


def new_request_id() -> str:
    """Generate a short booking correlation ID."""
    return f"BOOK-{uuid.uuid4().hex[:6]}"


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def install_request_id_filter(handler: logging.Handler) -> None:
    """Attach a RequestIdFilter to a handler unless one is already there.

    A handler-level filter stamps records from every logger that reaches
    the handler, so formats using ``%(request_id)s`` never miss the field.
    """
    if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
        handler.addFilter(RequestIdFilter())


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
