"""
Centralized configuration with environment variable overrides.

Connection settings and booking defaults come from the environment;
service ids, staff assignments and classifications come from the
versioned service map JSON. Nothing is hardcoded in compiler logic.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import ValidationError

from quicker_checker.logging_context import LOG_FORMAT, install_request_id_filter
from quicker_checker.schemas.service_map_schema import ServiceMap

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_MAP_PATH = Path(__file__).parent / "data" / "service_map.json"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class MyTimeConfig:
    """Scheduling platform connection settings."""

    base_url: str = os.getenv("MYTIME_BASE_URL", "https://www.mytime.com/api/mkp/v1")
    partner_base_url: str = os.getenv(
        "MYTIME_PARTNER_BASE_URL", "https://partners-api.mytime.com/api"
    )
    api_key: str = os.getenv("MYTIME_API_KEY", "")
    company_id: str = os.getenv("MYTIME_COMPANY_ID", "")
    location_id: str = os.getenv("MYTIME_LOCATION_ID", "158078")
    timeout_seconds: float = _safe_float("MYTIME_TIMEOUT_SECONDS", "30")


@dataclass(frozen=True)
class BookingConfig:
    """Booking compilation defaults."""

    fallback_duration_minutes: int = _safe_int("FALLBACK_DURATION_MINUTES", "15")
    boarding_night_minutes: int = _safe_int("BOARDING_NIGHT_MINUTES", "1440")
    note: str = os.getenv("BOOKING_NOTE", "Quick check-in via Quicker Checker")
    location_timezone: str = os.getenv("LOCATION_TIMEZONE", "America/New_York")
    boarding_checkin_hour_utc: int = _safe_int("BOARDING_CHECKIN_HOUR_UTC", "12")
    boarding_checkout_hour_utc: int = _safe_int("BOARDING_CHECKOUT_HOUR_UTC", "17")

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.location_timezone)


def load_service_map(path: Optional[Path] = None) -> ServiceMap:
    """Load and validate the service map JSON.

    Raises:
        ValueError: If the file is missing, not JSON, or fails validation.
    """
    path = Path(path or os.getenv("SERVICE_MAP_PATH") or DEFAULT_SERVICE_MAP_PATH)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        service_map = ServiceMap.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Invalid service map at {path}: {exc}") from exc
    logger.debug("Service map v%d loaded from %s", service_map.version, path)
    return service_map


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    mytime: MyTimeConfig = field(default_factory=MyTimeConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    service_map: ServiceMap = field(default_factory=load_service_map)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.fallback_duration_minutes < 1:
        raise ValueError(
            "FALLBACK_DURATION_MINUTES must be >= 1, "
            f"got {config.booking.fallback_duration_minutes}"
        )
    if config.booking.boarding_night_minutes < 1:
        raise ValueError(
            "BOARDING_NIGHT_MINUTES must be >= 1, "
            f"got {config.booking.boarding_night_minutes}"
        )
    if config.mytime.timeout_seconds <= 0:
        raise ValueError(
            f"MYTIME_TIMEOUT_SECONDS must be > 0, got {config.mytime.timeout_seconds}"
        )
    for name, hour in [
        ("BOARDING_CHECKIN_HOUR_UTC", config.booking.boarding_checkin_hour_utc),
        ("BOARDING_CHECKOUT_HOUR_UTC", config.booking.boarding_checkout_hour_utc),
    ]:
        if not 0 <= hour <= 23:
            raise ValueError(f"{name} must be between 0 and 23, got {hour}")
    try:
        config.booking.tz
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"LOCATION_TIMEZONE is not a known timezone: {config.booking.location_timezone!r}"
        ) from None
    if not config.mytime.location_id:
        raise ValueError("MYTIME_LOCATION_ID must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        install_request_id_filter(handler)
    logger.info(
        "Configuration loaded for location %s (service map v%d)",
        config.mytime.location_id,
        config.service_map.version,
    )
    return config


# Singleton instance
settings = load_config()
