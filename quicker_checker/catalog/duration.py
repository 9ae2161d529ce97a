"""Per-unit duration resolution for catalog services."""

from typing import Optional

from quicker_checker.schemas.catalog_schema import ServiceVariation

FALLBACK_DURATION_MINUTES = 15


def resolve_duration(
    variation: Optional[ServiceVariation],
    fallback_minutes: int = FALLBACK_DURATION_MINUTES,
) -> int:
    """
    Return the authoritative per-unit duration in minutes.

    Precedence, first positive value wins:
      1. lower bound of ``unit_span_minutes``
      2. ``catalog_duration_minutes``
      3. ``fallback_minutes``

    The nominal catalog duration is often a cap (a 14-day maximum stay for
    a service sold in 24h units), so the unit span must win when present.
    Never raises: unknown services get the fallback.
    """
    if variation is None:
        return fallback_minutes
    span = variation.unit_span_minutes
    if span and span[0] > 0:
        return span[0]
    if variation.catalog_duration_minutes > 0:
        return variation.catalog_duration_minutes
    return fallback_minutes
