from quicker_checker.catalog.cache import CatalogCache, build_price_lookup, merge_catalogs
from quicker_checker.catalog.classifier import ServiceClassifier
from quicker_checker.catalog.duration import FALLBACK_DURATION_MINUTES, resolve_duration

__all__ = [
    "CatalogCache",
    "ServiceClassifier",
    "build_price_lookup",
    "merge_catalogs",
    "resolve_duration",
    "FALLBACK_DURATION_MINUTES",
]
