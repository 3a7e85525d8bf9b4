"""Quality-control collaborators backed by external services.

``GbifGeocoder``
    Point-in-country lookups through the GBIF reverse-geocode API, used by
    the location interpreter to check coordinates against the declared
    country.
"""

from __future__ import annotations

from .gbif import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CACHE_SIZE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_REVERSE_GEOCODE_ENDPOINT,
    DEFAULT_TIMEOUT,
    GbifGeocoder,
    pick_country_code,
)

__all__ = [
    "GbifGeocoder",
    "pick_country_code",
    "DEFAULT_REVERSE_GEOCODE_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_CACHE_SIZE",
]
