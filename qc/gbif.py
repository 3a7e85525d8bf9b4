"""GBIF reverse-geocode client used as the point-in-country matcher.

The module wraps the public GBIF ``geocode/reverse`` endpoint, which
returns the political and marine areas containing a coordinate.  Network
failures never propagate: after the configured retries the lookup simply
reports "no country", which the location interpreter treats as a
mismatch rather than an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import socket
import time
from functools import lru_cache
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import urlopen

from interpretation.location.coordinates import LatLng
from interpretation.location.country import Country, CountryVocabulary, default_vocabulary

DEFAULT_REVERSE_GEOCODE_ENDPOINT = "https://api.gbif.org/v1/geocode/reverse"
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_BACKOFF_FACTOR = 1.0
DEFAULT_CACHE_SIZE = 10000

# Area types returned by the service, most authoritative first.
POLITICAL_AREA_TYPES = ("Political", "EEZ")


@dataclass
class GbifGeocoder:
    """Point-in-country lookups against the GBIF reverse-geocode service with caching and retries."""

    reverse_geocode_endpoint: str = DEFAULT_REVERSE_GEOCODE_ENDPOINT
    timeout: float | None = DEFAULT_TIMEOUT
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    cache_size: int = DEFAULT_CACHE_SIZE
    vocabulary: CountryVocabulary = field(default_factory=default_vocabulary)
    _logger: Optional[logging.Logger] = None

    def __post_init__(self):
        if self._logger is None:
            self._logger = logging.getLogger(__name__)
        self._request_json = lru_cache(maxsize=self.cache_size)(self._request_json_uncached)

    @classmethod
    def from_config(
        cls, cfg: Mapping[str, Any], vocabulary: Optional[CountryVocabulary] = None
    ) -> "GbifGeocoder":
        """Create a geocoder from the ``[gbif]`` configuration section."""
        gbif_cfg = cfg.get("gbif", {})
        return cls(
            reverse_geocode_endpoint=gbif_cfg.get(
                "reverse_geocode_endpoint", DEFAULT_REVERSE_GEOCODE_ENDPOINT
            ),
            timeout=gbif_cfg.get("timeout", DEFAULT_TIMEOUT),
            retry_attempts=gbif_cfg.get("retry_attempts", DEFAULT_RETRY_ATTEMPTS),
            backoff_factor=gbif_cfg.get("backoff_factor", DEFAULT_BACKOFF_FACTOR),
            cache_size=gbif_cfg.get("cache_size", DEFAULT_CACHE_SIZE),
            vocabulary=vocabulary or default_vocabulary(),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request_json_uncached(self, url: str) -> Any | None:
        """Fetch ``url`` and decode JSON with retry logic, returning ``None`` on errors."""
        last_exception = None

        for attempt in range(self.retry_attempts):
            try:
                with urlopen(url, timeout=self.timeout) as resp:
                    data = json.load(resp)
                    self._logger.debug("GBIF geocode success: %s (attempt %d)", url, attempt + 1)
                    return data
            except (URLError, HTTPError, json.JSONDecodeError, socket.timeout) as e:
                last_exception = e
                self._logger.warning("GBIF geocode error on attempt %d: %s", attempt + 1, e)

                if attempt < self.retry_attempts - 1:
                    time.sleep(self.backoff_factor * (2**attempt))

        self._logger.error(
            "GBIF geocode failed after %d attempts: %s", self.retry_attempts, last_exception
        )
        return None

    def url_for(self, lat_lng: LatLng) -> str:
        params = {"lat": repr(lat_lng.lat), "lng": repr(lat_lng.lng)}
        return f"{self.reverse_geocode_endpoint}?{urlencode(params)}"

    def country_code(self, lat_lng: LatLng) -> Optional[str]:
        """Return the ISO alpha-2 code of the country containing ``lat_lng``."""
        data = self._request_json(self.url_for(lat_lng))
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            return None
        return pick_country_code(data)

    def __call__(self, lat_lng: LatLng) -> Optional[Country]:
        code = self.country_code(lat_lng)
        if code is None:
            return None
        country = self.vocabulary.by_code(code)
        if country is None:
            self._logger.debug("GBIF returned unknown country code %r for %s", code, lat_lng)
        return country


def pick_country_code(areas: Iterable[Dict[str, Any]]) -> Optional[str]:
    """Choose the country code from a reverse-geocode response.

    Political areas win over exclusive economic zones, which win over any
    other area carrying a code.
    """

    ranked: Dict[int, str] = {}
    for area in areas:
        if not isinstance(area, dict):
            continue
        code = area.get("isoCountryCode2Digit")
        if not code:
            continue
        area_type = area.get("type")
        rank = (
            POLITICAL_AREA_TYPES.index(area_type)
            if area_type in POLITICAL_AREA_TYPES
            else len(POLITICAL_AREA_TYPES)
        )
        ranked.setdefault(rank, code)
    if not ranked:
        return None
    return ranked[min(ranked)]


__all__ = [
    "DEFAULT_REVERSE_GEOCODE_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_CACHE_SIZE",
    "GbifGeocoder",
    "pick_country_code",
]
