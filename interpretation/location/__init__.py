"""Interpretation of country and coordinate terms."""

from .coordinates import (
    FALLBACK_TRANSFORMS,
    IDENTITY,
    NEGATE_BOTH,
    NEGATE_LAT,
    NEGATE_LNG,
    SWAP_LAT_LNG,
    TRANSFORMS,
    CoordinateTransform,
    LatLng,
    parse_coordinates,
)
from .country import Country, CountryVocabulary, VocabularyLookup, default_vocabulary
from .datum import DatumReprojector, Wgs84Reprojector
from .matcher import LocationMatcher, ParsedLocation, PointCountryMatcher
from .parser import LocationParser

__all__ = [
    "Country",
    "CountryVocabulary",
    "VocabularyLookup",
    "default_vocabulary",
    "LatLng",
    "CoordinateTransform",
    "IDENTITY",
    "NEGATE_LAT",
    "NEGATE_LNG",
    "NEGATE_BOTH",
    "SWAP_LAT_LNG",
    "TRANSFORMS",
    "FALLBACK_TRANSFORMS",
    "parse_coordinates",
    "DatumReprojector",
    "Wgs84Reprojector",
    "LocationMatcher",
    "ParsedLocation",
    "PointCountryMatcher",
    "LocationParser",
]
