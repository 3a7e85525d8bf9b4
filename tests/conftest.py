"""Shared fixtures: the packaged country vocabulary and a deterministic point matcher."""

from typing import List, Optional, Tuple

import pytest

from interpretation.location.coordinates import LatLng
from interpretation.location.country import Country, CountryVocabulary, default_vocabulary
from interpretation.location.datum import Wgs84Reprojector
from interpretation.location.parser import LocationParser

# (alpha-2, lat_min, lat_max, lng_min, lng_max); boxes do not overlap.
BOXES: List[Tuple[str, float, float, float, float]] = [
    ("FR", 42.0, 51.0, -5.0, 7.9),
    ("DE", 47.0, 55.0, 8.0, 15.0),
    ("AU", -44.0, -10.0, 113.0, 154.0),
    ("BR", -34.0, 5.0, -74.0, -34.0),
    ("US", 25.0, 49.0, -125.0, -67.0),
]


class BoxMatcher:
    """Point-in-country matcher over bounding boxes that records every call."""

    def __init__(self, vocabulary: CountryVocabulary):
        self.vocabulary = vocabulary
        self.calls: List[LatLng] = []

    def __call__(self, lat_lng: LatLng) -> Optional[Country]:
        self.calls.append(lat_lng)
        for code, lat_min, lat_max, lng_min, lng_max in BOXES:
            if lat_min <= lat_lng.lat <= lat_max and lng_min <= lat_lng.lng <= lng_max:
                return self.vocabulary.by_code(code)
        return None


@pytest.fixture(scope="session")
def vocabulary() -> CountryVocabulary:
    return default_vocabulary()


@pytest.fixture
def box_matcher(vocabulary) -> BoxMatcher:
    return BoxMatcher(vocabulary)


@pytest.fixture
def location_parser(vocabulary, box_matcher) -> LocationParser:
    return LocationParser(
        vocabulary.name_lookup,
        vocabulary.code_lookup,
        box_matcher,
        Wgs84Reprojector(assume_wgs84=False),
    )
