"""Matching a coordinate against the declared country."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence, Tuple

from dwc.terms import DwcTerm

from ..issues import InterpretationIssue, IssueType, ParsedField
from .coordinates import FALLBACK_TRANSFORMS, IDENTITY, CoordinateTransform, LatLng
from .country import Country

logger = logging.getLogger(__name__)

COORDINATE_TERMS = (DwcTerm.decimalLatitude, DwcTerm.decimalLongitude)
COUNTRY_TERMS = (DwcTerm.country, DwcTerm.countryCode)


class PointCountryMatcher(Protocol):
    """Return the country containing a coordinate, or ``None``."""

    def __call__(self, lat_lng: LatLng) -> Optional[Country]:
        ...


@dataclass(frozen=True)
class ParsedLocation:
    country: Optional[Country] = None
    lat_lng: Optional[LatLng] = None
    transform: CoordinateTransform = IDENTITY

    def to_dict(self):
        return {
            "country_code": self.country.code if self.country else None,
            "country": self.country.title if self.country else None,
            "decimal_latitude": self.lat_lng.lat if self.lat_lng else None,
            "decimal_longitude": self.lat_lng.lng if self.lat_lng else None,
            "coordinate_transform": self.transform.name,
        }


class LocationMatcher:
    """Check that a coordinate lies in a country, correcting it if needed.

    The untouched coordinate is tried first, then each of ``transforms``
    in order.  Candidates are produced lazily, so the matcher is never
    asked about a transform after one has matched.
    """

    def __init__(
        self,
        point_matcher: PointCountryMatcher,
        transforms: Sequence[CoordinateTransform] = FALLBACK_TRANSFORMS,
    ):
        if point_matcher is None:
            raise ValueError("A point-in-country matcher is required")
        self.point_matcher = point_matcher
        self.transforms: Tuple[CoordinateTransform, ...] = tuple(transforms)

    def _candidates(self, lat_lng: LatLng) -> Iterator[Tuple[CoordinateTransform, LatLng]]:
        for transform in (IDENTITY,) + self.transforms:
            candidate = transform(lat_lng)
            if candidate.in_range:
                yield transform, candidate

    def match(
        self,
        lat_lng: LatLng,
        country: Optional[Country],
        coordinate_terms: Tuple[DwcTerm, ...] = COORDINATE_TERMS,
    ) -> ParsedField[ParsedLocation]:
        mismatch_terms = coordinate_terms + COUNTRY_TERMS

        if country is None:
            found = self.point_matcher(lat_lng)
            if found is None:
                return ParsedField.fail(ParsedLocation(None, lat_lng))
            issue = InterpretationIssue.of(IssueType.COUNTRY_DERIVED_FROM_COORDINATES, *mismatch_terms)
            return ParsedField.success(ParsedLocation(found, lat_lng), [issue])

        hit = next(
            (
                (transform, candidate)
                for transform, candidate in self._candidates(lat_lng)
                if _same_country(self.point_matcher(candidate), country)
            ),
            None,
        )
        if hit is None:
            logger.debug("No transform of %s falls in %s", lat_lng, country.code)
            issue = InterpretationIssue.of(IssueType.COUNTRY_COORDINATE_MISMATCH, *mismatch_terms)
            return ParsedField.fail(ParsedLocation(country, lat_lng), [issue])

        transform, candidate = hit
        issues = []
        if transform.issue is not None:
            logger.debug("Coordinate %s matched %s after %s", lat_lng, country.code, transform.name)
            issues.append(InterpretationIssue.of(transform.issue, *coordinate_terms))
        return ParsedField.success(ParsedLocation(country, candidate, transform), issues)


def _same_country(found: Optional[Country], expected: Country) -> bool:
    return found is not None and found.code == expected.code


__all__ = [
    "COORDINATE_TERMS",
    "COUNTRY_TERMS",
    "LocationMatcher",
    "ParsedLocation",
    "PointCountryMatcher",
]
