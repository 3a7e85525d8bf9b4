"""Reconciliation of country name, country code and coordinates."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Tuple

from dwc.record import RawTerms
from dwc.terms import DwcTerm

from ..issues import IssueLedger, IssueType, ParsedField
from .coordinates import FALLBACK_TRANSFORMS, CoordinateTransform, parse_coordinates
from .country import VocabularyLookup, countries_from_config
from .datum import DatumReprojector, Wgs84Reprojector
from .matcher import COORDINATE_TERMS, LocationMatcher, ParsedLocation, PointCountryMatcher

logger = logging.getLogger(__name__)

VERBATIM_COORDINATE_TERMS = (DwcTerm.verbatimLatitude, DwcTerm.verbatimLongitude)


class LocationParser:
    """Interpret the country and coordinate terms of a record.

    Parameters
    ----------
    name_lookup, code_lookup:
        Resolve ``country`` and ``countryCode`` respectively.
    point_matcher:
        Finds the country containing a coordinate.
    reprojector:
        Optional; without one coordinates are taken as WGS84 unchecked.
    transforms:
        Corrections tried, in order, when a coordinate misses its country.
    """

    def __init__(
        self,
        name_lookup: VocabularyLookup,
        code_lookup: VocabularyLookup,
        point_matcher: PointCountryMatcher,
        reprojector: Optional[DatumReprojector] = None,
        transforms: Sequence[CoordinateTransform] = FALLBACK_TRANSFORMS,
    ):
        for label, collaborator in (
            ("country name lookup", name_lookup),
            ("country code lookup", code_lookup),
            ("point-in-country matcher", point_matcher),
        ):
            if collaborator is None:
                raise ValueError(f"A {label} is required")
        self.name_lookup = name_lookup
        self.code_lookup = code_lookup
        self.reprojector = reprojector
        self.matcher = LocationMatcher(point_matcher, transforms)

    @classmethod
    def from_config(
        cls, cfg: Mapping[str, Any], point_matcher: Optional[PointCountryMatcher] = None
    ) -> "LocationParser":
        """Build a parser with the packaged vocabulary and datum catalogue.

        Without ``point_matcher`` the GBIF reverse-geocode service is used.
        """
        vocabulary = countries_from_config(cfg)
        if point_matcher is None:
            from qc.gbif import GbifGeocoder

            point_matcher = GbifGeocoder.from_config(cfg, vocabulary)
        return cls(
            vocabulary.name_lookup,
            vocabulary.code_lookup,
            point_matcher,
            Wgs84Reprojector.from_config(cfg),
        )

    def parse(
        self,
        raw_country: Optional[str] = None,
        raw_country_code: Optional[str] = None,
        raw_lat: Optional[str] = None,
        raw_lng: Optional[str] = None,
        raw_datum: Optional[str] = None,
        coordinate_terms: Tuple[DwcTerm, DwcTerm] = COORDINATE_TERMS,
    ) -> ParsedField[ParsedLocation]:
        """Interpret one set of location terms.

        Succeeds only when the coordinate lies in the country named by
        ``country`` or ``countryCode``.  A country derived from the
        coordinate alone is returned but does not count as a match.  Every
        value that could be determined is returned even on failure.
        """

        ledger = IssueLedger()

        name = self.name_lookup(raw_country)
        ledger.extend(name.issues)
        if _present(raw_country) and not name.successful:
            ledger.add(IssueType.COUNTRY_INVALID, DwcTerm.country)

        code = self.code_lookup(raw_country_code)
        ledger.extend(code.issues)
        if _present(raw_country_code) and not code.successful:
            ledger.add(IssueType.COUNTRY_CODE_INVALID, DwcTerm.countryCode)

        name_country = name.result if name.successful else None
        code_country = code.result if code.successful else None
        if name_country != code_country:
            ledger.add(IssueType.COUNTRY_MISMATCH, DwcTerm.country, DwcTerm.countryCode)
        chosen = code_country or name_country

        coordinates = parse_coordinates(raw_lat, raw_lng, coordinate_terms)
        ledger.extend(coordinates.issues)
        if not coordinates.successful:
            return ParsedField.fail(ParsedLocation(chosen, None), ledger.issues)
        lat_lng = coordinates.result

        if self.reprojector is not None:
            reprojected = self.reprojector(lat_lng, raw_datum)
            ledger.extend(reprojected.issues)
            if reprojected.successful and reprojected.result is not None:
                lat_lng = reprojected.result

        matched = self.matcher.match(lat_lng, chosen, coordinate_terms)
        ledger.extend(matched.issues)
        location = matched.result
        successful = matched.successful and chosen is not None
        return ParsedField(successful, location, ledger.issues)

    def parse_record(self, raw: RawTerms) -> ParsedField[ParsedLocation]:
        """Interpret the location terms of ``raw``.

        Decimal coordinates are preferred; the verbatim ones are read only
        when neither decimal term is present.
        """

        coordinate_terms = COORDINATE_TERMS
        if DwcTerm.decimalLatitude not in raw and DwcTerm.decimalLongitude not in raw:
            if DwcTerm.verbatimLatitude in raw or DwcTerm.verbatimLongitude in raw:
                coordinate_terms = VERBATIM_COORDINATE_TERMS
        return self.parse(
            raw.get(DwcTerm.country),
            raw.get(DwcTerm.countryCode),
            raw.get(coordinate_terms[0]),
            raw.get(coordinate_terms[1]),
            raw.get(DwcTerm.geodeticDatum),
            coordinate_terms,
        )


def _present(raw: Optional[str]) -> bool:
    return bool(raw and raw.strip())


__all__ = ["LocationParser", "ParsedLocation", "VERBATIM_COORDINATE_TERMS"]
