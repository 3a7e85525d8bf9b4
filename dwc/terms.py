from __future__ import annotations

from enum import Enum
from typing import Dict, List

DEFAULT_SCHEMA_URI = "http://rs.tdwg.org/dwc/terms/"
DCTERMS_URI = "http://purl.org/dc/terms/"


class DwcTerm(str, Enum):
    """Darwin Core terms read or referenced by the interpreters.

    Members compare equal to their simple term name so they can be used
    directly as dictionary keys of raw records.
    """

    occurrenceID = "occurrenceID"
    year = "year"
    month = "month"
    day = "day"
    eventDate = "eventDate"
    dateIdentified = "dateIdentified"
    modified = "modified"
    country = "country"
    countryCode = "countryCode"
    decimalLatitude = "decimalLatitude"
    decimalLongitude = "decimalLongitude"
    verbatimLatitude = "verbatimLatitude"
    verbatimLongitude = "verbatimLongitude"
    geodeticDatum = "geodeticDatum"

    @property
    def qualified_name(self) -> str:
        """Return the full term URI."""
        namespace = DCTERMS_URI if self is DwcTerm.modified else DEFAULT_SCHEMA_URI
        return f"{namespace}{self.value}"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


DWC_TERMS: List[str] = [term.value for term in DwcTerm]

_BY_LOWER: Dict[str, str] = {name.lower(): name for name in DWC_TERMS}


def resolve_term(term: str) -> str:
    """Return the local Darwin Core term from a URI or prefixed name.

    Known terms are matched case-insensitively and returned in their
    canonical spelling; unknown terms are returned stripped but otherwise
    unchanged.
    """

    term = term.strip()
    if term.startswith("http://") or term.startswith("https://"):
        term = term.rstrip("/").split("/")[-1]
    if ":" in term:
        term = term.split(":", 1)[1]
    return _BY_LOWER.get(term.lower(), term)


__all__ = ["DwcTerm", "DWC_TERMS", "DEFAULT_SCHEMA_URI", "DCTERMS_URI", "resolve_term"]
