"""Interpretation of whole records, one at a time or in parallel batches."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from dwc.record import RawTerms
from dwc.terms import DwcTerm

from .issues import InterpretationIssue, IssueType, ParsedField
from .location.matcher import ParsedLocation, PointCountryMatcher
from .location.parser import LocationParser
from .temporal.converter import TemporalValue
from .temporal.parser import ParsedTemporalDates, TemporalParser

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class InterpretedRecord:
    """Structured fields and issues of one interpreted record."""

    id: Optional[str]
    temporal: ParsedTemporalDates
    location: ParsedField[ParsedLocation]
    date_identified: ParsedField[TemporalValue]
    modified: ParsedField[TemporalValue]

    @property
    def issues(self) -> Tuple[InterpretationIssue, ...]:
        """All issues, in the order the interpreters ran."""
        return (
            self.temporal.issues
            + self.location.issues
            + self.date_identified.issues
            + self.modified.issues
        )

    @property
    def issue_types(self) -> List[IssueType]:
        return [issue.issue_type for issue in self.issues]

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to a JSON-serializable row keyed by Darwin Core names."""

        temporal = self.temporal
        event_date = None
        if temporal.from_date is not None:
            event_date = temporal.from_date.isoformat()
            if temporal.to_date is not None and temporal.to_date != temporal.from_date:
                event_date = f"{event_date}/{temporal.to_date.isoformat()}"

        location = self.location.result or ParsedLocation()
        return {
            "id": self.id,
            "year": temporal.year,
            "month": temporal.month,
            "day": temporal.day,
            "eventDate": event_date,
            "startDate": temporal.from_date.isoformat() if temporal.from_date else None,
            "endDate": temporal.to_date.isoformat() if temporal.to_date else None,
            "dateIdentified": _iso(self.date_identified),
            "modified": _iso(self.modified),
            "countryCode": location.country.code if location.country else None,
            "country": location.country.title if location.country else None,
            "decimalLatitude": location.lat_lng.lat if location.lat_lng else None,
            "decimalLongitude": location.lat_lng.lng if location.lat_lng else None,
            "coordinateTransform": location.transform.name,
            "locationMatched": self.location.successful,
            "issues": [issue.issue_type.value for issue in self.issues],
        }


def _iso(parsed: ParsedField[TemporalValue]) -> Optional[str]:
    if parsed.successful and parsed.result is not None:
        return parsed.result.isoformat()
    return None


class RecordInterpreter:
    """Run the temporal and location interpreters over raw records."""

    def __init__(self, temporal: TemporalParser, location: LocationParser):
        if temporal is None or location is None:
            raise ValueError("Both a temporal parser and a location parser are required")
        self.temporal = temporal
        self.location = location

    @classmethod
    def from_config(
        cls, cfg: Mapping[str, Any], point_matcher: Optional[PointCountryMatcher] = None
    ) -> "RecordInterpreter":
        return cls(TemporalParser.from_config(cfg), LocationParser.from_config(cfg, point_matcher))

    def interpret(self, raw: RawTerms) -> InterpretedRecord:
        temporal = self.temporal.parse(
            raw.get(DwcTerm.year),
            raw.get(DwcTerm.month),
            raw.get(DwcTerm.day),
            raw.get(DwcTerm.eventDate),
        )
        location = self.location.parse_record(raw)
        identified = self.temporal.parse_date_identified(raw.get(DwcTerm.dateIdentified))
        modified = self.temporal.parse_modified(raw.get(DwcTerm.modified))
        return InterpretedRecord(raw.id, temporal, location, identified, modified)

    def interpret_batch(
        self, records: Iterable[RawTerms], max_workers: int = DEFAULT_MAX_WORKERS
    ) -> List[InterpretedRecord]:
        """Interpret ``records`` on a thread pool, keeping their input order."""

        records = list(records)
        logger.info("Interpreting %d records with %d workers", len(records), max_workers)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(self.interpret, records))
        flagged = sum(1 for result in results if result.issues)
        logger.info("Interpretation complete: %d/%d records carry issues", flagged, len(results))
        return results


def max_workers_from_config(cfg: Mapping[str, Any]) -> int:
    return int(cfg.get("batch", {}).get("max_workers", DEFAULT_MAX_WORKERS))


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "InterpretedRecord",
    "RecordInterpreter",
    "max_workers_from_config",
]
