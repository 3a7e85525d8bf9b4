"""Reconciliation of atomic year/month/day terms with free-text event dates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dwc.terms import DwcTerm

from ..issues import InterpretationIssue, IssueLedger, IssueType, ParsedField
from .accumulator import ChronoAccumulator, ChronoField
from .converter import TemporalValue, get_day, get_month, get_year, to_temporal
from .tokenizer import DATE_ORDERS, DMY, parse_atomic, parse_endpoint, split_period

logger = logging.getLogger(__name__)

ATOMIC_TERMS: Dict[ChronoField, Tuple[DwcTerm, ...]] = {
    ChronoField.YEAR: (DwcTerm.year,),
    ChronoField.MONTH: (DwcTerm.month,),
    ChronoField.DAY: (DwcTerm.day,),
}
EVENT_DATE_TERMS = (DwcTerm.eventDate,)

# dcterms:modified cannot predate the Unix epoch
MIN_MODIFIED_DATE = date(1970, 1, 1)


@dataclass(frozen=True)
class ParsedTemporalDates:
    """Outcome of interpreting the recorded date of one record.

    ``year``, ``month`` and ``day`` describe the atomic terms alone and may
    disagree with the range read from ``eventDate``.  ``to_date`` is only
    ever set together with ``from_date``.
    """

    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    from_date: Optional[TemporalValue] = None
    to_date: Optional[TemporalValue] = None
    issues: Tuple[InterpretationIssue, ...] = ()

    @property
    def issue_types(self) -> List[IssueType]:
        return [issue.issue_type for issue in self.issues]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "from_date": self.from_date.isoformat() if self.from_date else None,
            "to_date": self.to_date.isoformat() if self.to_date else None,
        }


EMPTY_DATES = ParsedTemporalDates()


def _clean(raw: Optional[str]) -> str:
    return raw.strip() if raw else ""


class TemporalParser:
    """Interpret recorded, identified and modified dates.

    Parameters
    ----------
    date_order:
        ``"DMY"`` or ``"MDY"``; the reading applied to numeric dates whose
        day and month cannot be told apart.  Such dates are flagged either
        way.
    min_year:
        Earliest plausible year.  The latest is next year.
    cache_size:
        Number of recorded-date inputs memoised.  ``0`` disables the cache.
    """

    def __init__(self, date_order: str = DMY, min_year: int = 1600, cache_size: int = 100_000):
        order = (date_order or "").upper()
        if order not in DATE_ORDERS:
            raise ValueError(f"Unknown date order {date_order!r}; expected one of {DATE_ORDERS}")
        self.date_order = order
        self.min_year = min_year
        self._parse_cached = lru_cache(maxsize=cache_size)(self._parse)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "TemporalParser":
        section = cfg.get("temporal", {})
        return cls(
            date_order=section.get("date_order", DMY),
            min_year=int(section.get("min_year", 1600)),
            cache_size=int(section.get("cache_size", 100_000)),
        )

    @property
    def max_year(self) -> int:
        return date.today().year + 1

    def parse(
        self,
        raw_year: Optional[str] = None,
        raw_month: Optional[str] = None,
        raw_day: Optional[str] = None,
        raw_event_date: Optional[str] = None,
    ) -> ParsedTemporalDates:
        """Interpret the atomic date terms together with ``eventDate``."""
        return self._parse_cached(_clean(raw_year), _clean(raw_month), _clean(raw_day), _clean(raw_event_date))

    def parse_event_date(self, raw_event_date: Optional[str]) -> ParsedTemporalDates:
        return self.parse("", "", "", raw_event_date)

    def cache_info(self):
        return self._parse_cached.cache_info()

    def _parse(self, raw_year: str, raw_month: str, raw_day: str, raw_event_date: str) -> ParsedTemporalDates:
        if not raw_year and not raw_event_date:
            return EMPTY_DATES

        ledger = IssueLedger()
        atomic = parse_atomic(raw_year, raw_month, raw_day)
        for raw, value, chrono_field in (
            (raw_year, atomic.year, ChronoField.YEAR),
            (raw_month, atomic.month, ChronoField.MONTH),
            (raw_day, atomic.day, ChronoField.DAY),
        ):
            if raw and value is None:
                ledger.add(IssueType.RECORDED_DATE_INVALID, *ATOMIC_TERMS[chrono_field])

        year = get_year(atomic, ledger, ATOMIC_TERMS, self.min_year, self.max_year)
        month = get_month(atomic, ledger, ATOMIC_TERMS)
        day = get_day(atomic, ledger, ATOMIC_TERMS)
        # only validated components take part in merging, so none is flagged twice
        base_acc = ChronoAccumulator(year, month, day if month is not None else None)
        base = None
        if year is not None:
            base = TemporalValue(year, month, base_acc.day)

        if not raw_event_date:
            return ParsedTemporalDates(year, month, day, base, None, ledger.issues)

        raw_from, raw_to = split_period(raw_event_date)
        from_acc = parse_endpoint(raw_from, None, self.date_order)
        to_acc = parse_endpoint(raw_to, from_acc.last_parsed, self.date_order)

        unreadable = from_acc.is_empty or (raw_to and to_acc.is_empty)
        ambiguous = from_acc.is_ambiguous or (raw_to and to_acc.is_ambiguous)
        if unreadable or ambiguous:
            logger.debug("Recorded date %r is %s", raw_event_date, "ambiguous" if ambiguous else "unreadable")
            ledger.add(IssueType.RECORDED_DATE_INVALID, *EVENT_DATE_TERMS)

        if to_acc.is_empty:
            from_acc = from_acc.merge_replace(base_acc)
        else:
            to_acc = to_acc.merge_absent(from_acc)

        from_date = to_temporal(from_acc, ledger, EVENT_DATE_TERMS, self.min_year, self.max_year)
        to_date = None
        if from_date is not None and not to_acc.is_empty:
            to_date = to_temporal(to_acc, ledger, EVENT_DATE_TERMS, self.min_year, self.max_year)
        return ParsedTemporalDates(year, month, day, from_date, to_date, ledger.issues)

    def parse_date_identified(self, raw: Optional[str]) -> ParsedField[TemporalValue]:
        """Interpret ``dateIdentified``; plausible between ``min_year`` and tomorrow."""
        return self._parse_bounded(
            raw,
            DwcTerm.dateIdentified,
            date(self.min_year, 1, 1),
            IssueType.IDENTIFIED_DATE_INVALID,
            IssueType.IDENTIFIED_DATE_UNLIKELY,
        )

    def parse_modified(self, raw: Optional[str]) -> ParsedField[TemporalValue]:
        """Interpret ``dcterms:modified``; plausible between 1970-01-01 and tomorrow."""
        return self._parse_bounded(
            raw,
            DwcTerm.modified,
            MIN_MODIFIED_DATE,
            IssueType.MODIFIED_DATE_INVALID,
            IssueType.MODIFIED_DATE_UNLIKELY,
        )

    def _parse_bounded(
        self,
        raw: Optional[str],
        term: DwcTerm,
        lower: date,
        invalid: IssueType,
        unlikely: IssueType,
    ) -> ParsedField[TemporalValue]:
        text = _clean(raw)
        if not text:
            return ParsedField.fail()

        ledger = IssueLedger()
        upper = date.today() + timedelta(days=1)
        acc = parse_endpoint(split_period(text)[0], None, self.date_order)
        if acc.is_empty:
            # a bare number that is not a year, e.g. "0"
            ledger.add(invalid, term)
            return ParsedField.fail(issues=ledger.issues)

        value = to_temporal(acc, ledger, (term,), 1, 9999, invalid, invalid)
        if value is None:
            return ParsedField.fail(issues=ledger.issues)
        earliest = date(value.year, value.month or 1, value.day or 1)
        if not lower <= earliest <= upper:
            ledger.add(unlikely, term)
            return ParsedField.fail(value, ledger.issues)
        if acc.is_ambiguous:
            ledger.add(invalid, term)
            return ParsedField.fail(value, ledger.issues)
        return ParsedField.success(value, ledger.issues)


_DEFAULT_PARSER: Optional[TemporalParser] = None


def default_parser() -> TemporalParser:
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = TemporalParser()
    return _DEFAULT_PARSER


def interpret_temporal(
    raw_year: Optional[str] = None,
    raw_month: Optional[str] = None,
    raw_day: Optional[str] = None,
    raw_event_date: Optional[str] = None,
) -> ParsedTemporalDates:
    """Interpret a recorded date with the default day-first parser."""
    return default_parser().parse(raw_year, raw_month, raw_day, raw_event_date)


def interpret_date_identified(raw: Optional[str]) -> ParsedField[TemporalValue]:
    return default_parser().parse_date_identified(raw)


def interpret_modified(raw: Optional[str]) -> ParsedField[TemporalValue]:
    return default_parser().parse_modified(raw)


__all__ = [
    "ATOMIC_TERMS",
    "EVENT_DATE_TERMS",
    "ParsedTemporalDates",
    "TemporalParser",
    "default_parser",
    "interpret_date_identified",
    "interpret_modified",
    "interpret_temporal",
]
