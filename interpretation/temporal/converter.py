"""Conversion of :class:`ChronoAccumulator` readings into temporal values."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Mapping, Optional, Tuple, Union

from dwc.terms import DwcTerm

from ..issues import IssueLedger, IssueType
from .accumulator import ChronoAccumulator, ChronoField

logger = logging.getLogger(__name__)

Terms = Union[Tuple[DwcTerm, ...], Mapping[ChronoField, Tuple[DwcTerm, ...]]]


class Granularity(str, Enum):
    YEAR = "YEAR"
    YEAR_MONTH = "YEAR_MONTH"
    DATE = "DATE"
    DATE_TIME = "DATE_TIME"


@dataclass(frozen=True)
class TemporalValue:
    """A date known down to one of the four granularities.

    Components below the granularity are always ``None``; a day without a
    month or a time without a day never occurs.
    """

    year: int
    month: Optional[int] = None
    day: Optional[int] = None
    time: Optional[time] = None

    @property
    def granularity(self) -> Granularity:
        if self.month is None:
            return Granularity.YEAR
        if self.day is None:
            return Granularity.YEAR_MONTH
        if self.time is None:
            return Granularity.DATE
        return Granularity.DATE_TIME

    def as_date(self) -> Optional[date]:
        """Return the calendar date, when the value is at least day precise."""
        if self.day is None:
            return None
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        text = f"{self.year:04d}"
        if self.month is not None:
            text += f"-{self.month:02d}"
        if self.day is not None:
            text += f"-{self.day:02d}"
        if self.time is not None:
            timespec = "minutes" if not (self.time.second or self.time.microsecond) else "auto"
            text += "T" + self.time.isoformat(timespec=timespec)
        return text

    def to_accumulator(self) -> ChronoAccumulator:
        return ChronoAccumulator(self.year, self.month, self.day, self.time)

    def __str__(self) -> str:
        return self.isoformat()


def _terms_for(terms: Terms, chrono_field: ChronoField) -> Tuple[DwcTerm, ...]:
    if isinstance(terms, Mapping):
        return tuple(terms.get(chrono_field, ()))
    return tuple(terms)


def get_year(
    acc: ChronoAccumulator,
    ledger: IssueLedger,
    terms: Terms,
    min_year: int,
    max_year: int,
    unlikely: IssueType = IssueType.RECORDED_DATE_UNLIKELY,
) -> Optional[int]:
    """Return the year when it lies within ``[min_year, max_year]``."""

    if acc.year is None:
        return None
    if not min_year <= acc.year <= max_year:
        logger.debug("Year %s outside [%s, %s]", acc.year, min_year, max_year)
        ledger.add(unlikely, *_terms_for(terms, ChronoField.YEAR))
        return None
    return acc.year


def get_month(
    acc: ChronoAccumulator,
    ledger: IssueLedger,
    terms: Terms,
    invalid: IssueType = IssueType.RECORDED_DATE_INVALID,
) -> Optional[int]:
    if acc.month is None:
        return None
    if not 1 <= acc.month <= 12:
        ledger.add(invalid, *_terms_for(terms, ChronoField.MONTH))
        return None
    return acc.month


def get_day(
    acc: ChronoAccumulator,
    ledger: IssueLedger,
    terms: Terms,
    invalid: IssueType = IssueType.RECORDED_DATE_INVALID,
) -> Optional[int]:
    """Return the day when it exists in its month.

    Without a usable year and month only the generic range 1..31 can be
    checked.
    """

    if acc.day is None:
        return None
    last_day = 31
    if acc.year is not None and acc.month is not None and 1 <= acc.month <= 12 and acc.year >= 1:
        last_day = calendar.monthrange(acc.year, acc.month)[1]
    if not 1 <= acc.day <= last_day:
        ledger.add(invalid, *_terms_for(terms, ChronoField.DAY))
        return None
    return acc.day


def to_temporal(
    acc: ChronoAccumulator,
    ledger: IssueLedger,
    terms: Terms,
    min_year: int,
    max_year: int,
    invalid: IssueType = IssueType.RECORDED_DATE_INVALID,
    unlikely: IssueType = IssueType.RECORDED_DATE_UNLIKELY,
) -> Optional[TemporalValue]:
    """Convert ``acc`` to the finest temporal value its components support.

    An invalid component truncates the value to the coarser granularity
    before it; a missing or unlikely year yields ``None``.
    """

    year = get_year(acc, ledger, terms, min_year, max_year, unlikely)
    if year is None:
        return None
    month = get_month(acc, ledger, terms, invalid)
    if month is None:
        return TemporalValue(year)
    day = get_day(acc, ledger, terms, invalid)
    if day is None:
        return TemporalValue(year, month)
    return TemporalValue(year, month, day, acc.time)


__all__ = [
    "Granularity",
    "TemporalValue",
    "get_year",
    "get_month",
    "get_day",
    "to_temporal",
]
