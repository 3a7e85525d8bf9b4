"""Parsing of verbatim date strings into :class:`ChronoAccumulator` values.

Handles ISO layouts (``1999-04-17T12:26Z``), day-first and month-first
numeric layouts (``17/4/1999``), month names and abbreviations
(``17 April 1999``, ``Apr. 1999``), Roman-numeral months common on
specimen labels (``17.IV.1999``) and compact range ends (``/18``,
``/12:52:17Z``) that are read relative to the start of the range.
"""

from __future__ import annotations

import logging
import re
from datetime import time, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from .accumulator import EMPTY, ChronoAccumulator, ChronoField

logger = logging.getLogger(__name__)

DMY = "DMY"
MDY = "MDY"
DATE_ORDERS = (DMY, MDY)

MONTH_NAMES = {
    "january": 1, "jan": 1, "janvier": 1, "enero": 1, "januar": 1,
    "february": 2, "feb": 2, "fevrier": 2, "febrero": 2, "februar": 2,
    "march": 3, "mar": 3, "mars": 3, "marzo": 3, "marz": 3,
    "april": 4, "apr": 4, "avril": 4, "abril": 4,
    "may": 5, "mai": 5, "mayo": 5,
    "june": 6, "jun": 6, "juin": 6, "junio": 6, "juni": 6,
    "july": 7, "jul": 7, "juillet": 7, "julio": 7, "juli": 7,
    "august": 8, "aug": 8, "aout": 8, "agosto": 8,
    "september": 9, "sep": 9, "sept": 9, "septembre": 9, "septiembre": 9,
    "october": 10, "oct": 10, "octobre": 10, "octubre": 10, "oktober": 10, "okt": 10,
    "november": 11, "nov": 11, "novembre": 11, "noviembre": 11,
    "december": 12, "dec": 12, "decembre": 12, "diciembre": 12, "dezember": 12, "dez": 12,
}

ROMAN_MONTHS = {
    "i": 1, "ii": 2, "iii": 3, "iv": 4, "v": 5, "vi": 6,
    "vii": 7, "viii": 8, "ix": 9, "x": 10, "xi": 11, "xii": 12,
}

# Words that may sit next to a day number or a date without changing it.
_NOISE_WORDS = {"st", "nd", "rd", "th", "of", "de", "the"}

# Ordered range delimiters; the first one that splits the text into exactly
# two non-empty parts wins.
_YEAR_RANGE = re.compile(r"^\s*(\d{4})\s*-\s*(\d{4})\s*$")
RANGE_DELIMITERS: Tuple[str, ...] = ("/", " - ", " – ", " to ", " & ")

_TIME = re.compile(
    r"(?:^|[T\s])(?P<hour>\d{1,2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,6}))?)?"
    r"\s*(?P<zone>Z|[+-]\d{2}(?::?\d{2})?)?\s*$",
    re.IGNORECASE,
)
_TOKEN = re.compile(r"\d+|[^\W\d_]+", re.UNICODE)
_ACCENTS = str.maketrans("éèêûôâîçäöü", "eeeuoaicaou")


def split_period(raw: str | None) -> Tuple[str, str]:
    """Split a verbatim date into its ``(from, to)`` endpoint strings.

    Text without a recognised range delimiter is a single date and comes
    back as ``(text, "")``.
    """

    if not raw or not raw.strip():
        return "", ""
    text = raw.strip()

    for delimiter in RANGE_DELIMITERS:
        parts = [part.strip() for part in text.split(delimiter)]
        if len(parts) != 2 or not all(parts):
            continue
        # "4/1999" is a month and year, not a range starting at "4"
        if delimiter == "/" and not _is_anchored(parts[0]):
            continue
        return parts[0], parts[1]
    years = _YEAR_RANGE.match(text)
    if years:
        return years.group(1), years.group(2)
    return text, ""


def _is_anchored(text: str) -> bool:
    """True when ``text`` holds a year or a month name and so can stand alone."""
    return any(
        len(token) >= 3 if token.isdecimal() else month_from_text(token) is not None
        for token in _TOKEN.findall(text)
    )


def _time_from_match(match: re.Match) -> Optional[time]:
    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    second = int(match.group("second") or 0)
    fraction = match.group("fraction") or ""
    microsecond = int(fraction.ljust(6, "0")) if fraction else 0
    if hour > 23 or minute > 59 or second > 59:
        return None
    tzinfo = _parse_zone(match.group("zone"))
    return time(hour, minute, second, microsecond, tzinfo=tzinfo)


def _parse_zone(zone: Optional[str]):
    if not zone:
        return None
    if zone.upper() == "Z":
        return timezone.utc
    sign = -1 if zone[0] == "-" else 1
    digits = zone[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:] or 0)
    if hours > 18 or minutes > 59:
        return None
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def month_from_text(token: str) -> Optional[int]:
    """Return the month number for a month name, abbreviation or Roman numeral."""

    key = token.strip().rstrip(".").lower().translate(_ACCENTS)
    if key in MONTH_NAMES:
        return MONTH_NAMES[key]
    return ROMAN_MONTHS.get(key)


def parse_int(raw: str | None) -> Optional[int]:
    if raw is None:
        return None
    text = raw.strip()
    if text.endswith(".0"):
        text = text[:-2]
    return int(text) if text.isdecimal() else None


def parse_atomic(raw_year: str | None, raw_month: str | None, raw_day: str | None) -> ChronoAccumulator:
    """Read the atomic year, month and day terms.

    Atomic values are positional, so nothing read here is ambiguous.  A
    month may be given as a number, a name or a Roman numeral.
    """

    month = parse_int(raw_month)
    if month is None and raw_month:
        month = month_from_text(raw_month)
    return ChronoAccumulator(year=parse_int(raw_year), month=month, day=parse_int(raw_day))


def parse_endpoint(
    raw: str | None, seed: Optional[ChronoField] = None, date_order: str = DMY
) -> ChronoAccumulator:
    """Parse one endpoint of a date range.

    Parameters
    ----------
    raw:
        Verbatim endpoint text.
    seed:
        Finest component of the range start.  A compact end such as ``18``
        or ``5-18`` is read so that its last token lands on this component.
    date_order:
        Reading applied to undecidable numeric day/month pairs.

    Returns
    -------
    ChronoAccumulator
        Empty when nothing could be read.
    """

    if not raw or not raw.strip():
        return EMPTY
    text = raw.strip()

    clock = None
    match = _TIME.search(text)
    if match:
        clock = _time_from_match(match)
        text = text[: match.start()].strip()
        if not text:
            return ChronoAccumulator(time=clock) if clock else EMPTY

    tokens = [t for t in _TOKEN.findall(text) if t.lower() not in _NOISE_WORDS]
    date = _read_date(tokens, seed, date_order)
    if date is None:
        logger.debug("Unreadable date endpoint %r", raw)
        return EMPTY
    if clock is not None and date.day is not None:
        date = ChronoAccumulator(date.year, date.month, date.day, clock, date.ambiguous)
    return date


def _read_date(
    tokens: Sequence[str], seed: Optional[ChronoField], date_order: str
) -> Optional[ChronoAccumulator]:
    numbers: List[str] = []
    month_named: Optional[int] = None
    for token in tokens:
        if token.isdecimal():
            numbers.append(token)
            continue
        month = month_from_text(token)
        if month is None or month_named is not None:
            return None
        month_named = month

    if month_named is not None:
        return _read_named(numbers, month_named)
    return _read_numeric(numbers, seed, date_order)


def _read_named(numbers: Sequence[str], month: int) -> Optional[ChronoAccumulator]:
    years = [n for n in numbers if len(n) >= 3]
    days = [n for n in numbers if len(n) <= 2]
    if len(years) > 1 or len(days) > 1:
        return None
    year = int(years[0]) if years else None
    day = int(days[0]) if days else None
    return ChronoAccumulator(year=year, month=month, day=day)


def _read_numeric(
    numbers: Sequence[str], seed: Optional[ChronoField], date_order: str
) -> Optional[ChronoAccumulator]:
    if not numbers:
        return None

    if len(numbers) == 1:
        token = numbers[0]
        if len(token) == 8:
            return ChronoAccumulator(int(token[:4]), int(token[4:6]), int(token[6:]))
        if len(token) == 6:
            return ChronoAccumulator(int(token[:4]), int(token[4:]))
        if len(token) in (3, 4):
            return ChronoAccumulator(year=int(token))

    if len(numbers[0]) >= 3:
        # year first: yyyy-mm or yyyy-mm-dd
        if len(numbers) > 3 or any(len(n) > 2 for n in numbers[1:]):
            return None
        values = [int(n) for n in numbers]
        return ChronoAccumulator(*values)

    if len(numbers[-1]) >= 3:
        if len(numbers) > 3 or any(len(n) > 2 for n in numbers[:-1]):
            return None
        year = int(numbers[-1])
        if len(numbers) == 2:
            return ChronoAccumulator(year=year, month=int(numbers[0]))
        return _order_day_month(year, int(numbers[0]), int(numbers[1]), date_order)

    return _read_compact(numbers, seed)


def _order_day_month(year: int, first: int, second: int, date_order: str) -> Optional[ChronoAccumulator]:
    if first > 12 and second > 12:
        return None
    if first > 12:
        return ChronoAccumulator(year, second, first)
    if second > 12:
        return ChronoAccumulator(year, first, second)
    if first == second:
        return ChronoAccumulator(year, first, second)
    ambiguous = frozenset({ChronoField.MONTH, ChronoField.DAY})
    if date_order == MDY:
        return ChronoAccumulator(year, first, second, ambiguous=ambiguous)
    return ChronoAccumulator(year, second, first, ambiguous=ambiguous)


def _read_compact(numbers: Sequence[str], seed: Optional[ChronoField]) -> Optional[ChronoAccumulator]:
    """Read one or two short numbers as the trailing components up to ``seed``."""

    if seed is None:
        return None
    finest = min(seed, ChronoField.DAY)
    if finest == ChronoField.YEAR or len(numbers) >= finest:
        return None
    start = finest - len(numbers) + 1
    values = {ChronoField(start + i).attribute: int(n) for i, n in enumerate(numbers)}
    return ChronoAccumulator(**values)


__all__ = [
    "DMY",
    "MDY",
    "DATE_ORDERS",
    "RANGE_DELIMITERS",
    "MONTH_NAMES",
    "ROMAN_MONTHS",
    "split_period",
    "parse_atomic",
    "parse_endpoint",
    "month_from_text",
    "parse_int",
]
