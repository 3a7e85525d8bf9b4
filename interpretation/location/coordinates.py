"""Coordinate parsing and the ordered catalogue of coordinate corrections."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from dwc.terms import DwcTerm

from ..issues import IssueLedger, IssueType, ParsedField

logger = logging.getLogger(__name__)

LATITUDE = "lat"
LONGITUDE = "lng"

_LIMITS = {LATITUDE: 90.0, LONGITUDE: 180.0}
_HEMISPHERES = {LATITUDE: "NS", LONGITUDE: "EW"}

_DMS = re.compile(
    r"""^\s*
    (?P<sign>[-+])?\s*
    (?P<lead>[NSEW])?\s*
    (?P<deg>\d+(?:[.,]\d+)?)\s*[°º˚:]?\s*
    (?:(?P<min>\d+(?:[.,]\d+)?)\s*(?:['′’]|:)?\s*)?
    (?:(?P<sec>\d+(?:[.,]\d+)?)\s*(?:"|''|″|”|′′)?\s*)?
    (?P<trail>[NSEW])?
    \s*$""",
    re.VERBOSE | re.IGNORECASE,
)


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    @property
    def in_range(self) -> bool:
        return abs(self.lat) <= _LIMITS[LATITUDE] and abs(self.lng) <= _LIMITS[LONGITUDE]

    @property
    def is_zero(self) -> bool:
        return self.lat == 0 and self.lng == 0

    def as_tuple(self) -> Tuple[float, float]:
        return self.lat, self.lng


@dataclass(frozen=True)
class CoordinateTransform:
    """A named correction applied to a coordinate that fails to match.

    ``issue`` is the issue a successful match through this transform
    implies; identity implies none.
    """

    name: str
    func: Callable[[float, float], Tuple[float, float]]
    issue: Optional[IssueType] = None

    def __call__(self, lat_lng: LatLng) -> LatLng:
        return LatLng(*self.func(lat_lng.lat, lat_lng.lng))

    def __repr__(self) -> str:
        return f"CoordinateTransform({self.name!r})"


IDENTITY = CoordinateTransform("identity", lambda lat, lng: (lat, lng))
NEGATE_LAT = CoordinateTransform("negate_lat", lambda lat, lng: (-lat, lng), IssueType.PRESUMED_NEGATED_LATITUDE)
NEGATE_LNG = CoordinateTransform("negate_lng", lambda lat, lng: (lat, -lng), IssueType.PRESUMED_NEGATED_LONGITUDE)
NEGATE_BOTH = CoordinateTransform(
    "negate_both", lambda lat, lng: (-lat, -lng), IssueType.PRESUMED_NEGATED_COORDINATES
)
SWAP_LAT_LNG = CoordinateTransform("swap_lat_lng", lambda lat, lng: (lng, lat), IssueType.PRESUMED_SWAPPED_COORDINATE)

# Tried in this order after the untouched coordinate fails to match.
FALLBACK_TRANSFORMS: Tuple[CoordinateTransform, ...] = (NEGATE_LAT, NEGATE_LNG, NEGATE_BOTH, SWAP_LAT_LNG)
TRANSFORMS: Tuple[CoordinateTransform, ...] = (IDENTITY,) + FALLBACK_TRANSFORMS


def _to_float(text: str) -> Optional[float]:
    if text.count(",") == 1 and "." not in text:
        text = text.replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_dms(raw: str, axis: str) -> Optional[float]:
    """Parse degrees, minutes and seconds such as ``45°30'15"N``.

    The hemisphere letter must belong to ``axis``; a latitude marked ``E``
    is rejected.
    """

    match = _DMS.match(raw)
    if not match:
        return None
    lead, trail = match.group("lead"), match.group("trail")
    if lead and trail:
        return None
    hemisphere = (lead or trail or "").upper()
    if hemisphere and hemisphere not in _HEMISPHERES[axis]:
        return None

    degrees = _to_float(match.group("deg"))
    minutes = _to_float(match.group("min")) if match.group("min") else 0.0
    seconds = _to_float(match.group("sec")) if match.group("sec") else 0.0
    if degrees is None or minutes is None or seconds is None:
        return None
    if minutes >= 60 or seconds >= 60:
        return None
    if match.group("min") and not degrees.is_integer():
        return None

    value = degrees + minutes / 60 + seconds / 3600
    if match.group("sign") == "-" or hemisphere in ("S", "W"):
        value = -value
    return value


def parse_value(raw: Optional[str], axis: str) -> Optional[float]:
    """Parse one coordinate in decimal degrees or DMS notation."""

    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    value = _to_float(text)
    if value is None:
        value = parse_dms(text, axis)
        if value is not None:
            logger.debug("Read %r as DMS %s", raw, value)
    return value


def parse_coordinates(
    raw_lat: Optional[str],
    raw_lng: Optional[str],
    terms: Tuple[DwcTerm, DwcTerm] = (DwcTerm.decimalLatitude, DwcTerm.decimalLongitude),
) -> ParsedField[LatLng]:
    """Parse a latitude/longitude pair.

    Both values absent is a failure without issues.  One value absent or
    unreadable is ``COORDINATE_INVALID``; a value beyond +-90/+-180 is
    ``COORDINATE_OUT_OF_RANGE``.  ``0,0`` parses but is flagged
    ``ZERO_COORDINATE``.
    """

    lat_blank = raw_lat is None or not raw_lat.strip()
    lng_blank = raw_lng is None or not raw_lng.strip()
    if lat_blank and lng_blank:
        return ParsedField.fail()

    ledger = IssueLedger()
    lat = parse_value(raw_lat, LATITUDE)
    lng = parse_value(raw_lng, LONGITUDE)
    if lat is None or lng is None:
        ledger.add(IssueType.COORDINATE_INVALID, *terms)
        return ParsedField.fail(issues=ledger.issues)

    lat_lng = LatLng(lat, lng)
    if not lat_lng.in_range:
        ledger.add(IssueType.COORDINATE_OUT_OF_RANGE, *terms)
        return ParsedField.fail(issues=ledger.issues)
    if lat_lng.is_zero:
        ledger.add(IssueType.ZERO_COORDINATE, *terms)
    return ParsedField.success(lat_lng, ledger.issues)


__all__ = [
    "LatLng",
    "CoordinateTransform",
    "IDENTITY",
    "NEGATE_LAT",
    "NEGATE_LNG",
    "NEGATE_BOTH",
    "SWAP_LAT_LNG",
    "TRANSFORMS",
    "FALLBACK_TRANSFORMS",
    "parse_dms",
    "parse_value",
    "parse_coordinates",
]
