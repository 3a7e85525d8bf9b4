"""Geodetic datum recognition and reprojection to WGS84.

Only a catalogue of classic datums is known.  Datums on the GRS80
ellipsoid are treated as coincident with WGS84; the rest are shifted with
the abridged Molodensky transformation, which is accurate to a few metres
and so well below the precision of most specimen labels.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

from dwc.terms import DwcTerm

from ..issues import IssueLedger, IssueType, ParsedField
from .coordinates import LatLng

logger = logging.getLogger(__name__)

WGS84 = "WGS84"

DATUM_TERMS = (DwcTerm.geodeticDatum,)
REPROJECTION_TERMS = (DwcTerm.decimalLatitude, DwcTerm.decimalLongitude, DwcTerm.geodeticDatum)


@dataclass(frozen=True)
class Ellipsoid:
    semi_major_axis: float
    inverse_flattening: float

    @property
    def flattening(self) -> float:
        return 1 / self.inverse_flattening

    @property
    def eccentricity_squared(self) -> float:
        f = self.flattening
        return 2 * f - f * f


ELLIPSOIDS: Dict[str, Ellipsoid] = {
    "WGS84": Ellipsoid(6378137.0, 298.257223563),
    "GRS80": Ellipsoid(6378137.0, 298.257222101),
    "WGS72": Ellipsoid(6378135.0, 298.26),
    "CLARKE1866": Ellipsoid(6378206.4, 294.9786982),
    "INTERNATIONAL1924": Ellipsoid(6378388.0, 297.0),
    "AUSTRALIAN_NATIONAL": Ellipsoid(6378160.0, 298.25),
    "AIRY1830": Ellipsoid(6377563.396, 299.3249646),
    "BESSEL1841": Ellipsoid(6377397.155, 299.1528128),
    "GRS67": Ellipsoid(6378160.0, 298.25),
    "KRASSOWSKY1940": Ellipsoid(6378245.0, 298.3),
}


@dataclass(frozen=True)
class Datum:
    """A datum with the geocentric shift (metres) that takes it to WGS84."""

    name: str
    ellipsoid: str
    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0

    @property
    def is_wgs84_equivalent(self) -> bool:
        return self.ellipsoid in ("WGS84", "GRS80") and not (self.dx or self.dy or self.dz)


DATUMS: Dict[str, Datum] = {
    datum.name: datum
    for datum in (
        Datum(WGS84, "WGS84"),
        Datum("NAD83", "GRS80"),
        Datum("GDA94", "GRS80"),
        Datum("ETRS89", "GRS80"),
        Datum("NZGD2000", "GRS80"),
        Datum("SIRGAS2000", "GRS80"),
        Datum("NAD27", "CLARKE1866", -8.0, 160.0, 176.0),
        Datum("ED50", "INTERNATIONAL1924", -87.0, -98.0, -121.0),
        Datum("AGD66", "AUSTRALIAN_NATIONAL", -133.0, -48.0, 148.0),
        Datum("AGD84", "AUSTRALIAN_NATIONAL", -134.0, -48.0, 149.0),
        Datum("OSGB36", "AIRY1830", 375.0, -111.0, 431.0),
        Datum("TOKYO", "BESSEL1841", -148.0, 507.0, 685.0),
        Datum("SAD69", "GRS67", -57.0, 1.0, -41.0),
        Datum("PULKOVO1942", "KRASSOWSKY1940", 28.0, -130.0, -95.0),
        Datum("WGS72", "WGS72", 0.0, 0.0, 4.5),
    )
}

# Normalized spellings and EPSG codes of the catalogue datums.
DATUM_ALIASES: Dict[str, str] = {
    "WGS84": WGS84, "WGS1984": WGS84, "WORLDGEODETICSYSTEM1984": WGS84, "EPSG4326": WGS84, "4326": WGS84,
    "NAD83": "NAD83", "NORTHAMERICANDATUM1983": "NAD83", "EPSG4269": "NAD83",
    "NAD27": "NAD27", "NORTHAMERICANDATUM1927": "NAD27", "EPSG4267": "NAD27",
    "GDA94": "GDA94", "EPSG4283": "GDA94",
    "ETRS89": "ETRS89", "EPSG4258": "ETRS89",
    "NZGD2000": "NZGD2000", "EPSG4167": "NZGD2000",
    "SIRGAS2000": "SIRGAS2000", "EPSG4674": "SIRGAS2000",
    "ED50": "ED50", "EUROPEANDATUM1950": "ED50", "EPSG4230": "ED50",
    "AGD66": "AGD66", "EPSG4202": "AGD66",
    "AGD84": "AGD84", "EPSG4203": "AGD84",
    "OSGB36": "OSGB36", "OSGB1936": "OSGB36", "EPSG4277": "OSGB36",
    "TOKYO": "TOKYO", "EPSG4301": "TOKYO",
    "SAD69": "SAD69", "SOUTHAMERICANDATUM1969": "SAD69", "EPSG4618": "SAD69",
    "PULKOVO1942": "PULKOVO1942", "EPSG4284": "PULKOVO1942",
    "WGS72": "WGS72", "WGS1972": "WGS72", "EPSG4322": "WGS72",
}

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def normalize_datum(raw: Optional[str]) -> str:
    """``"EPSG:4326"`` -> ``"EPSG4326"``, ``"wgs 84"`` -> ``"WGS84"``."""
    if not raw:
        return ""
    return _NON_ALNUM.sub("", raw.upper())


def lookup_datum(raw: Optional[str]) -> Optional[Datum]:
    name = DATUM_ALIASES.get(normalize_datum(raw))
    return DATUMS.get(name) if name else None


def molodensky_shift(lat_lng: LatLng, datum: Datum) -> LatLng:
    """Shift a coordinate from ``datum`` to WGS84 at zero ellipsoidal height."""

    source = ELLIPSOIDS[datum.ellipsoid]
    target = ELLIPSOIDS["WGS84"]
    a = source.semi_major_axis
    f = source.flattening
    e2 = source.eccentricity_squared
    da = target.semi_major_axis - a
    df = target.flattening - f

    phi = math.radians(lat_lng.lat)
    lam = math.radians(lat_lng.lng)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)

    w = 1 - e2 * sin_phi * sin_phi
    rn = a / math.sqrt(w)
    rm = a * (1 - e2) / w ** 1.5

    d_phi = (
        -datum.dx * sin_phi * cos_lam
        - datum.dy * sin_phi * sin_lam
        + datum.dz * cos_phi
        + (a * df + f * da) * math.sin(2 * phi)
    ) / rm
    d_lam = (-datum.dx * sin_lam + datum.dy * cos_lam) / (rn * cos_phi)

    lat = round(lat_lng.lat + math.degrees(d_phi), 6)
    lng = round(lat_lng.lng + math.degrees(d_lam), 6)
    return LatLng(lat, lng)


class DatumReprojector(Protocol):
    """Take a coordinate in a declared datum to WGS84.

    Implementations never fail a valid coordinate: when no reprojection is
    possible the original coordinate is returned with the issue saying so.
    """

    def __call__(self, lat_lng: LatLng, datum: Optional[str]) -> ParsedField[LatLng]:
        ...


class Wgs84Reprojector:
    """Reprojector over the built-in datum catalogue.

    Parameters
    ----------
    assume_wgs84:
        Flag a missing or unknown datum with ``GEODETIC_DATUM_ASSUMED_WGS84``.
    """

    def __init__(self, assume_wgs84: bool = True):
        self.assume_wgs84 = assume_wgs84

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Wgs84Reprojector":
        return cls(assume_wgs84=bool(cfg.get("location", {}).get("assume_wgs84", True)))

    def __call__(self, lat_lng: LatLng, datum: Optional[str]) -> ParsedField[LatLng]:
        ledger = IssueLedger()
        if not datum or not datum.strip():
            if self.assume_wgs84:
                ledger.add(IssueType.GEODETIC_DATUM_ASSUMED_WGS84, *DATUM_TERMS)
            return ParsedField.success(lat_lng, ledger.issues)

        known = lookup_datum(datum)
        if known is None:
            logger.debug("Unknown geodetic datum %r", datum)
            ledger.add(IssueType.GEODETIC_DATUM_INVALID, *DATUM_TERMS)
            if self.assume_wgs84:
                ledger.add(IssueType.GEODETIC_DATUM_ASSUMED_WGS84, *DATUM_TERMS)
            return ParsedField.success(lat_lng, ledger.issues)

        if known.name == WGS84:
            return ParsedField.success(lat_lng)
        if known.is_wgs84_equivalent:
            ledger.add(IssueType.COORDINATE_REPROJECTED, *REPROJECTION_TERMS)
            return ParsedField.success(lat_lng, ledger.issues)

        try:
            shifted = molodensky_shift(lat_lng, known)
        except (ValueError, ZeroDivisionError, OverflowError) as exc:
            logger.debug("Reprojection from %s failed for %s: %s", known.name, lat_lng, exc)
            shifted = None
        if shifted is None or not shifted.in_range:
            ledger.add(IssueType.COORDINATE_REPROJECTION_FAILED, *REPROJECTION_TERMS)
            return ParsedField.fail(lat_lng, ledger.issues)

        ledger.add(IssueType.COORDINATE_REPROJECTED, *REPROJECTION_TERMS)
        return ParsedField.success(shifted, ledger.issues)


__all__ = [
    "WGS84",
    "Datum",
    "Ellipsoid",
    "DATUMS",
    "DATUM_ALIASES",
    "DatumReprojector",
    "Wgs84Reprojector",
    "lookup_datum",
    "molodensky_shift",
    "normalize_datum",
]
