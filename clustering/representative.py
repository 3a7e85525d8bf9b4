"""Choosing the canonical record of each duplicate cluster."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .clusters import FIRST, PairLike, create_clusters

logger = logging.getLogger(__name__)


class OccurrenceFeatures(BaseModel):
    """Interpreted fields of a record that decide which duplicate is kept."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    decimalLatitude: Optional[float] = None
    decimalLongitude: Optional[float] = None
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @field_validator("decimalLatitude", "decimalLongitude", "year", "month", "day", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OccurrenceFeatures":
        """Build features from a flat row keyed by Darwin Core names."""
        identifier = data.get("id") or data.get("occurrenceID")
        return cls.model_validate({**data, "id": identifier})


def decimal_places(value: float) -> int:
    """Count the decimal digits a coordinate was given to.

    Works on the shortest string that round-trips the float, so ``12.30``
    counts as 1.  A lone ``0`` after the point counts as 0.
    """

    text = repr(float(value))
    if "e" in text or "E" in text:
        try:
            exponent = Decimal(text).as_tuple().exponent
        except InvalidOperation:
            return 0
        return max(0, -exponent) if isinstance(exponent, int) else 0
    _, _, fraction = text.partition(".")
    if len(fraction) > 1:
        return len(fraction)
    if fraction == "0" or not fraction:
        return 0
    return 1


def coordinate_precision(record: OccurrenceFeatures) -> int:
    if record.decimalLatitude is None or record.decimalLongitude is None:
        return 0
    return max(decimal_places(record.decimalLatitude), decimal_places(record.decimalLongitude))


def date_precision(record: OccurrenceFeatures) -> int:
    return sum(value is not None for value in (record.year, record.month, record.day))


def _keep_highest(
    records: List[OccurrenceFeatures], rank: Callable[[OccurrenceFeatures], int]
) -> List[OccurrenceFeatures]:
    best = max(rank(record) for record in records)
    return [record for record in records if rank(record) == best]


def find_representative(records: Iterable[OccurrenceFeatures]) -> OccurrenceFeatures:
    """Pick the record with the most precise coordinates, then the most
    precise date, then the smallest identifier."""

    candidates = list(records)
    if not candidates:
        raise ValueError("Cannot choose a representative from an empty cluster")
    candidates = _keep_highest(candidates, coordinate_precision)
    if len(candidates) > 1:
        candidates = _keep_highest(candidates, date_precision)
    return min(candidates, key=lambda record: record.id)


@dataclass(frozen=True)
class ClusterResult:
    cluster_id: int
    members: Tuple[str, ...]
    representative: str

    @property
    def associated(self) -> Tuple[str, ...]:
        """Members other than the representative."""
        return tuple(member for member in self.members if member != self.representative)


def select_representatives(
    pairs: Iterable[PairLike],
    records_by_id: Mapping[str, OccurrenceFeatures],
    strategy: str = FIRST,
) -> List[ClusterResult]:
    """Cluster ``pairs`` and choose a representative for every cluster.

    Raises
    ------
    KeyError
        If a clustered identifier has no entry in ``records_by_id``.
    """

    results: List[ClusterResult] = []
    for number, cluster in enumerate(create_clusters(pairs, strategy), start=1):
        members = tuple(sorted(cluster))
        missing = [member for member in members if member not in records_by_id]
        if missing:
            raise KeyError(f"No record for clustered identifier(s): {', '.join(missing)}")
        representative = find_representative(records_by_id[member] for member in members)
        results.append(ClusterResult(number, members, representative.id))
    logger.info("Selected representatives for %d clusters", len(results))
    return results


def index_records(records: Iterable[OccurrenceFeatures]) -> Dict[str, OccurrenceFeatures]:
    index: Dict[str, OccurrenceFeatures] = {}
    for record in records:
        if record.id in index:
            logger.warning("Duplicate record id %r; keeping the first", record.id)
            continue
        index[record.id] = record
    return index


__all__ = [
    "OccurrenceFeatures",
    "ClusterResult",
    "coordinate_precision",
    "date_precision",
    "decimal_places",
    "find_representative",
    "index_records",
    "select_representatives",
]
