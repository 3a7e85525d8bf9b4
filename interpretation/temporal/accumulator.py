"""Accumulator of parsed date and time components.

A :class:`ChronoAccumulator` holds whatever could be read from one date
string (or from the atomic ``year``/``month``/``day`` terms) before it is
validated and turned into a temporal value.  Accumulators are immutable:
both merge operations return a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import time
from enum import IntEnum
from typing import FrozenSet, Optional


class ChronoField(IntEnum):
    """Date components ordered from coarsest to finest."""

    YEAR = 1
    MONTH = 2
    DAY = 3
    TIME = 4

    @property
    def attribute(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ChronoAccumulator:
    """Parsed components of a single date reading.

    ``ambiguous`` lists the components whose value came from bare numbers
    whose order could not be decided, e.g. day and month of ``2/3/2008``.
    Components not listed are named or positionally resolved.
    """

    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    time: Optional[time] = None
    ambiguous: FrozenSet[ChronoField] = frozenset()

    def get(self, chrono_field: ChronoField):
        return getattr(self, chrono_field.attribute)

    @property
    def is_empty(self) -> bool:
        return all(self.get(f) is None for f in ChronoField)

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.ambiguous)

    @property
    def last_parsed(self) -> Optional[ChronoField]:
        """Finest component actually set, if any."""
        for chrono_field in sorted(ChronoField, reverse=True):
            if self.get(chrono_field) is not None:
                return chrono_field
        return None

    def _fill(self, other: "ChronoAccumulator", candidates) -> "ChronoAccumulator":
        updates = {}
        ambiguous = set(self.ambiguous)
        for chrono_field in candidates:
            if self.get(chrono_field) is None and other.get(chrono_field) is not None:
                updates[chrono_field.attribute] = other.get(chrono_field)
                if chrono_field in other.ambiguous:
                    ambiguous.add(chrono_field)
        if not updates:
            return self
        return replace(self, ambiguous=frozenset(ambiguous), **updates)

    def merge_absent(self, other: "ChronoAccumulator") -> "ChronoAccumulator":
        """Fill every unset component from ``other``.

        Components already set are never overwritten.
        """
        return self._fill(other, ChronoField)

    def merge_replace(self, other: "ChronoAccumulator") -> "ChronoAccumulator":
        """Improve a single open-ended reading from ``other``.

        Every unset component is filled; nothing already set is overwritten.
        """
        return self._fill(other, ChronoField)

    def __repr__(self) -> str:
        parts = [f"{f.name}={getattr(self, f.name)!r}" for f in fields(self) if getattr(self, f.name)]
        return f"ChronoAccumulator({', '.join(parts)})"


EMPTY = ChronoAccumulator()

__all__ = ["ChronoField", "ChronoAccumulator", "EMPTY"]
