"""Issue ledger and result types shared by every interpreter.

An interpreter never raises on bad data.  It returns a :class:`ParsedField`
holding a best-effort result and the ordered issues explaining what was
wrong or what was assumed.  Issues reference the Darwin Core terms that
caused them and never carry raw values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from dwc.terms import DwcTerm

T = TypeVar("T")


class IssueType(str, Enum):
    """Closed catalogue of data-quality issues."""

    # temporal
    RECORDED_DATE_INVALID = "RECORDED_DATE_INVALID"
    RECORDED_DATE_UNLIKELY = "RECORDED_DATE_UNLIKELY"
    IDENTIFIED_DATE_INVALID = "IDENTIFIED_DATE_INVALID"
    IDENTIFIED_DATE_UNLIKELY = "IDENTIFIED_DATE_UNLIKELY"
    MODIFIED_DATE_INVALID = "MODIFIED_DATE_INVALID"
    MODIFIED_DATE_UNLIKELY = "MODIFIED_DATE_UNLIKELY"
    # country
    COUNTRY_INVALID = "COUNTRY_INVALID"
    COUNTRY_CODE_INVALID = "COUNTRY_CODE_INVALID"
    COUNTRY_MISMATCH = "COUNTRY_MISMATCH"
    COUNTRY_COORDINATE_MISMATCH = "COUNTRY_COORDINATE_MISMATCH"
    COUNTRY_DERIVED_FROM_COORDINATES = "COUNTRY_DERIVED_FROM_COORDINATES"
    # coordinates
    COORDINATE_INVALID = "COORDINATE_INVALID"
    COORDINATE_OUT_OF_RANGE = "COORDINATE_OUT_OF_RANGE"
    ZERO_COORDINATE = "ZERO_COORDINATE"
    PRESUMED_NEGATED_LATITUDE = "PRESUMED_NEGATED_LATITUDE"
    PRESUMED_NEGATED_LONGITUDE = "PRESUMED_NEGATED_LONGITUDE"
    PRESUMED_NEGATED_COORDINATES = "PRESUMED_NEGATED_COORDINATES"
    PRESUMED_SWAPPED_COORDINATE = "PRESUMED_SWAPPED_COORDINATE"
    # datum
    GEODETIC_DATUM_ASSUMED_WGS84 = "GEODETIC_DATUM_ASSUMED_WGS84"
    GEODETIC_DATUM_INVALID = "GEODETIC_DATUM_INVALID"
    COORDINATE_REPROJECTED = "COORDINATE_REPROJECTED"
    COORDINATE_REPROJECTION_FAILED = "COORDINATE_REPROJECTION_FAILED"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class InterpretationIssue:
    """An issue type linked to the terms that caused it."""

    issue_type: IssueType
    terms: Tuple[DwcTerm, ...] = ()

    @classmethod
    def of(cls, issue_type: IssueType, *terms: DwcTerm) -> "InterpretationIssue":
        return cls(issue_type, tuple(terms))

    def to_dict(self) -> Dict[str, Any]:
        return {"issue": self.issue_type.value, "terms": [term.value for term in self.terms]}


@dataclass(frozen=True)
class ParsedField(Generic[T]):
    """Result of one interpretation step.

    ``successful`` reports whether the step reached its goal.  A failed
    field may still carry a partial ``result``; callers must not assume
    ``result is None`` when ``successful`` is false.
    """

    successful: bool
    result: Optional[T] = None
    issues: Tuple[InterpretationIssue, ...] = ()

    @classmethod
    def success(
        cls, result: Optional[T] = None, issues: Iterable[InterpretationIssue] = ()
    ) -> "ParsedField[T]":
        return cls(True, result, tuple(issues))

    @classmethod
    def fail(
        cls, result: Optional[T] = None, issues: Iterable[InterpretationIssue] = ()
    ) -> "ParsedField[T]":
        return cls(False, result, tuple(issues))

    def with_issues(self, *issues: InterpretationIssue) -> "ParsedField[T]":
        """Return a copy with ``issues`` appended."""
        return replace(self, issues=self.issues + tuple(issues))

    @property
    def issue_types(self) -> List[IssueType]:
        return [issue.issue_type for issue in self.issues]


@dataclass
class IssueLedger:
    """Collects issues for a single interpretation call.

    A ledger is created, filled and read by one call only; it is never
    shared between records or threads.  Order of insertion is preserved.
    """

    _issues: List[InterpretationIssue] = field(default_factory=list)

    def add(self, issue_type: IssueType, *terms: DwcTerm) -> None:
        self._issues.append(InterpretationIssue(issue_type, tuple(terms)))

    def extend(self, issues: Iterable[InterpretationIssue]) -> None:
        self._issues.extend(issues)

    def collect(self, parsed: ParsedField[T]) -> Optional[T]:
        """Record the issues of ``parsed`` and return its result."""
        self._issues.extend(parsed.issues)
        return parsed.result

    @property
    def issues(self) -> Tuple[InterpretationIssue, ...]:
        return tuple(self._issues)

    def __contains__(self, issue_type: object) -> bool:
        return any(issue.issue_type == issue_type for issue in self._issues)

    def __iter__(self) -> Iterator[InterpretationIssue]:
        return iter(tuple(self._issues))

    def __len__(self) -> int:
        return len(self._issues)


def issue_types(issues: Iterable[InterpretationIssue]) -> List[IssueType]:
    """Return the issue types of ``issues`` in order."""
    return [issue.issue_type for issue in issues]


__all__ = [
    "IssueType",
    "InterpretationIssue",
    "ParsedField",
    "IssueLedger",
    "issue_types",
]
