"""Tests for whole-record interpretation."""

import pytest

from dwc.record import RawTerms
from interpretation.issues import IssueType
from interpretation.record import RecordInterpreter, max_workers_from_config
from interpretation.temporal.parser import TemporalParser


@pytest.fixture
def interpreter(location_parser):
    return RecordInterpreter(TemporalParser(), location_parser)


def _raw(**terms):
    return RawTerms.from_mapping(terms)


class TestInterpret:
    """Temporal and location results are combined in a fixed order."""

    def test_full_record(self, interpreter):
        raw = _raw(
            id="occ-1",
            year="1999",
            month="10",
            day="1",
            eventDate="2010/2011",
            country="France",
            countryCode="DE",
            decimalLatitude="52.5",
            decimalLongitude="13.4",
            dateIdentified="2005-06-07",
            modified="2019-03-04",
        )

        record = interpreter.interpret(raw)

        assert record.id == "occ-1"
        assert record.issue_types == [IssueType.COUNTRY_MISMATCH]
        assert record.to_dict() == {
            "id": "occ-1",
            "year": 1999,
            "month": 10,
            "day": 1,
            "eventDate": "2010/2011",
            "startDate": "2010",
            "endDate": "2011",
            "dateIdentified": "2005-06-07",
            "modified": "2019-03-04",
            "countryCode": "DE",
            "country": "Germany",
            "decimalLatitude": 52.5,
            "decimalLongitude": 13.4,
            "coordinateTransform": "identity",
            "locationMatched": True,
            "issues": ["COUNTRY_MISMATCH"],
        }

    def test_issue_order_follows_interpreters(self, interpreter):
        raw = _raw(
            id="occ-2",
            eventDate="2/3/2008",
            country="Atlantis",
            decimalLatitude="48",
            decimalLongitude="2",
            dateIdentified="garbage",
        )

        record = interpreter.interpret(raw)

        assert record.issue_types == [
            IssueType.RECORDED_DATE_INVALID,
            IssueType.COUNTRY_INVALID,
            IssueType.COUNTRY_DERIVED_FROM_COORDINATES,
            IssueType.IDENTIFIED_DATE_INVALID,
        ]
        assert record.location.result.country.code == "FR"
        assert not record.location.successful

    def test_event_date_leaves_atomic_fields_empty(self, interpreter):
        row = interpreter.interpret(_raw(id="occ-3", eventDate="17 April 1999")).to_dict()

        assert (row["year"], row["month"], row["day"]) == (None, None, None)
        assert row["eventDate"] == "1999-04-17"
        assert row["endDate"] is None
        assert row["locationMatched"] is False
        assert row["countryCode"] is None

    def test_negated_latitude_is_reported(self, interpreter):
        row = interpreter.interpret(
            _raw(id="occ-4", countryCode="AU", decimalLatitude="33.86", decimalLongitude="151.2")
        ).to_dict()

        assert row["decimalLatitude"] == -33.86
        assert row["coordinateTransform"] == "negate_lat"
        assert "PRESUMED_NEGATED_LATITUDE" in row["issues"]

    def test_idempotent(self, interpreter):
        raw = _raw(id="occ-5", eventDate="1999-04-17/18", country="Brazil", countryCode="BR")

        assert interpreter.interpret(raw).to_dict() == interpreter.interpret(raw).to_dict()

    def test_requires_both_parsers(self, location_parser):
        with pytest.raises(ValueError):
            RecordInterpreter(None, location_parser)


class TestInterpretBatch:
    """Batches run on a thread pool and keep input order."""

    def test_order_is_preserved(self, interpreter):
        records = [_raw(id=str(i), year=str(1900 + i)) for i in range(40)]

        results = interpreter.interpret_batch(records, max_workers=4)

        assert [result.id for result in results] == [str(i) for i in range(40)]
        assert [result.temporal.year for result in results] == [1900 + i for i in range(40)]

    def test_matches_sequential_results(self, interpreter):
        records = [
            _raw(id="a", eventDate="2/3/2008"),
            _raw(id="b", country="France", countryCode="FR", decimalLatitude="48", decimalLongitude="2"),
            _raw(id="c", year="1500"),
        ] * 5

        batch = interpreter.interpret_batch(records, max_workers=3)

        assert [r.to_dict() for r in batch] == [interpreter.interpret(r).to_dict() for r in records]

    def test_empty_batch(self, interpreter):
        assert interpreter.interpret_batch([]) == []

    def test_max_workers_from_config(self):
        assert max_workers_from_config({}) == 8
        assert max_workers_from_config({"batch": {"max_workers": 2}}) == 2
