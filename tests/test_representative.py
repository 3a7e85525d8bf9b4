"""Tests for choosing the representative record of a cluster."""

import pytest

from clustering.clusters import UNION
from clustering.representative import (
    OccurrenceFeatures,
    coordinate_precision,
    date_precision,
    decimal_places,
    find_representative,
    index_records,
    select_representatives,
)


def _record(id, lat=None, lng=None, year=None, month=None, day=None):
    return OccurrenceFeatures(
        id=id, decimalLatitude=lat, decimalLongitude=lng, year=year, month=month, day=day
    )


class TestPrecision:
    """Digit counting for coordinates and component counting for dates."""

    @pytest.mark.parametrize(
        "value, places",
        [
            (12.3, 1),
            (1.0, 0),
            (1, 0),
            (12.34, 2),
            (12.30, 1),
            (-45.123456, 6),
            (1e-05, 5),
            (0.5, 1),
        ],
    )
    def test_decimal_places(self, value, places):
        assert decimal_places(value) == places

    def test_coordinate_precision_takes_the_finer_axis(self):
        assert coordinate_precision(_record("a", 12.3, 1.25)) == 2

    def test_missing_coordinate_has_no_precision(self):
        assert coordinate_precision(_record("a", lat=12.345)) == 0

    def test_date_precision(self):
        assert date_precision(_record("a", year=2001, month=1, day=1)) == 3
        assert date_precision(_record("a", year=2001)) == 1
        assert date_precision(_record("a")) == 0


class TestFindRepresentative:
    """Coordinate precision, then date precision, then identifier."""

    def test_deeper_coordinates_win(self):
        a = _record("A", 12.3, 1)
        b = _record("B", 12.34, 1.0, 2001, 1, 1)

        assert find_representative([a, b]).id == "B"

    def test_coordinates_beat_dates(self):
        a = _record("A", 12.345, 1.0)
        b = _record("B", 12.34, 1.0, 2001, 1, 1)

        assert find_representative([b, a]).id == "A"

    def test_date_breaks_coordinate_tie(self):
        a = _record("A", 12.34, 1.0, 2001)
        b = _record("B", 12.34, 1.0, 2001, 1, 1)

        assert find_representative([a, b]).id == "B"

    def test_identifier_breaks_full_tie(self):
        records = [_record(id, 12.34, 1.0, 2001) for id in ("r3", "r10", "r2")]

        assert find_representative(records).id == "r10"

    def test_empty_cluster(self):
        with pytest.raises(ValueError):
            find_representative([])


class TestSelectRepresentatives:
    """Clustering and selection together."""

    @pytest.fixture
    def records(self):
        return index_records(
            [
                _record("A", 12.3, 1.0),
                _record("B", 12.34, 1.0, 2001, 1, 1),
                _record("C", 12.3, 1.0, 2001),
                _record("D", 50.0, 8.0),
                _record("E", 50.0, 8.0),
            ]
        )

    def test_one_result_per_cluster(self, records):
        results = select_representatives([("A", "B"), ("B", "C"), ("D", "E")], records)

        assert [(r.cluster_id, r.members, r.representative) for r in results] == [
            (1, ("A", "B", "C"), "B"),
            (2, ("D", "E"), "D"),
        ]
        assert results[0].associated == ("A", "C")

    def test_union_strategy(self, records):
        results = select_representatives([("A", "B"), ("D", "E"), ("B", "D")], records, UNION)

        assert len(results) == 1
        assert results[0].members == ("A", "B", "D", "E")

    def test_missing_record(self, records):
        with pytest.raises(KeyError, match="Z"):
            select_representatives([("A", "Z")], records)


class TestFeatures:
    """Building features from flat rows."""

    def test_from_mapping(self):
        features = OccurrenceFeatures.from_mapping(
            {"occurrenceID": "occ-1", "decimalLatitude": "12.34", "decimalLongitude": "", "year": "2001", "other": "x"}
        )

        assert features.id == "occ-1"
        assert features.decimalLatitude == 12.34
        assert features.decimalLongitude is None
        assert features.year == 2001

    def test_duplicate_ids_keep_first(self, caplog):
        first, second = _record("A", 1.5, 2.5), _record("A", 3.0, 4.0)

        index = index_records([first, second])

        assert index == {"A": first}
        assert "Duplicate record id" in caplog.text
