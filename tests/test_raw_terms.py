"""Tests for the verbatim Darwin Core record model."""

import pytest
from pydantic import ValidationError

from dwc.record import RawTerms
from dwc.terms import DwcTerm


class TestRawTerms:
    """RawTerms resolves keys, drops blanks and cannot be changed."""

    def test_from_mapping_resolves_keys_and_drops_blanks(self):
        raw = RawTerms.from_mapping(
            {
                "http://rs.tdwg.org/dwc/terms/occurrenceID": "occ-1",
                "dwc:eventDate": " 1999-04-17 ",
                "country": "  ",
                "locality": None,
            }
        )

        assert raw.id == "occ-1"
        assert dict(raw.terms) == {"occurrenceID": "occ-1", "eventDate": "1999-04-17"}
        assert raw[DwcTerm.eventDate] == "1999-04-17"
        assert "country" not in raw
        with pytest.raises(KeyError):
            raw["locality"]

    def test_terms_cannot_be_mutated(self):
        raw = RawTerms.from_mapping({"country": "France"})

        with pytest.raises(TypeError):
            raw.terms["country"] = "Spain"
        with pytest.raises(TypeError):
            del raw.terms["country"]

        assert raw.get("country") == "France"

    def test_source_mapping_changes_do_not_leak(self):
        source = {"country": "France"}
        raw = RawTerms(terms=source)

        source["country"] = "Spain"

        assert raw.get("country") == "France"

    def test_fields_cannot_be_reassigned(self):
        raw = RawTerms(id="occ-1")

        with pytest.raises(ValidationError):
            raw.terms = {"country": "Spain"}

    def test_default_terms_are_read_only(self):
        raw = RawTerms()

        assert len(raw.terms) == 0
        with pytest.raises(TypeError):
            raw.terms["year"] = "1999"

    def test_model_dump_returns_plain_dict(self):
        raw = RawTerms.from_mapping({"occurrenceID": "a", "year": 1999})

        assert raw.model_dump() == {"id": "a", "terms": {"occurrenceID": "a", "year": "1999"}}
