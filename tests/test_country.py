"""Tests for the country vocabulary."""

import pytest

from interpretation.location.country import Country, CountryVocabulary, countries_from_config


class TestNameLookup:
    """Names, aliases and codes given as names."""

    @pytest.mark.parametrize(
        "raw, code",
        [
            ("France", "FR"),
            ("  FRANCE ", "FR"),
            ("Deutschland", "DE"),
            ("U.S.A.", "US"),
            ("Côte d'Ivoire", "CI"),
            ("Cote d'Ivoire", "CI"),
            ("The Netherlands", "NL"),
            ("DE", "DE"),
            ("BRA", "BR"),
        ],
    )
    def test_resolves(self, vocabulary, raw, code):
        parsed = vocabulary.name_lookup(raw)

        assert parsed.successful
        assert parsed.result.code == code

    @pytest.mark.parametrize("raw", [None, "", "Atlantis", "XX"])
    def test_unresolved_fails_without_issues(self, vocabulary, raw):
        parsed = vocabulary.name_lookup(raw)

        assert not parsed.successful
        assert parsed.issues == ()


class TestCodeLookup:
    """Alpha-2 and alpha-3 codes only."""

    @pytest.mark.parametrize("raw", ["DE", "de", "DEU", " deu "])
    def test_codes(self, vocabulary, raw):
        assert vocabulary.code_lookup(raw).result == Country("DE", "DEU", "Germany")

    def test_names_are_not_codes(self, vocabulary):
        assert not vocabulary.code_lookup("Germany").successful


class TestVocabulary:
    """Construction from rules and inline tables."""

    def test_packaged_rules_cover_iso_list(self, vocabulary):
        assert len(vocabulary) > 200

    def test_inline_tables(self, caplog):
        vocab = CountryVocabulary(
            {"fr": {"alpha3": "fra", "name": "France"}},
            {"la france": "FR", "gaul": "ZZ"},
        )

        assert vocab.name_lookup("La France").result.code == "FR"
        assert vocab.by_code("FRA").title == "France"
        assert "unknown country code" in caplog.text

    def test_from_config_defaults_to_packaged_rules(self, vocabulary):
        assert countries_from_config({}) is vocabulary
