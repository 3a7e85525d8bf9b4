"""ISO 3166-1 country vocabulary.

Names, aliases and codes come from ``config/rules/countries.toml``.  The
vocabulary is read once and never mutated, so a single instance can be
shared by every worker thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Protocol

from dwc.normalize import load_rules, normalize_code, normalize_country, normalize_key

from ..issues import ParsedField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Country:
    code: str
    alpha3: str
    title: str

    def __str__(self) -> str:
        return self.title


class VocabularyLookup(Protocol):
    """Resolve one verbatim value to a country.

    Implementations return a failed field for values they cannot resolve
    and leave issue reporting to the caller.
    """

    def __call__(self, raw: Optional[str]) -> ParsedField[Country]:
        ...


class CountryVocabulary:
    """Country lookups by name and by code.

    Parameters
    ----------
    countries:
        Mapping of alpha-2 code to ``{"alpha3": ..., "name": ...}``.
    aliases:
        Mapping of normalized alternative names to alpha-2 codes.
    """

    def __init__(self, countries: Mapping[str, Mapping[str, str]], aliases: Optional[Mapping[str, str]] = None):
        self._by_code: Dict[str, Country] = {}
        self._by_name: Dict[str, Country] = {}
        for code, entry in countries.items():
            country = Country(code.upper(), entry["alpha3"].upper(), entry["name"])
            self._by_code[country.code] = country
            self._by_code[country.alpha3] = country
            self._by_name[normalize_key(country.title)] = country
            self._by_name.setdefault(normalize_country(country.title), country)
        for alias, code in (aliases or {}).items():
            country = self._by_code.get(code.upper())
            if country is None:
                logger.warning("Alias %r points to unknown country code %r", alias, code)
                continue
            self._by_name[normalize_key(alias)] = country

    @classmethod
    def from_rules(cls, name: str = "countries") -> "CountryVocabulary":
        rules = load_rules(name)
        return cls(rules.get("countries", {}), rules.get("aliases", {}))

    def __len__(self) -> int:
        return len({country.code for country in self._by_code.values()})

    def by_code(self, code: str) -> Optional[Country]:
        return self._by_code.get(normalize_code(code))

    def name_lookup(self, raw: Optional[str]) -> ParsedField[Country]:
        """Resolve a country name, an alias or, failing those, an ISO code."""

        if not raw or not raw.strip():
            return ParsedField.fail()
        country = self._by_name.get(normalize_key(raw)) or self._by_name.get(normalize_country(raw))
        if country is None:
            country = self.by_code(raw)
        if country is None:
            logger.debug("Unknown country name %r", raw)
            return ParsedField.fail()
        return ParsedField.success(country)

    def code_lookup(self, raw: Optional[str]) -> ParsedField[Country]:
        """Resolve an ISO 3166-1 alpha-2 or alpha-3 code."""

        if not raw or not raw.strip():
            return ParsedField.fail()
        country = self.by_code(raw)
        if country is None:
            logger.debug("Unknown country code %r", raw)
            return ParsedField.fail()
        return ParsedField.success(country)


@lru_cache(maxsize=1)
def default_vocabulary() -> CountryVocabulary:
    """Vocabulary built from the packaged rules, loaded once per process."""
    return CountryVocabulary.from_rules()


def countries_from_config(cfg: Mapping[str, Any]) -> CountryVocabulary:
    rules = cfg.get("location", {}).get("country_rules")
    return CountryVocabulary.from_rules(rules) if rules else default_vocabulary()


__all__ = [
    "Country",
    "CountryVocabulary",
    "VocabularyLookup",
    "countries_from_config",
    "default_vocabulary",
]
