"""
Normalization helpers for verbatim Darwin Core values.

Country values arrive as free text ("U.S.A.", "Côte d'Ivoire",
"Deutschland").  They are reduced to a comparison key before being looked
up in the vocabulary rules under ``config/rules``.
"""

from __future__ import annotations

import re
import tomllib
import unicodedata
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

# Base directory for rule files
_RULES_DIR = Path(__file__).resolve().parent.parent / "config" / "rules"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Leading articles and qualifiers that never change which country is meant.
_PREFIXES = ("the ", "republic of ", "kingdom of ")


@lru_cache(maxsize=None)
def load_rules(name: str) -> Dict[str, Any]:
    """Load a TOML rule file from the configuration directory.

    Parameters
    ----------
    name: str
        Name of the rule file without extension.
    """

    path = _RULES_DIR / f"{name}.toml"
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_key(value: str | None) -> str:
    """Return the comparison key for a verbatim vocabulary value.

    Lower-cases, removes accents, turns punctuation into single spaces and
    trims.  ``"U.S.A."`` becomes ``"u s a"``.
    """

    if not value:
        return ""
    cleaned = strip_accents(value).lower().replace("'", "")
    cleaned = _NON_ALNUM.sub(" ", cleaned)
    return " ".join(cleaned.split())


def normalize_country(value: str | None) -> str:
    """
    Normalize a verbatim country name to a lookup key.

    Args:
        value: Raw country string from the record

    Returns:
        Comparison key, with leading articles removed
    """
    key = normalize_key(value)
    for prefix in _PREFIXES:
        if key.startswith(prefix) and len(key) > len(prefix):
            key = key[len(prefix):]
    return key


def normalize_code(value: str | None) -> str:
    """Normalize a verbatim ISO code (``" de "`` -> ``"DE"``)."""
    if not value:
        return ""
    return re.sub(r"[\s.]", "", value).upper()


__all__ = [
    "load_rules",
    "normalize_code",
    "normalize_country",
    "normalize_key",
    "strip_accents",
]
