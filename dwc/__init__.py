"""
Darwin Core (DwC) term handling for raw occurrence records.

Provides the term vocabulary, the immutable raw record model and
normalization of verbatim vocabulary values.
"""

from .normalize import load_rules, normalize_code, normalize_country, normalize_key
from .record import RawTerms
from .terms import DWC_TERMS, DwcTerm, resolve_term

__all__ = [
    "DwcTerm",
    "DWC_TERMS",
    "RawTerms",
    "resolve_term",
    "load_rules",
    "normalize_code",
    "normalize_country",
    "normalize_key",
]
