from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .terms import DwcTerm, resolve_term


class RawTerms(BaseModel):
    """Immutable map of verbatim Darwin Core values for one record.

    Keys are resolved to simple term names (``dwc:eventDate`` and the full
    term URI both become ``eventDate``).  Blank values are dropped, so an
    absent key always means "unknown" and never "invalid".
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    terms: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("terms", mode="before")
    @classmethod
    def _resolve_keys(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        resolved: Dict[str, str] = {}
        for key, raw in dict(value).items():
            if raw is None:
                continue
            text = str(raw).strip()
            if text:
                resolved[resolve_term(str(key))] = text
        return resolved

    @field_validator("terms")
    @classmethod
    def _freeze(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("terms")
    def _dump_terms(self, value: Mapping[str, str]) -> Dict[str, str]:
        return dict(value)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], id_term: Union[str, DwcTerm] = DwcTerm.occurrenceID
    ) -> "RawTerms":
        """Build raw terms from a flat row, taking the identifier from ``id_term``."""
        record = cls(terms=data)
        identifier = data.get("id") or record.get(id_term)
        return record.model_copy(update={"id": str(identifier) if identifier else None})

    def get(self, term: Union[str, DwcTerm], default: Optional[str] = None) -> Optional[str]:
        key = term.value if isinstance(term, DwcTerm) else resolve_term(term)
        return self.terms.get(key, default)

    def __getitem__(self, term: Union[str, DwcTerm]) -> str:
        value = self.get(term)
        if value is None:
            raise KeyError(term)
        return value

    def __contains__(self, term: object) -> bool:
        if not isinstance(term, str):
            return False
        return self.get(term) is not None


__all__ = ["RawTerms"]
