"""Interpretation of recorded, identified and modified dates."""

from .accumulator import EMPTY, ChronoAccumulator, ChronoField
from .converter import Granularity, TemporalValue
from .parser import (
    ParsedTemporalDates,
    TemporalParser,
    interpret_date_identified,
    interpret_modified,
    interpret_temporal,
)
from .tokenizer import DMY, MDY, parse_endpoint, split_period

__all__ = [
    "ChronoAccumulator",
    "ChronoField",
    "EMPTY",
    "Granularity",
    "TemporalValue",
    "ParsedTemporalDates",
    "TemporalParser",
    "interpret_date_identified",
    "interpret_modified",
    "interpret_temporal",
    "DMY",
    "MDY",
    "parse_endpoint",
    "split_period",
]
