"""Interpretation of raw occurrence records into structured fields and issues."""

from .issues import InterpretationIssue, IssueLedger, IssueType, ParsedField, issue_types
from .record import InterpretedRecord, RecordInterpreter

__all__ = [
    "InterpretationIssue",
    "IssueLedger",
    "IssueType",
    "ParsedField",
    "issue_types",
    "InterpretedRecord",
    "RecordInterpreter",
]
