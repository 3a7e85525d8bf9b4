from .logs import JSONFormatter, setup_logging
from .read import iter_raw_terms, iter_rows, read_pairs
from .write import (
    issue_counts,
    write_clusters_csv,
    write_interpreted,
    write_issue_summary,
    write_jsonl,
)

__all__ = [
    "JSONFormatter",
    "setup_logging",
    "iter_rows",
    "iter_raw_terms",
    "read_pairs",
    "issue_counts",
    "write_clusters_csv",
    "write_interpreted",
    "write_issue_summary",
    "write_jsonl",
]
