"""Duplicate clustering and representative selection."""

from .clusters import FIRST, MERGE_STRATEGIES, UNION, ClusterPair, create_clusters, strategy_from_config
from .representative import (
    ClusterResult,
    OccurrenceFeatures,
    coordinate_precision,
    date_precision,
    decimal_places,
    find_representative,
    index_records,
    select_representatives,
)

__all__ = [
    "ClusterPair",
    "ClusterResult",
    "OccurrenceFeatures",
    "FIRST",
    "UNION",
    "MERGE_STRATEGIES",
    "create_clusters",
    "strategy_from_config",
    "coordinate_precision",
    "date_precision",
    "decimal_places",
    "find_representative",
    "index_records",
    "select_representatives",
]
