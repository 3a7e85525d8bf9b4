"""Grouping of candidate-duplicate pairs into clusters."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Set, Tuple, Union

logger = logging.getLogger(__name__)

FIRST = "first"
UNION = "union"
MERGE_STRATEGIES = (FIRST, UNION)


class ClusterPair(NamedTuple):
    """Two record identifiers flagged as likely duplicates.  Order carries no meaning."""

    first: str
    second: str


PairLike = Union[ClusterPair, Tuple[str, str]]


def _merge_into_first(pairs: Iterable[PairLike]) -> List[Set[str]]:
    clusters: List[Set[str]] = []
    for first, second in pairs:
        for cluster in clusters:
            if first in cluster or second in cluster:
                cluster.update((first, second))
                break
        else:
            clusters.append({first, second})
    return clusters


def _union_find(pairs: Iterable[PairLike]) -> List[Set[str]]:
    parent: Dict[str, str] = {}

    def find(node: str) -> str:
        root = node
        while parent[root] != root:
            root = parent[root]
        while parent[node] != root:
            parent[node], node = root, parent[node]
        return root

    for first, second in pairs:
        parent.setdefault(first, first)
        parent.setdefault(second, second)
        root_a, root_b = find(first), find(second)
        if root_a != root_b:
            parent[root_b] = root_a

    # dict preserves first-seen order, so clusters come out by first appearance
    groups: Dict[str, Set[str]] = {}
    for node in parent:
        groups.setdefault(find(node), set()).add(node)
    return list(groups.values())


def create_clusters(pairs: Iterable[PairLike], strategy: str = FIRST) -> List[Set[str]]:
    """Group ``pairs`` into clusters of identifiers.

    ``"first"`` adds each pair to the first existing cluster holding either
    identifier and never joins two clusters that already exist, so
    ``[(A, B), (C, D), (B, C)]`` stays as ``{A, B, C}`` and ``{C, D}``.
    ``"union"`` joins every transitively linked identifier into one
    cluster.
    """

    if strategy == FIRST:
        clusters = _merge_into_first(pairs)
    elif strategy == UNION:
        clusters = _union_find(pairs)
    else:
        raise ValueError(f"Unknown merge strategy {strategy!r}; expected one of {MERGE_STRATEGIES}")
    logger.debug("Built %d clusters with the %s strategy", len(clusters), strategy)
    return clusters


def strategy_from_config(cfg: Mapping[str, Any]) -> str:
    strategy = cfg.get("clustering", {}).get("merge_strategy", FIRST)
    if strategy not in MERGE_STRATEGIES:
        raise ValueError(f"Unknown merge strategy {strategy!r}; expected one of {MERGE_STRATEGIES}")
    return strategy


__all__ = [
    "ClusterPair",
    "FIRST",
    "UNION",
    "MERGE_STRATEGIES",
    "create_clusters",
    "strategy_from_config",
]
