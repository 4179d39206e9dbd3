"""Corner clustering (Union-Find over wall endpoints) and endpoint merging."""

from __future__ import annotations

import logging

import numpy as np
from scipy.spatial import cKDTree

logger = logging.getLogger(__name__)


class UnionFind:
    """Disjoint sets over ``0 .. n-1`` backed by a flat parent array."""

    def __init__(self, n: int) -> None:
        self.parent = np.arange(n, dtype=np.int64)

    def find(self, i: int) -> int:
        parent = self.parent
        while parent[i] != i:
            parent[i] = parent[parent[i]]  # path halving
            i = int(parent[i])
        return int(i)

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[ra] = rb

    def groups(self) -> list[np.ndarray]:
        """Members of every set, in order of each set's first member."""
        members: dict[int, list[int]] = {}
        for i in range(len(self.parent)):
            members.setdefault(self.find(i), []).append(i)
        return [np.asarray(m, dtype=np.int64) for m in members.values()]


def cluster_endpoints(points: np.ndarray, merge_distance: float) -> list[np.ndarray]:
    """Group endpoints into corners.

    Any two points at most *merge_distance* apart end up in the same
    cluster (transitively).  Returns one index array per cluster,
    singletons included.
    """
    n = len(points)
    if n == 0:
        return []

    uf = UnionFind(n)
    if merge_distance > 0:
        pairs = cKDTree(points).query_pairs(merge_distance, output_type="ndarray")
        for a, b in pairs:
            uf.union(int(a), int(b))
    return uf.groups()


def merge_endpoints(points: np.ndarray, merge_distance: float) -> int:
    """Move each cluster of nearby endpoints onto its rounded average, in place.

    Returns the number of endpoints that moved.
    """
    merged = 0
    for members in cluster_endpoints(points, merge_distance):
        if len(members) < 2:
            continue
        cluster = points[members]
        target = np.round(cluster.mean(axis=0))
        moved = int(np.any(cluster != target, axis=1).sum())
        if moved:
            points[members] = target
            merged += moved

    if merged:
        logger.info("  🔗 Merged %d endpoints into shared corners", merged)
    return merged
