"""Minimum spanning tree over a dense weighted graph (Prim's algorithm)."""

from __future__ import annotations

import math
from typing import Optional, Sequence


def _min_key(keys: Sequence[float], in_tree: Sequence[bool]) -> int:
    best = math.inf
    best_index = 0
    for index, (key, done) in enumerate(zip(keys, in_tree)):
        if not done and key < best:
            best = key
            best_index = index
    return best_index


def minimum_spanning_tree(graph: Sequence[Sequence[float]]) -> list[Optional[int]]:
    """Return the parent of every vertex in a minimum spanning tree.

    ``graph`` is a square adjacency matrix; a weight of zero means no edge.
    Vertex 0 is the root and has parent ``None``. A vertex that cannot be
    reached keeps parent 0.
    """
    size = len(graph)
    if size == 0:
        raise ValueError("graph has no vertices")
    if any(len(row) != size for row in graph):
        raise ValueError("graph must be a square matrix")

    keys: list[float] = [math.inf] * size
    keys[0] = 0
    in_tree = [False] * size
    parent: list[Optional[int]] = [0] * size
    parent[0] = None

    for _ in range(size - 1):
        u = _min_key(keys, in_tree)
        in_tree[u] = True
        for v, weight in enumerate(graph[u]):
            if weight and not in_tree[v] and weight < keys[v]:
                parent[v] = u
                keys[v] = weight

    return parent