"""Ranked traversal — "most related first, then breadth-expanding".

A weighted breadth-first walk: each expanded vertex contributes its
unvisited neighbors sorted by edge weight (heaviest first). Ties keep
adjacency order, which is edge insertion order, because ``sorted`` is
stable.

The walk is a generator so callers that only want the top N never pay
for the rest of the graph.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from itertools import islice

from jumpnet.domain.graph import IdOrVertex, Vertex, WeightedGraph, vertex_to_id


def adjacent_vertices_by_weight[V: Vertex](graph: WeightedGraph[V], vertex: IdOrVertex) -> list[V]:
    """Neighbors of *vertex*, heaviest edge first."""
    edges = sorted(graph.vertex_edges(vertex), key=lambda e: e.weight, reverse=True)
    neighbors: list[V] = []
    for edge in edges:
        neighbor = graph.get_vertex(edge.vertex_ids[1])
        if neighbor is not None:
            neighbors.append(neighbor)
    return neighbors


def vertices_by_weight[V: Vertex](graph: WeightedGraph[V], start: IdOrVertex) -> Iterator[V]:
    """Yield vertices related to *start*, most related first.

    *start* need not be in the graph; an absent start yields nothing.
    Never yields *start* itself and never yields a vertex twice.
    """
    frontier: deque[str] = deque([vertex_to_id(start)])
    visited: set[str] = {vertex_to_id(start)}

    while frontier:
        current = frontier.popleft()
        for neighbor in adjacent_vertices_by_weight(graph, current):
            if neighbor.id in visited:
                continue
            visited.add(neighbor.id)
            frontier.append(neighbor.id)
            yield neighbor


def most_related[V: Vertex](graph: WeightedGraph[V], start: IdOrVertex, limit: int) -> list[V]:
    """The first *limit* vertices of :func:`vertices_by_weight`."""
    if limit <= 0:
        return []
    return list(islice(vertices_by_weight(graph, start), limit))
