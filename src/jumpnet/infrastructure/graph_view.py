"""GraphView — lazily built NetworkX projection of a WeightedGraph.

Built on first access and dropped whenever the source graph changes, so
commands that never ask for graph analytics never pay for the build.
Used for whole-graph statistics (components, hubs); ranking queries go
through :mod:`jumpnet.domain.traversal` against the live graph instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import networkx as nx

if TYPE_CHECKING:
    from jumpnet.domain.graph import GraphEvent, WeightedGraph


class GraphView:
    """Read-only NetworkX view kept in step with a :class:`WeightedGraph`."""

    def __init__(self, source: WeightedGraph[Any]) -> None:
        self._source = source
        self._graph: nx.Graph | None = None
        self._unsubscribe = source.subscribe(self._on_change)

    @property
    def graph(self) -> nx.Graph:
        """Return the projection, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Drop the cached projection, forcing rebuild on next access."""
        self._graph = None

    def close(self) -> None:
        self._unsubscribe()
        self._graph = None

    def _on_change(self, _event: GraphEvent) -> None:
        self.invalidate()

    def _build(self) -> nx.Graph:
        """Build an undirected nx.Graph with ``weight`` edge attributes.

        Vertices go in first so isolated files are visible to algorithms.
        """
        g = nx.Graph()
        for vertex in self._source.vertices():
            g.add_node(vertex.id)
        for edge in self._source.edges():
            g.add_edge(*edge.vertex_ids, weight=edge.weight)
        return g

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def components(self) -> list[list[str]]:
        """Connected components, largest first, members sorted by id."""
        comps = [sorted(c) for c in nx.connected_components(self.graph)]
        comps.sort(key=lambda c: (-len(c), c[0] if c else ""))
        return comps

    def hubs(self, top: int) -> list[dict[str, Any]]:
        """Vertices with the largest total edge weight (weighted degree)."""
        strength = dict(self.graph.degree(weight="weight"))
        degree = dict(self.graph.degree())
        ranked = sorted(strength.items(), key=lambda kv: (-kv[1], kv[0]))
        return [
            {"id": vid, "strength": float(s), "degree": degree[vid]}
            for vid, s in ranked[: max(top, 0)]
        ]

    def total_weight(self) -> float:
        return float(self.graph.size(weight="weight"))
