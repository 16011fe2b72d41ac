"""WeightedGraph — undirected weighted graph with an adjacency index.

Three collections make up the graph:

- ``verts``: vertex id -> vertex payload.
- ``edges``: canonical edge id -> :class:`Edge`.
- ``edge_map``: vertex id -> insertion-ordered set of incident edge ids.

INVARIANT: every edge's endpoints are present vertices, and ``edge_map`` is
exactly the inverse of the edges' endpoint lists. Mutations keep this true;
:meth:`WeightedGraph.validate` re-checks it after a bulk load.

Observers subscribe to a closed set of typed events (``VertexAdded``,
``EdgeAdded``, ``VertexDeleted``, ``EdgeDeleted``, ``GraphCleared``).
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from jumpnet.domain.errors import CorruptGraphError, InvalidVertexIdError, MissingVertexError

# Not a legal character in file paths or ordinary identifiers.
EDGE_ID_SEPARATOR = "\x1f"
NULL_EDGE_ID = "null"


class Vertex(BaseModel):
    """A graph vertex. Subclasses carry the caller's payload."""

    model_config = {"frozen": True}

    id: str


@dataclass(frozen=True)
class Edge:
    """An undirected weighted edge between two present vertices."""

    id: str
    vertex_ids: tuple[str, str]
    weight: float


@dataclass(frozen=True)
class NullEdge:
    """Query-only value meaning "no relation". Never stored in a graph."""

    id: Literal["null"] = NULL_EDGE_ID
    vertex_ids: tuple[()] = ()
    weight: float = 0.0


NULL_EDGE = NullEdge()

type IdOrVertex = str | Vertex


# --- Events ---


@dataclass(frozen=True)
class VertexAdded:
    vertex_id: str


@dataclass(frozen=True)
class EdgeAdded:
    edge_id: str
    weight: float


@dataclass(frozen=True)
class VertexDeleted:
    vertex_id: str
    edge_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class EdgeDeleted:
    edge_id: str


@dataclass(frozen=True)
class GraphCleared:
    pass


type GraphEvent = VertexAdded | EdgeAdded | VertexDeleted | EdgeDeleted | GraphCleared
type GraphListener = Callable[[GraphEvent], None]


# --- Id helpers ---


def vertex_to_id(vertex: IdOrVertex) -> str:
    return vertex if isinstance(vertex, str) else vertex.id


def edge_id(a: IdOrVertex, b: IdOrVertex) -> str:
    """Canonical id of the undirected edge between *a* and *b*.

    The two endpoint ids are sorted before joining, so
    ``edge_id(a, b) == edge_id(b, a)``.
    """
    first, second = sorted((vertex_to_id(a), vertex_to_id(b)))
    return f"{first}{EDGE_ID_SEPARATOR}{second}"


def describe_edge(eid: str) -> str:
    """Human-readable form of an edge id (``a <-> b``)."""
    return " <-> ".join(eid.split(EDGE_ID_SEPARATOR))


def is_null_edge(edge: Edge | NullEdge) -> bool:
    return isinstance(edge, NullEdge)


def validate_vertex_id(vertex_id: str) -> None:
    if not vertex_id:
        raise InvalidVertexIdError("Vertex id must not be empty")
    if EDGE_ID_SEPARATOR in vertex_id:
        raise InvalidVertexIdError(f"Vertex id contains the edge separator: {vertex_id!r}")


def _is_valid_weight(weight: float) -> bool:
    return math.isfinite(weight) and weight >= 0


class WeightedGraph[V: Vertex]:
    """Undirected weighted graph keyed by caller-supplied vertex ids.

    Not thread-safe: a graph belongs to a single owner.
    """

    def __init__(self) -> None:
        self._verts: dict[str, V] = {}
        self._edges: dict[str, Edge] = {}
        # dict values used as insertion-ordered sets
        self._edge_map: dict[str, dict[str, None]] = {}
        self._listeners: list[GraphListener] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: GraphListener) -> Callable[[], None]:
        """Register *listener* for graph events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GraphEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self._verts.clear()
        self._edges.clear()
        self._edge_map.clear()
        self._emit(GraphCleared())

    def add_vertex(self, vertex: V) -> None:
        """Insert or replace *vertex*. Existing edges are kept.

        Emits ``VertexAdded`` on every call, including no-op updates.
        """
        validate_vertex_id(vertex.id)
        self._verts[vertex.id] = vertex
        self._emit(VertexAdded(vertex.id))

    def add_edge(self, a: IdOrVertex, b: IdOrVertex, weight: float) -> Edge:
        """Create or overwrite the edge between *a* and *b* with *weight*.

        Raises:
            MissingVertexError: If either endpoint is not a vertex.
            ValueError: If *weight* is negative or not finite.
        """
        from_id, to_id = vertex_to_id(a), vertex_to_id(b)
        for vid in (from_id, to_id):
            if vid not in self._verts:
                raise MissingVertexError(vid)
        if not _is_valid_weight(weight):
            raise ValueError(f"Edge weight must be finite and non-negative, got {weight!r}")

        eid = edge_id(from_id, to_id)
        first, second = sorted((from_id, to_id))
        edge = Edge(id=eid, vertex_ids=(first, second), weight=weight)
        self._edges[eid] = edge
        self._edge_map.setdefault(from_id, {})[eid] = None
        self._edge_map.setdefault(to_id, {})[eid] = None

        self._emit(EdgeAdded(eid, weight))
        return edge

    def add_to_edge(self, a: IdOrVertex, b: IdOrVertex, delta: float) -> Edge:
        """Strengthen the edge between *a* and *b* by *delta* (0 if absent)."""
        current = self._edges.get(edge_id(a, b))
        base = current.weight if current is not None else 0
        return self.add_edge(a, b, base + delta)

    def delete_edge(self, a: IdOrVertex, b: IdOrVertex) -> bool:
        """Remove the edge between *a* and *b*. Returns True if it existed."""
        eid = edge_id(a, b)
        edge = self._edges.pop(eid, None)
        if edge is None:
            return False
        for vid in edge.vertex_ids:
            self._unregister(vid, eid)
        self._emit(EdgeDeleted(eid))
        return True

    def delete_vertex(self, vertex: IdOrVertex) -> bool:
        """Remove a vertex and every edge incident to it."""
        vid = vertex_to_id(vertex)
        if vid not in self._verts:
            return False
        del self._verts[vid]

        removed: list[str] = []
        for eid in self._edge_map.pop(vid, {}):
            edge = self._edges.pop(eid, None)
            if edge is None:
                continue
            removed.append(eid)
            for other in edge.vertex_ids:
                if other != vid:
                    self._unregister(other, eid)

        self._emit(VertexDeleted(vid, tuple(removed)))
        return True

    def _unregister(self, vid: str, eid: str) -> None:
        incident = self._edge_map.get(vid)
        if incident is None:
            return
        incident.pop(eid, None)
        if not incident:
            del self._edge_map[vid]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has_vertex(self, vertex: IdOrVertex) -> bool:
        return vertex_to_id(vertex) in self._verts

    def is_connected(self, a: IdOrVertex, b: IdOrVertex) -> bool:
        return edge_id(a, b) in self._edges

    def get_vertex(self, vertex_id: str) -> V | None:
        return self._verts.get(vertex_id)

    def get_edge(self, eid: str) -> Edge | NullEdge:
        """Look up an edge by id. Missing edges return :data:`NULL_EDGE`."""
        return self._edges.get(eid, NULL_EDGE)

    def vertex_edges(self, vertex: IdOrVertex) -> list[Edge]:
        """Edges incident to *vertex*, each oriented as ``(vertex, neighbor)``."""
        vid = vertex_to_id(vertex)
        result: list[Edge] = []
        for eid in self._edge_map.get(vid, {}):
            edge = self._edges.get(eid)
            if edge is None:
                continue
            first, second = edge.vertex_ids
            if first != vid:
                edge = dataclasses.replace(edge, vertex_ids=(second, first))
            result.append(edge)
        return result

    def adjacent_vertices(
        self,
        vertex: IdOrVertex,
        edge_filter: Callable[[Edge], bool] | None = None,
    ) -> list[V]:
        """Neighbors of *vertex*, optionally restricted to edges passing *edge_filter*."""
        edges = self.vertex_edges(vertex)
        if edge_filter is not None:
            edges = [e for e in edges if edge_filter(e)]
        return [self._verts[e.vertex_ids[1]] for e in edges if e.vertex_ids[1] in self._verts]

    def vertices(self) -> Iterator[V]:
        return iter(list(self._verts.values()))

    def edges(self) -> Iterator[Edge]:
        return iter(list(self._edges.values()))

    @property
    def vertex_count(self) -> int:
        return len(self._verts)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __len__(self) -> int:
        return len(self._verts)

    def __contains__(self, vertex: object) -> bool:
        if isinstance(vertex, (str, Vertex)):
            return self.has_vertex(vertex)
        return False

    # ------------------------------------------------------------------
    # Bulk access (codec)
    # ------------------------------------------------------------------

    @property
    def verts(self) -> Mapping[str, V]:
        return self._verts

    @property
    def edge_collection(self) -> Mapping[str, Edge]:
        return self._edges

    @property
    def edge_map(self) -> dict[str, list[str]]:
        """Copy of the adjacency index with sets as lists."""
        return {vid: list(eids) for vid, eids in self._edge_map.items()}

    @classmethod
    def from_collections(
        cls,
        verts: Mapping[str, V],
        edges: Mapping[str, Edge],
        edge_map: Mapping[str, Iterable[str]],
    ) -> WeightedGraph[V]:
        """Build a graph wholesale from its three collections, then validate.

        Raises:
            CorruptGraphError: If the collections violate the graph invariant.
        """
        graph: WeightedGraph[V] = cls()
        graph._verts = dict(verts)
        graph._edges = dict(edges)
        graph._edge_map = {vid: dict.fromkeys(eids) for vid, eids in edge_map.items()}
        graph.validate()
        return graph

    def validate(self) -> None:
        """Check the global graph invariant.

        Raises:
            CorruptGraphError: Naming the first offending vertex or edge.
        """
        for key, vertex in self._verts.items():
            try:
                validate_vertex_id(key)
            except InvalidVertexIdError as exc:
                raise CorruptGraphError(str(exc)) from exc
            if vertex.id != key:
                raise CorruptGraphError(f"Vertex stored under {key!r} has id {vertex.id!r}")

        for key, edge in self._edges.items():
            for vid in edge.vertex_ids:
                if vid not in self._verts:
                    raise CorruptGraphError(
                        f"Invalid edge connecting {', '.join(edge.vertex_ids)}",
                        edge_id=key,
                    )
            if edge.id != key or edge_id(*edge.vertex_ids) != key:
                raise CorruptGraphError(
                    f"Edge {describe_edge(key)} is not stored under its canonical id",
                    edge_id=key,
                )
            if not _is_valid_weight(edge.weight):
                raise CorruptGraphError(
                    f"Edge {describe_edge(key)} has invalid weight {edge.weight!r}",
                    edge_id=key,
                )
            for vid in edge.vertex_ids:
                if key not in self._edge_map.get(vid, {}):
                    raise CorruptGraphError(
                        f"Edge {describe_edge(key)} missing from adjacency of {vid!r}",
                        edge_id=key,
                    )

        for vid, eids in self._edge_map.items():
            if vid not in self._verts:
                raise CorruptGraphError(f"Adjacency entry for unknown vertex {vid!r}")
            for eid in eids:
                edge = self._edges.get(eid)
                if edge is None:
                    raise CorruptGraphError(
                        f"Adjacency of {vid!r} references missing edge {describe_edge(eid)}",
                        edge_id=eid,
                    )
                if vid not in edge.vertex_ids:
                    raise CorruptGraphError(
                        f"Adjacency of {vid!r} lists non-incident edge {describe_edge(eid)}",
                        edge_id=eid,
                    )
