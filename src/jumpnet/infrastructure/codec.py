"""Versioned JSON codec for :class:`~jumpnet.domain.graph.WeightedGraph`.

On-disk shape::

    {
      "version": "1.0",
      "verts":   {"<vertexId>": {...vertex payload...}},
      "edges":   {"<edgeId>": {"id": ..., "vertexIds": [a, b], "weight": n}},
      "edgeMap": {"<vertexId>": ["<edgeId>", ...]}
    }

INVARIANT: the version tag must match :data:`SCHEMA_VERSION` exactly. There
is no migration. A decoded graph is validated before it is returned, so a
caller never holds a graph that violates the adjacency invariant.

The codec is a pure transform; reading and writing files is the caller's
job (see :mod:`jumpnet.infrastructure.storage`).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from jumpnet.domain.errors import CorruptGraphError, VersionMismatchError
from jumpnet.domain.graph import Edge, Vertex, WeightedGraph

SCHEMA_VERSION = "1.0"


class EdgeRecord(BaseModel):
    """Serialized edge."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    vertex_ids: tuple[str, str] = Field(alias="vertexIds")
    weight: float


class GraphDocument(BaseModel):
    """The whole persisted file."""

    model_config = {"frozen": True, "populate_by_name": True}

    version: str
    verts: dict[str, dict[str, Any]] = Field(default_factory=dict)
    edges: dict[str, EdgeRecord] = Field(default_factory=dict)
    edge_map: dict[str, list[str]] = Field(default_factory=dict, alias="edgeMap")


def to_document(graph: WeightedGraph[Any]) -> dict[str, Any]:
    """Graph -> JSON-compatible dict (sets become lists)."""
    doc = GraphDocument(
        version=SCHEMA_VERSION,
        verts={vid: v.model_dump(mode="json") for vid, v in graph.verts.items()},
        edges={
            eid: EdgeRecord(id=e.id, vertex_ids=e.vertex_ids, weight=e.weight)
            for eid, e in graph.edge_collection.items()
        },
        edge_map=graph.edge_map,
    )
    return doc.model_dump(mode="json", by_alias=True)


def from_document[V: Vertex](raw: Any, vertex_type: type[V]) -> WeightedGraph[V]:
    """JSON-compatible dict -> validated graph.

    Raises:
        VersionMismatchError: If ``version`` is not :data:`SCHEMA_VERSION`.
        CorruptGraphError: If the structure is malformed or invariants fail.
    """
    if not isinstance(raw, dict):
        raise CorruptGraphError(f"Graph document must be an object, got {type(raw).__name__}")

    version = raw.get("version")
    if version != SCHEMA_VERSION:
        raise VersionMismatchError(version, SCHEMA_VERSION)

    try:
        doc = GraphDocument.model_validate(raw)
        verts = {vid: vertex_type.model_validate(payload) for vid, payload in doc.verts.items()}
    except ValidationError as exc:
        msg = f"Malformed graph document ({exc.error_count()} validation errors)"
        raise CorruptGraphError(msg) from exc

    edges = {
        eid: Edge(id=rec.id, vertex_ids=rec.vertex_ids, weight=rec.weight)
        for eid, rec in doc.edges.items()
    }
    return WeightedGraph.from_collections(verts, edges, doc.edge_map)


def serialize(graph: WeightedGraph[Any]) -> bytes:
    """Encode *graph* as UTF-8 JSON."""
    return json.dumps(to_document(graph), separators=(",", ":")).encode("utf-8")


def deserialize[V: Vertex](data: bytes | str, vertex_type: type[V] = Vertex) -> WeightedGraph[V]:  # type: ignore[assignment]
    """Decode bytes produced by :func:`serialize` into a new graph.

    Never touches any existing graph: on failure nothing has been replaced.

    Raises:
        VersionMismatchError: Unsupported schema version.
        CorruptGraphError: Invalid JSON, malformed structure, or broken invariants.
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptGraphError(f"Invalid JSON: {exc}") from exc
    return from_document(raw, vertex_type)
