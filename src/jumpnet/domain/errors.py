"""Error taxonomy for jumpnet.

``MissingVertexError`` and ``InvalidVertexIdError`` are programmer errors
raised synchronously from graph mutations. ``CorruptGraphError`` and
``VersionMismatchError`` come out of loading persisted data and make the
caller fall back to an empty graph. ``PersistenceFailure`` is never raised
at a mutation call site; the save scheduler records it instead.
"""

from __future__ import annotations


class JumpNetError(Exception):
    """Base exception for jumpnet."""


class MissingVertexError(JumpNetError):
    """An edge operation referenced a vertex that is not in the graph."""

    def __init__(self, vertex_id: str) -> None:
        super().__init__(f"Must add vertex before adding edges: {vertex_id!r}")
        self.vertex_id = vertex_id


class InvalidVertexIdError(JumpNetError, ValueError):
    """A vertex id is empty or contains the edge id separator."""


class CorruptGraphError(JumpNetError):
    """Graph invariants do not hold (usually after loading untrusted data)."""

    def __init__(self, message: str, *, edge_id: str | None = None) -> None:
        super().__init__(message)
        self.edge_id = edge_id


class VersionMismatchError(JumpNetError):
    """Persisted data carries a schema version this codec does not read."""

    def __init__(self, found: object, expected: str) -> None:
        super().__init__(f"Invalid data version: {found!r} (expected {expected!r})")
        self.found = found
        self.expected = expected


class PersistenceFailure(JumpNetError):
    """The wrapped save action raised or timed out."""
