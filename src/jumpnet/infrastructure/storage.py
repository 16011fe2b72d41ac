"""Graph file storage — path resolution, async read/write, fail-closed load.

One JSON file per workspace: ``<storage dir>/<workspace name>.json``.
File I/O runs in a worker thread via :func:`asyncio.to_thread` so the
event loop stays responsive while a save is in flight.

Load policy: any failure to read a stored graph (missing file, bad JSON,
version mismatch, broken invariants) falls back to a fresh empty graph.
The fallback is always logged and the reason is returned to the caller;
stored data is never repaired in place.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from jumpnet.domain.errors import CorruptGraphError, JumpNetError, VersionMismatchError
from jumpnet.domain.graph import Vertex, WeightedGraph
from jumpnet.infrastructure.codec import deserialize, serialize

log = structlog.get_logger(__name__)

STORAGE_SUFFIX = ".json"


def storage_path(storage_dir: Path, workspace_name: str | None) -> Path:
    """Resolve the graph file for *workspace_name* inside *storage_dir*.

    Path separators in the name are replaced by ``-``.

    Raises:
        JumpNetError: If the workspace name is empty.
    """
    if not workspace_name:
        raise JumpNetError("No workspace name")
    safe = workspace_name
    for sep in {os.pathsep, os.sep, "/"}:
        safe = safe.replace(sep, "-")
    return storage_dir / f"{safe}{STORAGE_SUFFIX}"


def _ensure_directory(directory: Path) -> None:
    if directory.exists():
        if not directory.is_dir():
            raise JumpNetError(f"Storage path is not a directory {directory}")
        return
    directory.mkdir(parents=True, exist_ok=True)


def _write_atomic(path: Path, data: bytes) -> None:
    _ensure_directory(path.parent)
    fd, name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


async def write_graph(path: Path, graph: WeightedGraph[Any]) -> None:
    """Serialize *graph* as it is now and write it to *path*."""
    data = serialize(graph)
    log.debug("writing graph", path=str(path), vertices=graph.vertex_count)
    await asyncio.to_thread(_write_atomic, path, data)


async def read_graph[V: Vertex](path: Path, vertex_type: type[V]) -> WeightedGraph[V]:
    """Read and decode the graph at *path*. Errors propagate."""
    data = await asyncio.to_thread(path.read_bytes)
    return deserialize(data, vertex_type)


@dataclass
class LoadOutcome[V: Vertex]:
    """Result of :func:`load_graph`.

    Attributes:
        graph: The loaded graph, or a fresh one after a fallback.
        loaded: True if *graph* came from disk.
        reason: Why the fallback happened (None when loaded).
        error_code: ``NOT_FOUND``, ``VERSION_MISMATCH``, ``CORRUPT_GRAPH``
            or ``IO_ERROR`` on fallback.
    """

    graph: WeightedGraph[V]
    loaded: bool
    reason: str | None = None
    error_code: str | None = None


async def load_graph[V: Vertex](path: Path, vertex_type: type[V]) -> LoadOutcome[V]:
    """Load the graph at *path*, falling back to an empty graph on any failure."""
    try:
        graph = await read_graph(path, vertex_type)
    except FileNotFoundError:
        log.info("no stored graph, starting with fresh data", path=str(path))
        return LoadOutcome(WeightedGraph(), loaded=False, reason="not found", error_code="NOT_FOUND")
    except VersionMismatchError as exc:
        code, reason = "VERSION_MISMATCH", str(exc)
    except CorruptGraphError as exc:
        code, reason = "CORRUPT_GRAPH", str(exc)
    except OSError as exc:
        code, reason = "IO_ERROR", str(exc)
    else:
        log.info("loaded graph", path=str(path), vertices=graph.vertex_count)
        return LoadOutcome(graph, loaded=True)

    log.warning(
        "could not load stored graph, starting with fresh data",
        path=str(path),
        error_code=code,
        reason=reason,
    )
    return LoadOutcome(WeightedGraph(), loaded=False, reason=reason, error_code=code)
