"""GraphService — recording, querying and maintaining file relations.

Recording operations (visit, jump, record) strengthen edges; queries
(related, stats) never mutate; maintenance (forget, unlink, reset, check)
covers what the user can do to the stored graph directly.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Sequence
from typing import Any

from jumpnet.domain.errors import JumpNetError
from jumpnet.domain.files import FileVertex
from jumpnet.domain.graph import edge_id
from jumpnet.infrastructure.graph_view import GraphView
from jumpnet.infrastructure.storage import read_graph
from jumpnet.services.base import BaseService
from jumpnet.services.result import ErrorCode, ServiceResult

RELATED_PREFIX = "related:"


class GraphService(BaseService):
    """File-relation operations over an activated :class:`JumpNet`."""

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def visit(self, paths: Sequence[str]) -> ServiceResult:
        """Record a sequence of active-file changes, in order."""
        op = "visit"
        relations: list[dict[str, Any]] = []
        try:
            for path in paths:
                edge = self._net.changed_active_file(path)
                if edge is not None:
                    first, second = edge.vertex_ids
                    relations.append({"from": first, "to": second, "weight": edge.weight})
        except (JumpNetError, ValueError) as exc:
            return self._from_exception(op, exc)

        current = self._net.current.id if self._net.current else None
        return ServiceResult.success(
            op,
            {"visited": len(paths), "relations": relations, "current": current},
        )

    def jump(self, source: str, target: str) -> ServiceResult:
        """Strengthen the relation between two files once."""
        op = "jump"
        try:
            edge = self._net.add_related(source, target)
        except (JumpNetError, ValueError) as exc:
            return self._from_exception(op, exc)
        first, second = edge.vertex_ids
        return ServiceResult.success(op, {"from": first, "to": second, "weight": edge.weight})

    async def record(self, lines: AsyncIterable[str]) -> ServiceResult:
        """Consume a stream of active-file changes.

        Each non-blank line is a path. A line starting with ``related:`` is
        a navigation from the related list and is not recorded.
        """
        op = "record"
        recorded = ignored = relations = 0
        warnings: list[str] = []
        async for raw in lines:
            line = raw.strip()
            if not line:
                continue
            try:
                if line.startswith(RELATED_PREFIX):
                    with self._net.open_related():
                        self._net.changed_active_file(line.removeprefix(RELATED_PREFIX).strip())
                    ignored += 1
                    continue
                if self._net.changed_active_file(line) is not None:
                    relations += 1
                recorded += 1
            except (JumpNetError, ValueError) as exc:
                warnings.append(f"Skipped {line!r}: {exc}")

        current = self._net.current.id if self._net.current else None
        return ServiceResult.success(
            op,
            {
                "recorded": recorded,
                "ignored": ignored,
                "relations": relations,
                "current": current,
            },
        ).with_warnings(*warnings)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def related(self, path: str, *, top: int | None = None) -> ServiceResult:
        """Most related files for *path*."""
        op = "related"
        try:
            source = self._net.file_vertex(path)
            items = self._net.related_files(path, top)
        except (JumpNetError, ValueError) as exc:
            return self._from_exception(op, exc)

        graph = self._net.graph
        warnings: list[str] = []
        if not graph.has_vertex(source):
            warnings.append(f"No relations recorded for {source.id}")

        return ServiceResult.success(
            op,
            {
                "source_id": source.id,
                "items": [self._item(source, v) for v in items],
                "count": len(items),
            },
        ).with_warnings(*warnings)

    def _item(self, source: FileVertex, vertex: FileVertex) -> dict[str, Any]:
        weight = self._net.graph.get_edge(edge_id(source, vertex)).weight
        return {
            "id": vertex.id,
            "path": str(vertex.path),
            "weight": weight,
            "direct": weight > 0,
        }

    def stats(self, *, top: int = 10) -> ServiceResult:
        """Whole-graph statistics via NetworkX."""
        graph = self._net.graph
        view = GraphView(graph)
        try:
            components = view.components()
            data = {
                "vertices": graph.vertex_count,
                "edges": graph.edge_count,
                "total_weight": view.total_weight(),
                "components": len(components),
                "largest_component": len(components[0]) if components else 0,
                "items": view.hubs(top),
            }
        finally:
            view.close()
        data["count"] = len(data["items"])
        return ServiceResult.success("stats", data)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def forget(self, path: str) -> ServiceResult:
        op = "forget"
        try:
            vertex_id = self._net.file_vertex(path).id
            removed = self._net.forget(path)
        except (JumpNetError, ValueError) as exc:
            return self._from_exception(op, exc)
        if not removed:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"Not tracked: {vertex_id}")
        return ServiceResult.success(op, {"id": vertex_id})

    def unlink(self, source: str, target: str) -> ServiceResult:
        op = "unlink"
        try:
            a = self._net.file_vertex(source)
            b = self._net.file_vertex(target)
            removed = self._net.unlink(source, target)
        except (JumpNetError, ValueError) as exc:
            return self._from_exception(op, exc)
        if not removed:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No relation between {a.id} and {b.id}"
            )
        return ServiceResult.success(op, {"from": a.id, "to": b.id})

    async def reset(self) -> ServiceResult:
        """Clear every relation and save the empty graph immediately."""
        await self._net.reset()
        return ServiceResult.success("reset", {"path": str(self._net.storage_path)})

    async def check(self) -> ServiceResult:
        """Strictly read the stored graph and report what is wrong with it.

        Unlike activation, nothing falls back and nothing is written.
        """
        op = "check"
        try:
            path = self._net.storage_path
            graph = await read_graph(path, FileVertex)
        except FileNotFoundError:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, "No stored graph", {"path": str(path)}
            )
        except (JumpNetError, OSError) as exc:
            return self._from_exception(op, exc)
        return ServiceResult.success(
            op,
            {
                "path": str(path),
                "vertices": graph.vertex_count,
                "edges": graph.edge_count,
            },
        )
