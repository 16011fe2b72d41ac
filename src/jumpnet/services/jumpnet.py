"""JumpNet — the owned context for one workspace's relatedness graph.

A JumpNet instance ties together the graph, the file the user is currently
in, and the debounced save action. Callers construct it explicitly and
drive its lifecycle::

    async with JumpNet(settings) as net:
        net.changed_active_file("src/app.py")
        net.changed_active_file("tests/test_app.py")
        net.related_files("src/app.py")

``activate()`` (``__aenter__``) loads the stored graph, falling back to an
empty one. From then on every graph mutation queues a save. ``deactivate()``
(``__aexit__``) performs a final flush and disarms the save action so no
write happens after shutdown.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Self

import structlog

from jumpnet.config.settings import JumpNetSettings
from jumpnet.domain.errors import JumpNetError, PersistenceFailure
from jumpnet.domain.files import FileVertex
from jumpnet.domain.graph import Edge, GraphEvent, WeightedGraph
from jumpnet.domain.traversal import most_related
from jumpnet.infrastructure.scheduler import ActionEvent, ThrottledAction
from jumpnet.infrastructure.storage import LoadOutcome, load_graph, storage_path, write_graph

log = structlog.get_logger(__name__)


class JumpNet:
    """Relatedness tracking for one workspace.

    Attributes:
        graph: The live graph. Replaced wholesale on load and reset.
        current: The file the user is in, or None before the first visit.
        ignore_open: While True, active-file changes are not recorded.
        save_action: Debounced writer for :attr:`graph`.
        save_errors: Every save failure seen by this instance.
    """

    def __init__(self, settings: JumpNetSettings) -> None:
        self.settings = settings
        self.graph: WeightedGraph[FileVertex] = WeightedGraph()
        self.current: FileVertex | None = None
        self.ignore_open = False
        self.save_action = ThrottledAction(
            self.save,
            rate_ms=settings.storage.save_delay_ms,
            timeout=settings.storage.save_timeout_s,
        )
        self.save_action.subscribe(ActionEvent.ERROR, self._on_save_error)
        self.save_errors: list[PersistenceFailure] = []
        self.load_outcome: LoadOutcome[FileVertex] | None = None
        # Saves are wired up by activate(), never before the stored graph is read.
        self._unsubscribe_graph: Callable[[], None] = lambda: None

    @property
    def workspace_root(self) -> Path:
        return self.settings.workspace_root

    @property
    def storage_path(self) -> Path:
        return storage_path(self.settings.storage_dir, self.settings.workspace_name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def activate(self) -> LoadOutcome[FileVertex]:
        """Load the stored graph, or start fresh if it cannot be read."""
        try:
            path = self.storage_path
        except JumpNetError as exc:
            log.warning("no storage path, starting with fresh data", reason=str(exc))
            outcome: LoadOutcome[FileVertex] = LoadOutcome(
                WeightedGraph(), loaded=False, reason=str(exc), error_code="IO_ERROR"
            )
        else:
            outcome = await load_graph(path, FileVertex)
        self._replace_graph(outcome.graph)
        self.load_outcome = outcome
        return outcome

    async def deactivate(self, *, flush: bool = True) -> None:
        """Write the final state (unless *flush* is False), then stop all saves."""
        if flush:
            await self.save_action.flush()
        self.save_action.disarm()
        self._unsubscribe_graph()

    async def __aenter__(self) -> Self:
        await self.activate()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.deactivate()

    def _replace_graph(self, graph: WeightedGraph[FileVertex]) -> None:
        self._unsubscribe_graph()
        self.graph = graph
        self._unsubscribe_graph = graph.subscribe(self._on_graph_event)

    def _on_graph_event(self, _event: GraphEvent) -> None:
        # The change itself stands; it is written by the next save or flush.
        try:
            self.save_action.queue()
        except RuntimeError as exc:
            log.warning("save not queued, no running event loop", error=str(exc))

    def _on_save_error(self, _event: ActionEvent, error: PersistenceFailure | None) -> None:
        if error is None:
            return
        log.error("saving jump graph failed", path=str(self.storage_path), error=str(error))
        self.save_errors.append(error)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def file_vertex(self, path: str | Path) -> FileVertex:
        return FileVertex.from_path(path, self.workspace_root)

    def add_file(self, path: str | Path) -> FileVertex:
        vertex = self.file_vertex(path)
        self.graph.add_vertex(vertex)
        return vertex

    def add_related(self, a: str | Path, b: str | Path) -> Edge:
        """Strengthen the relation between two files by the configured increment."""
        return self.graph.add_to_edge(
            self.add_file(a),
            self.add_file(b),
            self.settings.tracking.weight_increment,
        )

    def changed_active_file(self, path: str | Path | None) -> Edge | None:
        """Record that the user moved from :attr:`current` to *path*.

        Returns the strengthened edge, or None when nothing was related
        (no previous file, same file, or recording suspended).
        """
        if path is None or self.ignore_open:
            return None

        vertex = self.add_file(path)
        previous, self.current = self.current, vertex
        if previous is None or previous.id == vertex.id:
            return None
        return self.add_related(previous.path, vertex.path)

    @contextmanager
    def open_related(self) -> Iterator[None]:
        """Suspend recording while the user jumps to a suggested file."""
        self.ignore_open = True
        try:
            yield
        finally:
            self.ignore_open = False

    # ------------------------------------------------------------------
    # Queries and maintenance
    # ------------------------------------------------------------------

    def related_files(self, path: str | Path, max_items: int | None = None) -> list[FileVertex]:
        """Most related files first, capped at *max_items* (config default)."""
        limit = max_items if max_items is not None else self.settings.related.max_items
        return most_related(self.graph, self.file_vertex(path), limit)

    def forget(self, path: str | Path) -> bool:
        """Drop a file and all of its relations."""
        vertex_id = self.file_vertex(path).id
        if self.current is not None and self.current.id == vertex_id:
            self.current = None
        return self.graph.delete_vertex(vertex_id)

    def unlink(self, a: str | Path, b: str | Path) -> bool:
        return self.graph.delete_edge(self.file_vertex(a), self.file_vertex(b))

    async def reset(self) -> None:
        """Clear all relations and save the empty graph immediately."""
        self._replace_graph(WeightedGraph())
        self.current = None
        await self.save_action.run()

    async def save(self) -> None:
        await write_graph(self.storage_path, self.graph)
