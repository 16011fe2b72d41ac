"""Tests for graph file storage and the fall-back load policy."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path

import pytest

from jumpnet.domain.errors import CorruptGraphError, JumpNetError
from jumpnet.domain.graph import Vertex, edge_id
from jumpnet.infrastructure.codec import serialize
from jumpnet.infrastructure.storage import (
    load_graph,
    read_graph,
    storage_path,
    write_graph,
)
from tests.conftest import make_graph


class TestStoragePath:
    def test_plain_name(self, tmp_path: Path) -> None:
        assert storage_path(tmp_path, "project") == tmp_path / "project.json"

    def test_separators_replaced(self, tmp_path: Path) -> None:
        name = f"a/b{os.pathsep}c"
        assert storage_path(tmp_path, name) == tmp_path / "a-b-c.json"

    @pytest.mark.parametrize("name", ["", None])
    def test_no_workspace_name(self, tmp_path: Path, name: str | None) -> None:
        with pytest.raises(JumpNetError, match="No workspace name"):
            storage_path(tmp_path, name)


class TestWriteRead:
    def test_round_trip_creates_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "store" / "nested" / "ws.json"
        graph = make_graph(("a", "b", 2))

        asyncio.run(write_graph(path, graph))
        assert path.exists()
        loaded = asyncio.run(read_graph(path, Vertex))

        assert loaded.get_edge(edge_id("a", "b")).weight == 2

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        asyncio.run(write_graph(path, make_graph(("a", "b", 1))))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ws.json"]

    def test_failed_write_removes_temp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "ws.json"
        path.write_bytes(serialize(make_graph(("a", "b", 1))))

        def refuse(self: Path, target: Path) -> Path:
            raise OSError("no space left on device")

        monkeypatch.setattr(Path, "replace", refuse)
        with pytest.raises(OSError, match="no space"):
            asyncio.run(write_graph(path, make_graph(("x", "y", 1))))
        monkeypatch.undo()

        assert sorted(p.name for p in tmp_path.iterdir()) == ["ws.json"]
        assert asyncio.run(read_graph(path, Vertex)).has_vertex("a")

    def test_concurrent_writes_do_not_share_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        graphs = [make_graph((f"v{i}", "w", 1)) for i in range(8)]

        async def scenario() -> None:
            await asyncio.gather(*(write_graph(path, g) for g in graphs))

        asyncio.run(scenario())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ws.json"]
        loaded = asyncio.run(read_graph(path, Vertex))
        assert loaded.has_vertex("w")

    def test_overwrites(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        asyncio.run(write_graph(path, make_graph(("a", "b", 1))))
        asyncio.run(write_graph(path, make_graph(("x", "y", 1))))
        loaded = asyncio.run(read_graph(path, Vertex))
        assert loaded.has_vertex("x")
        assert not loaded.has_vertex("a")

    def test_storage_dir_is_a_file(self, tmp_path: Path) -> None:
        blocker = tmp_path / "store"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(JumpNetError, match="not a directory"):
            asyncio.run(write_graph(blocker / "ws.json", make_graph()))

    def test_read_propagates_errors(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(CorruptGraphError):
            asyncio.run(read_graph(path, Vertex))
        with pytest.raises(FileNotFoundError):
            asyncio.run(read_graph(tmp_path / "missing.json", Vertex))


class TestLoadGraph:
    def test_loaded(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.write_bytes(serialize(make_graph(("a", "b", 1))))
        outcome = asyncio.run(load_graph(path, Vertex))
        assert outcome.loaded
        assert outcome.error_code is None
        assert outcome.graph.is_connected("a", "b")

    def test_missing_file(self, tmp_path: Path) -> None:
        outcome = asyncio.run(load_graph(tmp_path / "nope.json", Vertex))
        assert not outcome.loaded
        assert outcome.error_code == "NOT_FOUND"
        assert outcome.graph.vertex_count == 0

    def test_version_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.write_text(json.dumps({"version": "0.1"}), encoding="utf-8")
        outcome = asyncio.run(load_graph(path, Vertex))
        assert outcome.error_code == "VERSION_MISMATCH"
        assert outcome.reason is not None
        assert "0.1" in outcome.reason
        assert outcome.graph.vertex_count == 0

    def test_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.write_text("definitely not json", encoding="utf-8")
        outcome = asyncio.run(load_graph(path, Vertex))
        assert outcome.error_code == "CORRUPT_GRAPH"
        assert not outcome.loaded

    def test_unreadable(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.mkdir()
        outcome = asyncio.run(load_graph(path, Vertex))
        assert outcome.error_code == "IO_ERROR"

    def test_stored_file_not_touched_on_fallback(self, tmp_path: Path) -> None:
        path = tmp_path / "ws.json"
        path.write_text("garbage", encoding="utf-8")
        asyncio.run(load_graph(path, Vertex))
        assert path.read_text(encoding="utf-8") == "garbage"
