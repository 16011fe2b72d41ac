"""Shared pytest fixtures and test helpers for jumpnet tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from jumpnet.config.models import StorageConfig
from jumpnet.config.settings import JumpNetSettings
from jumpnet.domain.graph import Vertex, WeightedGraph


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own jumpnet env vars out of tests."""
    monkeypatch.delenv("JUMPNET_CONFIG", raising=False)
    monkeypatch.delenv("JUMPNET_WORKSPACE_ROOT", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace with a few source files."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "tests").mkdir()
    for name in ("src/app.py", "src/models.py", "src/views.py", "tests/test_app.py"):
        (root / name).write_text("", encoding="utf-8")
    return root


@pytest.fixture
def settings(workspace_root: Path) -> JumpNetSettings:
    """Settings for the temp workspace with a short save delay."""
    return JumpNetSettings.from_cli(
        workspace_root=workspace_root,
        storage=StorageConfig(save_delay_ms=10, save_timeout_s=5.0),
    )


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp workspace so the CLI uses an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_graph(*edges: tuple[str, str, float]) -> WeightedGraph[Vertex]:
    """Build a graph from ``(a, b, weight)`` triples, adding vertices as needed."""
    graph: WeightedGraph[Vertex] = WeightedGraph()
    for a, b, weight in edges:
        for vid in (a, b):
            if not graph.has_vertex(vid):
                graph.add_vertex(Vertex(id=vid))
        graph.add_edge(a, b, weight)
    return graph
