"""Tests for the recording commands: visit, jump, record."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from jumpnet.cli import cli
from jumpnet.domain.files import FileVertex
from jumpnet.domain.graph import WeightedGraph, edge_id
from jumpnet.infrastructure.storage import read_graph

STORE = Path(".jumpnet") / "project.json"


def _stored(root: Path) -> WeightedGraph[FileVertex]:
    return asyncio.run(read_graph(root / STORE, FileVertex))


@pytest.mark.usefixtures("_isolated_workspace")
class TestVisitCommand:
    def test_visit_saves_relations(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        result = cli_runner.invoke(cli, ["visit", "src/app.py", "tests/test_app.py"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "relations: 1" in result.output

        graph = _stored(workspace_root)
        assert graph.get_edge(edge_id("src/app.py", "tests/test_app.py")).weight == 1

    def test_visit_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "visit", "src/app.py", "src/models.py"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "visit"
        assert data["data"]["current"] == "src/models.py"
        assert data["data"]["relations"][0]["weight"] == 1.0

    def test_runs_accumulate(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        cli_runner.invoke(cli, ["visit", "src/app.py", "src/models.py"])
        cli_runner.invoke(cli, ["visit", "src/models.py", "src/app.py"])
        graph = _stored(workspace_root)
        assert graph.get_edge(edge_id("src/app.py", "src/models.py")).weight == 2

    def test_requires_files(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["visit"])
        assert result.exit_code == 2

    def test_bad_path_fails(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "visit", "src/app.py", "bad\x1fname"])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "INVALID_INPUT"


@pytest.mark.usefixtures("_isolated_workspace")
class TestJumpCommand:
    def test_jump(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        result = cli_runner.invoke(cli, ["jump", "src/views.py", "src/app.py"])
        assert result.exit_code == 0, result.output
        assert "weight: 1" in result.output
        assert _stored(workspace_root).is_connected("src/app.py", "src/views.py")

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "jump", "src/views.py", "src/app.py"])
        assert result.stdout.strip() == "OK: jump"


@pytest.mark.usefixtures("_isolated_workspace")
class TestRecordCommand:
    def test_stream_from_stdin(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        stream = "src/app.py\nsrc/models.py\nrelated:src/views.py\nsrc/app.py\n"
        result = cli_runner.invoke(cli, ["--json", "record"], input=stream)
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data == {"recorded": 3, "ignored": 1, "relations": 2, "current": "src/app.py"}

        graph = _stored(workspace_root)
        assert graph.get_edge(edge_id("src/app.py", "src/models.py")).weight == 2
        assert not graph.has_vertex("src/views.py")

    def test_empty_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record"], input="")
        assert result.exit_code == 0
        assert "recorded: 0" in result.output

    def test_bad_line_warns(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record"], input="src/app.py\nbad\x1fname\n")
        assert result.exit_code == 0
        assert "WARNING: Skipped" in result.stderr
        assert "WARNING" not in result.stdout
