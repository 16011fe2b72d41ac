"""Tests for config discovery and loading."""

from pathlib import Path

import click
import pytest

from jumpnet.config.discovery import (
    CONFIG_FILENAME,
    find_config,
    find_workspace_root,
    load_config,
    read_toml,
)
from jumpnet.config.models import JumpNetConfig


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[workspace]\nname = "test"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[workspace]\nname = "test"\n')
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[workspace]\nname = "env"\n')
        monkeypatch.setenv("JUMPNET_CONFIG", str(config_file))
        assert find_config(tmp_path) == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("JUMPNET_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestFindWorkspaceRoot:
    def test_config_file_marks_root(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        child = tmp_path / "src" / "pkg"
        child.mkdir(parents=True)
        assert find_workspace_root(child) == tmp_path.resolve()

    @pytest.mark.parametrize("marker", [".git", ".hg", ".jj"])
    def test_vcs_marker(self, tmp_path: Path, marker: str) -> None:
        (tmp_path / marker).mkdir()
        child = tmp_path / "lib"
        child.mkdir()
        assert find_workspace_root(child) == tmp_path.resolve()

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        inner = tmp_path / "vendor" / "dep"
        (inner / ".git").mkdir(parents=True)
        assert find_workspace_root(inner) == inner.resolve()

    def test_unmarked_falls_back_to_start(self, tmp_path: Path) -> None:
        child = tmp_path / "plain"
        child.mkdir()
        # Guard against a marker somewhere above the pytest temp dir.
        marked = [
            d
            for d in child.resolve().parents
            if any((d / m).exists() for m in (".git", ".hg", ".jj", CONFIG_FILENAME))
        ]
        if marked:
            pytest.skip("temp directory sits inside a marked tree")
        assert find_workspace_root(child) == child.resolve()


class TestReadToml:
    def test_invalid_toml(self, tmp_path: Path) -> None:
        bad = tmp_path / CONFIG_FILENAME
        bad.write_text("[workspace\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            read_toml(bad)

    def test_parses_tables(self, tmp_path: Path) -> None:
        good = tmp_path / CONFIG_FILENAME
        good.write_text("[related]\nmax_items = 4\n")
        assert read_toml(good) == {"related": {"max_items": 4}}


class TestLoadConfig:
    def test_loads_from_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(
            '[workspace]\nname = "loaded"\n[tracking]\nweight_increment = 0.5\n'
        )
        cfg = load_config(config_file)
        assert cfg.workspace.name == "loaded"
        assert cfg.tracking.weight_increment == 0.5
        assert cfg.related.max_items == 10  # default

    def test_returns_defaults_when_no_file(self, tmp_path: Path) -> None:
        assert load_config(cwd=tmp_path) == JumpNetConfig()

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        assert load_config(config_file) == JumpNetConfig()
