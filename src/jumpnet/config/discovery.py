"""Config and workspace discovery.

Both walk up from a starting directory the way git finds ``.git/``:

- the config file is the nearest ``jumpnet.toml`` (``JUMPNET_CONFIG`` wins
  outright when set);
- the workspace root is the nearest directory holding ``jumpnet.toml`` or a
  version-control marker, so running jumpnet from ``src/`` still records
  paths relative to the project root.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

from jumpnet.config.models import JumpNetConfig

CONFIG_FILENAME = "jumpnet.toml"
CONFIG_ENV_VAR = "JUMPNET_CONFIG"
WORKSPACE_MARKERS = (CONFIG_FILENAME, ".git", ".hg", ".jj")


def _ancestors(start: Path | None) -> Iterator[Path]:
    current = (start or Path.cwd()).resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``jumpnet.toml`` at or above *start* (default: cwd).

    A set ``JUMPNET_CONFIG`` replaces the walk: its file is returned if it
    exists, otherwise None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _ancestors(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_workspace_root(start: Path | None = None) -> Path:
    """Nearest directory at or above *start* holding a workspace marker.

    Falls back to *start* itself when nothing up the tree is marked.
    """
    for directory in _ancestors(start):
        if any((directory / marker).exists() for marker in WORKSPACE_MARKERS):
            return directory
    return (start or Path.cwd()).resolve()


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; syntax errors become a CLI-friendly ClickException."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> JumpNetConfig:
    """Validated config sections from *path*, or from the discovered file.

    Returns defaults when there is no file.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return JumpNetConfig()
    return JumpNetConfig.model_validate(read_toml(path))
