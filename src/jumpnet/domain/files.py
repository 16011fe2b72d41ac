"""File vertices — how a workspace file becomes a graph vertex.

The vertex id is the workspace-relative POSIX path for files inside the
workspace root, or the absolute POSIX path otherwise. The ``uri`` is the
absolute ``file://`` URI and is what callers open. Relative paths are
taken relative to the workspace root.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from jumpnet.domain.graph import Vertex


def relative_id(path: Path, workspace_root: Path) -> str:
    """Stable id for *path*: relative to *workspace_root* when inside it.

    Examples:
        >>> relative_id(Path("/ws/src/app.py"), Path("/ws"))
        'src/app.py'
        >>> relative_id(Path("/elsewhere/notes.md"), Path("/ws"))
        '/elsewhere/notes.md'
    """
    try:
        return path.relative_to(workspace_root).as_posix()
    except ValueError:
        return path.as_posix()


class FileVertex(Vertex):
    """A file the user has visited."""

    uri: str

    @classmethod
    def from_path(cls, path: str | Path, workspace_root: Path) -> FileVertex:
        root = workspace_root.resolve()
        p = Path(path)
        if not p.is_absolute():
            p = root / p
        p = p.resolve()
        return cls(id=relative_id(p, root), uri=p.as_uri())

    @property
    def path(self) -> Path:
        """Filesystem path decoded from :attr:`uri`."""
        return Path(unquote(urlparse(self.uri).path))
