"""Rich console, theme and the small styled pieces renderers share.

Consoles render into a StringIO buffer so renderers can hand back plain
strings; Rich drops color codes on its own when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO
from typing import Any

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

JUMPNET_THEME = Theme(
    {
        "jn.ok": "bold green",
        "jn.error": "bold red",
        "jn.warning": "bold yellow",
        "jn.op": "bold cyan",
        "jn.key": "dim",
        "jn.id": "bold blue",
        "jn.path": "dim",
        "jn.weight": "magenta",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Buffer-backed console using the jumpnet theme."""
    return Console(
        file=StringIO(),
        theme=JUMPNET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text rendered so far by a console from :func:`create_console`."""
    if not isinstance(console.file, StringIO):
        raise TypeError("console does not render to a buffer")
    return console.file.getvalue()


def format_weight(value: Any) -> str:
    """``2.0`` -> ``"2"``, ``0.5`` -> ``"0.5"``; non-numbers pass through."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{float(value):g}"
    return str(value)


def file_id(value: Any) -> Text:
    return Text(str(value), style="jn.id")


def file_path(value: Any) -> Text:
    return Text(str(value), style="jn.path")


def relation(a: str, b: str, weight: Any) -> Text:
    """One ``a <-> b  weight`` line for relation listings."""
    return Text.assemble(
        "    ",
        file_id(a),
        " <-> ",
        file_id(b),
        "  ",
        (format_weight(weight), "jn.weight"),
    )
