"""Commands that record navigation: visit, jump, record."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, TextIO

import click

from jumpnet.commands._base import jump_command
from jumpnet.services.graph import GraphService

if TYPE_CHECKING:
    from jumpnet.commands._context import AppContext


@jump_command(
    examples="""
    jumpnet visit src/app.py tests/test_app.py
    jumpnet visit README.md docs/index.md src/app.py
    jumpnet --json visit src/a.py src/b.py
    """,
)
@click.argument("files", nargs=-1, required=True)
def visit(app: AppContext, files: tuple[str, ...]) -> None:
    """Record moving through FILES in order."""
    app.emit(app.run(lambda net: GraphService(net).visit(list(files))))


@jump_command(
    examples="""
    jumpnet jump src/app.py src/models.py
    jumpnet --json jump a.py b.py
    """,
)
@click.argument("source")
@click.argument("target")
def jump(app: AppContext, source: str, target: str) -> None:
    """Strengthen the relation between SOURCE and TARGET once."""
    app.emit(app.run(lambda net: GraphService(net).jump(source, target)))


async def _lines(stream: TextIO) -> AsyncIterator[str]:
    """Read *stream* line by line without blocking the event loop."""
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        yield line


@jump_command(
    examples="""
    editor-events | jumpnet record
    printf 'src/a.py\\nsrc/b.py\\nrelated:src/c.py\\n' | jumpnet record
    """,
)
def record(app: AppContext) -> None:
    """Record active-file changes streamed on stdin, one path per line.

    Lines starting with ``related:`` are navigations from the related list
    and are not recorded. Saves are debounced while the stream is open and
    flushed at end of input.
    """
    stream = click.get_text_stream("stdin")
    app.emit(app.run(lambda net: GraphService(net).record(_lines(stream))))
