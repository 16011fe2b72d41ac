"""Query commands: related, stats."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jumpnet.commands._base import jump_command
from jumpnet.services.graph import GraphService

if TYPE_CHECKING:
    from jumpnet.commands._context import AppContext


@jump_command(
    read_only=True,
    examples="""
    jumpnet related src/app.py
    jumpnet related src/app.py --top 5
    jumpnet -q related src/app.py | xargs $EDITOR
    """,
)
@click.argument("file")
@click.option("--top", default=None, type=click.IntRange(min=1), help="Max results.")
def related(app: AppContext, file: str, top: int | None) -> None:
    """List files most related to FILE, strongest first."""
    app.emit(app.run(lambda net: GraphService(net).related(file, top=top)))


@jump_command(
    read_only=True,
    examples="""
    jumpnet stats
    jumpnet stats --top 5
    jumpnet --json stats
    """,
)
@click.option("--top", default=10, type=click.IntRange(min=0), help="Number of hubs to list.")
def stats(app: AppContext, top: int) -> None:
    """Summarize the relation graph and its strongest hubs."""
    app.emit(app.run(lambda net: GraphService(net).stats(top=top)))
