"""Maintenance commands: forget, unlink."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jumpnet.commands._base import jump_command
from jumpnet.services.graph import GraphService

if TYPE_CHECKING:
    from jumpnet.commands._context import AppContext


@jump_command(examples="jumpnet forget build/generated.py")
@click.argument("file")
def forget(app: AppContext, file: str) -> None:
    """Drop FILE and every relation it has."""
    app.emit(app.run(lambda net: GraphService(net).forget(file)))


@jump_command(examples="jumpnet unlink src/app.py CHANGELOG.md")
@click.argument("source")
@click.argument("target")
def unlink(app: AppContext, source: str, target: str) -> None:
    """Remove the relation between SOURCE and TARGET."""
    app.emit(app.run(lambda net: GraphService(net).unlink(source, target)))
