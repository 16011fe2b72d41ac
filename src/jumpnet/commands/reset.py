"""Command: reset — clear every recorded relation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jumpnet.commands._base import jump_command
from jumpnet.services.graph import GraphService

if TYPE_CHECKING:
    from jumpnet.commands._context import AppContext


@jump_command(
    examples="""
    jumpnet reset
    jumpnet reset --yes
    """,
)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
def reset(app: AppContext, yes: bool) -> None:
    """Clear all jumpnet relations for this workspace."""
    if not yes and not click.confirm("Clear all jumpnet relations?", default=False):
        click.echo("Aborted.", err=True)
        return
    app.emit(app.run(lambda net: GraphService(net).reset()))
