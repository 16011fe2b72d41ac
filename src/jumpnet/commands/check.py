"""Command: check — verify the stored graph file."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jumpnet.commands._base import jump_command
from jumpnet.services.graph import GraphService

if TYPE_CHECKING:
    from jumpnet.commands._context import AppContext


@jump_command(
    read_only=True,
    examples="""
    jumpnet check
    jumpnet --json check
    """,
)
def check(app: AppContext) -> None:
    """Read the stored graph strictly and report version or integrity errors."""
    app.emit(app.run(lambda net: GraphService(net).check(), load=False))
