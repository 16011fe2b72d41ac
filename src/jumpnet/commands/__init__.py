"""Subcommand modules for jumpnet.

Provides register_commands() which uses deferred imports to keep
``jumpnet --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from jumpnet.commands.check import check
    from jumpnet.commands.forget import forget, unlink
    from jumpnet.commands.record import jump, record, visit
    from jumpnet.commands.related import related, stats
    from jumpnet.commands.reset import reset

    cli.add_command(visit)
    cli.add_command(jump)
    cli.add_command(record)
    cli.add_command(related)
    cli.add_command(stats)
    cli.add_command(forget)
    cli.add_command(unlink)
    cli.add_command(reset)
    cli.add_command(check)
