"""Command base: ``--examples`` on demand and read-only marking.

Every subcommand is declared with :func:`jump_command`, which builds a
:class:`JumpCommand`, hands the :class:`AppContext` in as the first
argument, and records whether the command may write the stored graph.
:meth:`AppContext.run` reads that flag to decide whether to flush on exit.
"""

from __future__ import annotations

import inspect
import textwrap
from collections.abc import Callable
from typing import Any

import click

READ_ONLY_NOTE = "Read-only: never writes the stored graph."


def _show_examples(examples: str) -> Callable[[click.Context, click.Parameter, bool], None]:
    def callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return callback


class JumpCommand(click.Command):
    """Click Command with an eager ``--examples`` flag and a read-only marker.

    Examples may be written as an indented block; they are dedented and
    re-indented by two spaces for display.
    """

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        read_only: bool = False,
        **kwargs: Any,
    ) -> None:
        if read_only and not kwargs.get("epilog"):
            kwargs["epilog"] = READ_ONLY_NOTE
        super().__init__(*args, **kwargs)
        self.read_only = read_only
        self.examples = textwrap.indent(inspect.cleandoc(examples), "  ") if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples(self.examples),
                    help="Show usage examples.",
                )
            )


def jump_command(
    name: str | None = None,
    *,
    examples: str | None = None,
    read_only: bool = False,
) -> Callable[[Callable[..., Any]], JumpCommand]:
    """Declare a subcommand whose callback receives the AppContext first."""

    def decorator(f: Callable[..., Any]) -> JumpCommand:
        return click.command(name, cls=JumpCommand, examples=examples, read_only=read_only)(
            click.pass_obj(f)
        )

    return decorator
