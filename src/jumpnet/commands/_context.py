"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Owns the event loop boundary: every command runs its
service call inside :meth:`AppContext.run`, which activates a
:class:`JumpNet`, runs the operation, and shuts the JumpNet down. Commands
declared ``read_only`` are never flushed.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import click

from jumpnet.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from jumpnet.config.settings import JumpNetSettings
    from jumpnet.services.jumpnet import JumpNet
    from jumpnet.services.result import ServiceResult

type Operation = Callable[[JumpNet], ServiceResult | Awaitable[ServiceResult]]


def _invoked_read_only() -> bool:
    ctx = click.get_current_context(silent=True)
    return ctx is not None and getattr(ctx.command, "read_only", False)


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: JumpNetSettings) -> None:
        self.settings = settings

        from jumpnet.config.logging import bind_workspace, configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_workspace(settings.workspace_name)

    def run(
        self,
        operation: Operation,
        *,
        mutating: bool | None = None,
        load: bool = True,
    ) -> ServiceResult:
        """Run *operation* against an activated JumpNet and return its result.

        Args:
            operation: Receives the JumpNet; may be sync or async.
            mutating: Flush the graph to storage before returning. Defaults
                to the invoking command not being marked read-only.
            load: Load the stored graph first. Commands that inspect the
                stored file themselves skip this.
        """
        if mutating is None:
            mutating = not _invoked_read_only()
        return asyncio.run(self._run(operation, mutating=mutating, load=load))

    async def _run(self, operation: Operation, *, mutating: bool, load: bool) -> ServiceResult:
        from jumpnet.services.jumpnet import JumpNet

        net = JumpNet(self.settings)
        warnings: list[str] = []
        if load:
            outcome = await net.activate()
            if outcome.error_code not in (None, "NOT_FOUND"):
                warnings.append(
                    f"Stored graph could not be loaded ({outcome.error_code}: "
                    f"{outcome.reason}); started with an empty graph"
                )
        try:
            result = operation(net)
            if inspect.isawaitable(result):
                result = await result
        finally:
            await net.deactivate(flush=mutating)

        warnings.extend(str(err) for err in net.save_errors)
        return result.with_warnings(*warnings)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
