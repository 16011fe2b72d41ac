"""jumpnet command line: global flags, workspace selection, subcommands."""

from __future__ import annotations

from pathlib import Path

import click

from jumpnet import __version__
from jumpnet.commands import register_commands
from jumpnet.commands._context import AppContext
from jumpnet.config.settings import JumpNetSettings

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="jumpnet")
@click.option(
    "-C",
    "--workspace",
    "workspace_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace directory (default: nearest jumpnet.toml or VCS root).",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print only file ids.")
@click.option("-v", "--verbose", is_flag=True, help="Relation details and debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    workspace_root: Path | None,
    config_path: str | None,
    **flags: bool,
) -> None:
    """jumpnet: related files, learned from how you move between them.

    Relations are stored per workspace; relative FILE arguments are taken
    from the workspace root.
    """
    ctx.obj = AppContext(
        JumpNetSettings.from_cli(
            config_path=config_path,
            workspace_root=workspace_root,
            **flags,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
