"""Root CLI group for geocmd with global flags and command registration."""

from __future__ import annotations

import click

from geocmd import __version__
from geocmd.commands import register_commands
from geocmd.commands._base import GeocmdGroup
from geocmd.commands._context import AppContext
from geocmd.config.settings import GeocmdSettings


@click.group(cls=GeocmdGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="geocmd")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-start", is_flag=True, help="Do not run the start module.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_start: bool,
    config_path: str | None,
) -> None:
    """geocmd — scripted, undoable edits of geographic data layers."""
    ctx.ensure_object(dict)
    settings = GeocmdSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_start=no_start,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
