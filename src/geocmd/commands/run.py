"""Command: run an edit script against a fresh workspace."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from geocmd.commands._base import GeocmdCommand

if TYPE_CHECKING:
    from geocmd.commands._context import AppContext


@click.command(
    cls=GeocmdCommand,
    examples="""\
  geocmd run edits.py
  geocmd run edits.py --layer "Roads"
  geocmd --json run edits.py
  geocmd run edits.py --no-start""",
)
@click.argument("script", type=click.Path(dir_okay=False))
@click.option("--layer", "layer_name", default=None, help="Data layer the script edits.")
@click.option("--no-start", is_flag=True, help="Skip the configured start module.")
@click.pass_obj
def run(app: AppContext, script: str, layer_name: str | None, no_start: bool) -> None:
    """Run an edit SCRIPT and report the resulting layers and history."""
    from geocmd.services.script import ScriptService

    if no_start:
        app.no_start = True
    app.emit(ScriptService(app.workspace).run(script, layer_name=layer_name))
