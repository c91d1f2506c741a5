"""Subcommand modules for geocmd.

Provides register_commands() which uses deferred imports to keep
``geocmd --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from geocmd.commands.run import run

    cli.add_command(run)
