"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Builds the workspace lazily and routes results to
stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from geocmd.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from geocmd.config.settings import GeocmdSettings
    from geocmd.services.result import ServiceResult
    from geocmd.workspace import Workspace


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use, so ``--help`` and ``--version``
    never load plugins or run the start module.
    """

    def __init__(self, settings: GeocmdSettings) -> None:
        self.settings = settings
        self.no_start = settings.no_start
        self._workspace: Workspace | None = None

        from geocmd.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (created, with plugins loaded, on first access)."""
        if self._workspace is None:
            from geocmd.workspace import Workspace

            workspace = Workspace(self.settings)
            workspace.init_plugins()
            if not self.no_start:
                workspace.start()
            self._workspace = workspace
        return self._workspace

    def emit(self, result: ServiceResult) -> None:
        """Format and print *result*.

        Success goes to stdout. Failure goes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
