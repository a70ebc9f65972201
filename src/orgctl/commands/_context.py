"""AppContext — the object every command receives via ``@click.pass_obj``.

Holds the resolved settings, opens the Registry on first use, and
routes results to stdout or stderr with the matching exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from orgctl.config.settings import OrgSettings
    from orgctl.infrastructure.registry import Registry
    from orgctl.services.result import ServiceResult


class AppContext:
    """Shared state for one CLI invocation.

    The registry is created lazily so ``--help``, ``--version`` and
    ``--examples`` never touch the database.
    """

    def __init__(self, settings: OrgSettings) -> None:
        self.settings = settings
        self._registry: Registry | None = None

        from orgctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, log_json=settings.log_json, root=settings.root
        )

        if settings.verbose:
            from orgctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def registry(self) -> Registry:
        """The registry (opened on first access)."""
        if self._registry is None:
            from orgctl.infrastructure.registry import Registry

            self._registry = Registry(self.settings)
        return self._registry

    def close(self) -> None:
        if self._registry is not None:
            self._registry.close()
            self._registry = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Success goes to stdout; warnings follow on stderr unless they are
        already part of a JSON payload. Failure goes to stderr and exits 1.
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
