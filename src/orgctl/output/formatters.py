"""Rich/JSON output helpers.

The CLI renders a ServiceResult for humans (Rich tables and key-value
blocks), for scripts (``--quiet``: ids only) or for machines
(``--json``). This module picks the mode; :mod:`orgctl.output.renderers`
does the drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from orgctl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from orgctl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Either pass *settings* or the individual flags; *settings* wins.
    JSON beats quiet, quiet beats verbose.
    """
    if settings is None:
        settings = OutputSettings(json_output=json_output, quiet=quiet, verbose=verbose)

    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
