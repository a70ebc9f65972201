"""Command: closure integrity checking and rebuild."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgCommand

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext


@click.command(
    cls=OrgCommand,
    examples="""\
  orgctl check
  orgctl --json check
  orgctl check --rebuild""",
)
@click.option("--rebuild", is_flag=True, help="Recompute the closure from direct links.")
@click.pass_obj
def check(app: AppContext, rebuild: bool) -> None:
    """Verify the closure relation and optionally rebuild it."""
    from orgctl.services.check import CheckService

    svc = CheckService(app.registry)
    app.emit(svc.rebuild() if rebuild else svc.check())
