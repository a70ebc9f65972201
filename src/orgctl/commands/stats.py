"""Command: hierarchy totals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgCommand

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext


@click.command(
    cls=OrgCommand,
    examples="""\
  orgctl stats
  orgctl --json stats""",
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Count users, groups, and closure edges."""
    from orgctl.services.query import HierarchyQueryService

    app.emit(HierarchyQueryService(app.registry).stats())
