"""Command group: group creation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgGroup
from orgctl.services.linker import HierarchyLinker

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext

_GROUP_EXAMPLES = """\
  orgctl group create Engineering
  orgctl group create Platform --parent <engineering-id>"""


@click.group(cls=OrgGroup, examples=_GROUP_EXAMPLES)
def group() -> None:
    """Create groups and nest them under other groups."""


@group.command(
    examples="""\
  orgctl group create Engineering
  orgctl group create Platform --parent 5f2a...9d
  orgctl --json group create Infra --parent 5f2a...9d"""
)
@click.argument("name")
@click.option("--parent", "parent_id", default=None, help="Id of the parent group.")
@click.pass_obj
def create(app: AppContext, name: str, parent_id: str | None) -> None:
    """Create a group, optionally under a parent group."""
    app.emit(HierarchyLinker(app.registry).create_group(name, parent_id=parent_id))
