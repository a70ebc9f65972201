"""Command group: node lookups and hierarchy traversal."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgGroup
from orgctl.services.query import HierarchyQueryService

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext

_NODE_EXAMPLES = """\
  orgctl node show <id>
  orgctl node ancestors <id>
  orgctl node descendants <id>
  orgctl --json node descendants <id>"""


@click.group(cls=OrgGroup, examples=_NODE_EXAMPLES)
def node() -> None:
    """Inspect users and groups and their place in the hierarchy."""


@node.command(examples="  orgctl node show 5f2a...9d")
@click.argument("node_id")
@click.pass_obj
def show(app: AppContext, node_id: str) -> None:
    """Show a single node."""
    app.emit(HierarchyQueryService(app.registry).get_node(node_id))


@node.command(
    examples="""\
  orgctl node ancestors 0b7c...e1
  orgctl -q node ancestors 0b7c...e1"""
)
@click.argument("node_id")
@click.pass_obj
def ancestors(app: AppContext, node_id: str) -> None:
    """List every node above NODE_ID with its distance."""
    app.emit(HierarchyQueryService(app.registry).get_node_ancestors(node_id))


@node.command(
    examples="""\
  orgctl node descendants 5f2a...9d
  orgctl --json node descendants 5f2a...9d"""
)
@click.argument("node_id")
@click.pass_obj
def descendants(app: AppContext, node_id: str) -> None:
    """List every node below NODE_ID with its distance."""
    app.emit(HierarchyQueryService(app.registry).get_node_descendants(node_id))
