"""Command group: user creation, membership, and organizations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgGroup
from orgctl.services.linker import HierarchyLinker
from orgctl.services.query import HierarchyQueryService

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext

_USER_EXAMPLES = """\
  orgctl user create "Ada Lovelace" ada@example.com
  orgctl user join <user-id> <group-id>
  orgctl user orgs <user-id>
  orgctl --json user orgs <user-id>"""


@click.group(cls=OrgGroup, examples=_USER_EXAMPLES)
def user() -> None:
    """Create users and place them in groups."""


@user.command(
    examples="""\
  orgctl user create "Ada Lovelace" ada@example.com
  orgctl -q user create "Grace Hopper" grace@example.com"""
)
@click.argument("name")
@click.argument("email")
@click.pass_obj
def create(app: AppContext, name: str, email: str) -> None:
    """Create a user with a unique email."""
    app.emit(HierarchyLinker(app.registry).create_user(name, email))


@user.command(
    examples="""\
  orgctl user join 0b7c...e1 5f2a...9d"""
)
@click.argument("user_id")
@click.argument("group_id")
@click.pass_obj
def join(app: AppContext, user_id: str, group_id: str) -> None:
    """Make USER_ID a direct member of GROUP_ID."""
    app.emit(HierarchyLinker(app.registry).associate_user_to_group(user_id, group_id))


@user.command(
    examples="""\
  orgctl user orgs 0b7c...e1
  orgctl -q user orgs 0b7c...e1"""
)
@click.argument("user_id")
@click.pass_obj
def orgs(app: AppContext, user_id: str) -> None:
    """List every group the user belongs to, directly or through nesting."""
    app.emit(HierarchyQueryService(app.registry).get_user_organizations(user_id))
