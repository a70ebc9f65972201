"""Command: root initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from orgctl.commands._base import OrgCommand

if TYPE_CHECKING:
    from orgctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  orgctl init
  orgctl init /srv/directory
  orgctl init . --keep-orphans"""


@click.command("init", cls=OrgCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option(
    "--keep-orphans",
    is_flag=True,
    help="Keep groups whose parent link is refused instead of deleting them.",
)
@click.pass_obj
def init_cmd(app: AppContext, path: str, keep_orphans: bool) -> None:
    """Create orgctl.toml and an empty database under PATH."""
    from orgctl.services.init import InitService

    app.emit(InitService.init_root(Path(path), discard_orphans=not keep_orphans))
