"""Subcommand modules for orgctl.

``register_commands()`` imports each module only when the root group is
built, keeping import cost in one place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every command group and standalone command to *cli*."""
    # --- Groups ---
    from orgctl.commands.group import group
    from orgctl.commands.node import node
    from orgctl.commands.user import user

    cli.add_command(user)
    cli.add_command(group)
    cli.add_command(node)

    # --- Standalone commands ---
    from orgctl.commands.check import check
    from orgctl.commands.init_cmd import init_cmd
    from orgctl.commands.serve import serve
    from orgctl.commands.stats import stats
    from orgctl.commands.upgrade import upgrade

    cli.add_command(check)
    cli.add_command(stats)
    cli.add_command(init_cmd)
    cli.add_command(upgrade)
    cli.add_command(serve)
