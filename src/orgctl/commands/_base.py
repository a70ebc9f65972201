"""Click classes that understand an ``examples=`` keyword.

Commands built with it grow an eager ``--examples`` flag that prints the
samples and exits, keeping ``--help`` short.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds ``--examples`` to any click.Command subclass."""

    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class OrgCommand(_ExamplesMixin, click.Command):
    pass


class OrgGroup(_ExamplesMixin, click.Group):
    """Group whose ``@group.command`` children are :class:`OrgCommand`."""

    command_class = OrgCommand
