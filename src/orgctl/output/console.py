"""Rich Console factory and theme for orgctl output.

Consoles render into a StringIO buffer so ``format_result()`` can keep
returning a plain ``str``. Rich drops color codes on its own when the
output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ORG_THEME = Theme(
    {
        "org.ok": "bold green",
        "org.error": "bold red",
        "org.warning": "bold yellow",
        "org.op": "bold cyan",
        "org.key": "dim",
        "org.id": "bold blue",
        "org.name": "bold",
        "org.depth": "magenta",
        "org.kind.user": "green",
        "org.kind.group": "yellow",
    }
)

_KIND_STYLES: dict[str, str] = {
    "USER": "org.kind.user",
    "GROUP": "org.kind.group",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ORG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a node kind."""
    return _KIND_STYLES.get(kind, "")
