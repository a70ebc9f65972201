"""Locating and reading ``orgctl.toml``.

Lookup order: the ``ORGCTL_CONFIG`` env var (used as-is, never walked),
then the start directory and each of its parents, the way git finds
``.git``.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

from orgctl.config.models import OrgConfig

CONFIG_FILENAME = "orgctl.toml"
CONFIG_ENV_VAR = "ORGCTL_CONFIG"


def _candidates(start: Path) -> Iterator[Path]:
    here = start.resolve()
    for directory in (here, *here.parents):
        yield directory / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: CWD), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        return path if path.is_file() else None
    return next((p for p in _candidates(start or Path.cwd()) if p.is_file()), None)


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; malformed TOML becomes a ClickException naming the file."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> OrgConfig:
    """Validated sections from *path* (or the discovered file), else defaults."""
    path = path or find_config(cwd)
    if path is None:
        return OrgConfig()
    return OrgConfig.model_validate(read_toml(path))
