"""Alembic wiring for the orgctl database, without an ``alembic.ini``.

The revision scripts sit next to this package's ``env.py``. ``orgctl
init`` stamps a fresh database at head through :func:`stamp_head`;
``orgctl upgrade`` builds a config with :func:`build_config` and lends it
a registry connection.
"""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

SCRIPT_LOCATION = Path(__file__).parent


def build_config(db_url: str) -> Config:
    """Alembic config for *db_url* using the bundled revisions."""
    cfg = Config()
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def stamp_head(db_path: Path) -> None:
    """Record the head revision in a database whose tables came from ``create_all``."""
    command.stamp(build_config(f"sqlite:///{db_path}"), "head")
