"""Alembic entry point for the orgctl revisions.

A caller may lend an open connection through
``config.attributes["connection"]``; the revisions then run inside the
caller's transaction. Otherwise an engine is built from ``sqlalchemy.url``
with the same PRAGMAs and BEGIN handling the application uses.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from alembic import context
from sqlalchemy.engine import Connection, make_url

from orgctl.infrastructure.database.engine import create_db_engine
from orgctl.infrastructure.database.schema import metadata

config = context.config


def _configure(**kwargs: Any) -> None:
    # SQLite cannot ALTER most constraints in place; batch mode copies the table.
    context.configure(target_metadata=metadata, render_as_batch=True, **kwargs)


def _migrate_on(conn: Connection) -> None:
    _configure(connection=conn)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    lent = config.attributes.get("connection")
    if lent is not None:
        _migrate_on(lent)
        return

    url = make_url(config.get_main_option("sqlalchemy.url") or "sqlite://")
    if not url.database:
        msg = "sqlalchemy.url must name a SQLite database file"
        raise RuntimeError(msg)
    engine = create_db_engine(Path(url.database))
    try:
        with engine.connect() as conn:
            _migrate_on(conn)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
