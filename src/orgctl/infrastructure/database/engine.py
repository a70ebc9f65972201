"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode for concurrent readers, foreign
keys for cascading deletes, and explicit transaction control so writers
can take the database write lock up front.

The pysqlite driver's implicit BEGIN is disabled; the engine ``begin``
event emits ``BEGIN <mode>`` instead, where mode comes from the
``begin_mode`` execution option (default ``DEFERRED``). Writers set
``begin_mode="IMMEDIATE"`` so that at most one write transaction runs at
a time and a check made inside it cannot be invalidated by another
writer before commit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from orgctl.infrastructure.database.schema import metadata

BEGIN_MODES = frozenset({"DEFERRED", "IMMEDIATE", "EXCLUSIVE"})


def create_db_engine(
    db_path: Path,
    *,
    busy_timeout: float = 30.0,
    journal_mode: str = "WAL",
) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to the begin listener below.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute(f"PRAGMA journal_mode={journal_mode}")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        mode = str(conn.get_execution_options().get("begin_mode", "DEFERRED")).upper()
        if mode not in BEGIN_MODES:
            msg = f"Unknown begin mode: {mode!r}. Expected one of {sorted(BEGIN_MODES)}"
            raise ValueError(msg)
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


def init_database(
    db_path: Path,
    *,
    busy_timeout: float = 30.0,
    journal_mode: str = "WAL",
) -> Engine:
    """Initialize the orgctl database at *db_path*.

    Creates the parent directory and all tables from
    :data:`schema.metadata`. Idempotent — safe to call on an existing
    database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout=busy_timeout, journal_mode=journal_mode)
    metadata.create_all(engine)
    return engine
