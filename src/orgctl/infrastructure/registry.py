"""Registry — repository pattern with transaction coordination.

The Registry is the single dependency injected into every service. It owns
the database engine and the lazy graph view. :meth:`transaction` is the
only way services write:

- **DB**: one SQLAlchemy transaction, committed on success, rolled back
  on any exception, connection released on every exit path.
- **Lock**: write transactions start with ``BEGIN IMMEDIATE`` so every
  check made inside one (cycle guard, kind checks) still holds at commit.
- **Graph**: cache is invalidated on transaction end (success or failure).
  The graph is lazy-rebuilt from DB on next access.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from orgctl.infrastructure.database.engine import init_database
from orgctl.infrastructure.graph.engine import GraphEngine

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from orgctl.config.settings import OrgSettings

logger = logging.getLogger(__name__)


@dataclass
class RegistryTransaction:
    """Active write transaction yielded by :meth:`Registry.transaction`."""

    conn: Connection
    immediate: bool


class Registry:
    """Repository encapsulating database and graph access.

    Constructed once at CLI startup from :class:`OrgSettings` and stored
    in ``click.Context.obj``. Services receive the Registry via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: OrgSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.db_path,
            busy_timeout=settings.database.busy_timeout,
            journal_mode=settings.database.journal_mode,
        )
        self._graph = GraphEngine(self._engine)

    @property
    def root(self) -> Path:
        """The settings root directory."""
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for reads and direct access)."""
        return self._engine

    @property
    def graph(self) -> GraphEngine:
        """The direct-link graph view (lazy-built from DB)."""
        return self._graph

    @property
    def settings(self) -> OrgSettings:
        """The resolved settings for this registry."""
        return self._settings

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    @contextmanager
    def transaction(self, *, immediate: bool = True) -> Iterator[RegistryTransaction]:
        """Atomic unit of work on the database.

        With *immediate* (the default) the SQLite write lock is taken at
        ``BEGIN``, serializing all writers; a writer that cannot get the
        lock within ``database.busy_timeout`` fails with
        ``OperationalError`` before doing anything.

        **Warning:** Do not access ``registry.graph`` within a transaction
        block — the graph is built from committed DB state and will not
        reflect pending writes.

        Usage::

            with registry.transaction() as txn:
                node = create_node(txn.conn, NodeKind.GROUP, "Engineering")
                insert_self_link(txn.conn, node.id)
                # Both commit on success, both roll back on failure.
        """
        mode = "IMMEDIATE" if immediate else "DEFERRED"
        with self._engine.connect() as conn:
            conn.execution_options(begin_mode=mode)
            try:
                with conn.begin():
                    yield RegistryTransaction(conn=conn, immediate=immediate)
            except BaseException:
                logger.debug("Transaction rolled back", exc_info=True)
                raise
            finally:
                self._graph.invalidate()
