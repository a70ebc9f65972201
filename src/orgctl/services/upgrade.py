"""UpgradeService: bring an orgctl database to the Alembic head revision.

A database whose tables were made by ``create_all`` but never stamped is
stamped rather than migrated. Revisions run on a registry write
transaction, so a failed upgrade leaves the file untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from orgctl.domain.types import ErrorCode
from orgctl.infrastructure.database.migrations import build_config
from orgctl.services.base import BaseService
from orgctl.services.result import ServiceResult
from orgctl.services.telemetry import traced

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Handles database schema migrations via Alembic."""

    @traced
    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"
        try:
            script = ScriptDirectory.from_config(build_config(self._registry.settings.db_url))
            head = script.get_current_head()
            with self._registry.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            pending: list[dict[str, Any]] = []
            # Walk down from head until the current revision
            rev = script.get_revision(head) if head is not None and current != head else None
            while rev is not None and rev.revision != current:
                pending.append({"revision": rev.revision, "description": rev.doc or ""})
                down = rev.down_revision
                rev = script.get_revision(str(down)) if down is not None else None
        except Exception as exc:
            logger.error("Migration check failed: %s", exc)
            return self._failure(
                op, ErrorCode.TRANSACTION_FAILED, f"Failed to check migrations: {exc}"
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    @traced
    def apply(self) -> ServiceResult:
        """Bring the database to the head revision."""
        op = "upgrade"
        checked = self.check_pending()
        if not checked.ok:
            return checked

        pending_count = checked.data["pending_count"]
        head = checked.data["head"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": head,
                    "message": "Database is already up to date",
                },
            )

        try:
            cfg = build_config(self._registry.settings.db_url)
            tables = set(inspect(self._registry.engine).get_table_names())
            with self._registry.transaction() as txn:
                cfg.attributes["connection"] = txn.conn
                if checked.data["current"] is None and {"nodes", "closure"} <= tables:
                    # Tables came from create_all without version tracking.
                    command.stamp(cfg, "head")
                else:
                    command.upgrade(cfg, "head")
        except Exception as exc:
            logger.error("Migration failed: %s", exc)
            return self._failure(op, ErrorCode.TRANSACTION_FAILED, f"Migration failed: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={"applied_count": pending_count, "current": head},
        )
