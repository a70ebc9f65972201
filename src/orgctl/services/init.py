"""InitService — set up a new orgctl root.

Pipeline: CHECK → WRITE CONFIG → CREATE DATABASE → STAMP → REPORT

A failure after the config is written removes the files this call
created, so a retried ``init`` starts from a clean root.
"""

from __future__ import annotations

import logging
from pathlib import Path

from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from orgctl.config.discovery import CONFIG_FILENAME
from orgctl.config.models import DatabaseConfig, HierarchyConfig
from orgctl.domain.types import ErrorCode
from orgctl.infrastructure.database.engine import init_database
from orgctl.infrastructure.database.migrations import stamp_head
from orgctl.services.base import BaseService
from orgctl.services.result import ServiceResult
from orgctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _render_config(discard_orphans: bool) -> str:
    # Sparse: only the keys a user is likely to change.
    return (
        "[database]\n"
        f'path = "{DatabaseConfig().path}"\n'
        "\n"
        "[hierarchy]\n"
        f"discard_orphans = {str(discard_orphans).lower()}\n"
        f"max_name_length = {HierarchyConfig().max_name_length}\n"
    )


def _remove_partial(config_file: Path | None, db_path: Path | None) -> None:
    """Undo what a failed init wrote, so the root can be initialized again."""
    targets: list[Path] = []
    if config_file is not None:
        targets.append(config_file)
    if db_path is not None:
        targets += [db_path, *(db_path.with_name(db_path.name + s) for s in ("-wal", "-shm"))]
    for target in targets:
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove %s after failed init: %s", target, exc)


class InitService:
    """Creates ``orgctl.toml`` and an empty, version-stamped database."""

    @staticmethod
    @traced
    def init_root(path: Path, *, discard_orphans: bool = True) -> ServiceResult:
        op = "init"
        root = path.resolve()
        config_file = root / CONFIG_FILENAME
        if config_file.exists():
            return BaseService._failure(
                op,
                ErrorCode.CONSTRAINT_VIOLATION,
                f"Already initialized: {config_file}",
                path=str(config_file),
            )

        db_path = root / DatabaseConfig().path
        db_existed = db_path.exists()
        files_created: list[str] = []
        try:
            with trace_span("config"):
                root.mkdir(parents=True, exist_ok=True)
                config_file.write_text(_render_config(discard_orphans), encoding="utf-8")
                files_created.append(CONFIG_FILENAME)

            with trace_span("database"):
                engine = init_database(db_path)
                engine.dispose()
                stamp_head(db_path)
                files_created.append(str(db_path.relative_to(root)))
        except (OSError, SQLAlchemyError, CommandError) as exc:
            logger.error("Initialization failed at %s: %s", root, exc)
            _remove_partial(config_file if files_created else None, None if db_existed else db_path)
            return BaseService._failure(
                op, ErrorCode.TRANSACTION_FAILED, f"Initialization failed: {exc}", path=str(root)
            )

        logger.info("Initialized orgctl root at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(root),
                "config_path": str(config_file),
                "db_path": str(db_path),
                "discard_orphans": discard_orphans,
                "files_created": files_created,
            },
        )
