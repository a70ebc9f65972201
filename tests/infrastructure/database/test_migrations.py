"""Tests for the Alembic migration scripts."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect

from orgctl.infrastructure.database.engine import init_database
from orgctl.infrastructure.database.migrations import SCRIPT_LOCATION, build_config, stamp_head


def _current(db_path: Path) -> str | None:
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()
    finally:
        engine.dispose()


class TestMigrations:
    def test_single_head(self) -> None:
        script = ScriptDirectory.from_config(build_config("sqlite://"))
        assert script.get_current_head() == "001_baseline"

    def test_upgrade_empty_database(self, tmp_path: Path) -> None:
        db_path = tmp_path / "migrated.db"
        command.upgrade(build_config(f"sqlite:///{db_path}"), "head")

        engine = create_engine(f"sqlite:///{db_path}")
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert {"nodes", "closure", "alembic_version"} <= tables
        assert _current(db_path) == "001_baseline"

    def test_downgrade_drops_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "migrated.db"
        cfg = build_config(f"sqlite:///{db_path}")
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine = create_engine(f"sqlite:///{db_path}")
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert "nodes" not in tables
        assert "closure" not in tables

    def test_stamp_head(self, tmp_path: Path) -> None:
        db_path = tmp_path / "stamped.db"
        init_database(db_path).dispose()
        assert _current(db_path) is None
        stamp_head(db_path)
        assert _current(db_path) == "001_baseline"

    def test_config_uses_bundled_revisions(self, tmp_path: Path) -> None:
        cfg = build_config(f"sqlite:///{tmp_path / 'x.db'}")
        assert cfg.get_main_option("script_location") == str(SCRIPT_LOCATION)
        assert (SCRIPT_LOCATION / "versions" / "001_baseline.py").is_file()
