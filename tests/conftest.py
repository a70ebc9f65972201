"""Shared pytest fixtures and test helpers for orgctl tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from orgctl.config.settings import OrgSettings
from orgctl.infrastructure.database.engine import init_database
from orgctl.infrastructure.registry import Registry
from orgctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ORGCTL_* variables, telemetry and log handlers from leaking between tests."""
    monkeypatch.delenv("ORGCTL_CONFIG", raising=False)
    root_handlers = list(logging.getLogger().handlers)
    yield
    disable_telemetry()
    logging.getLogger().handlers[:] = root_handlers


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "test.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> OrgSettings:
    return OrgSettings.from_cli(root=tmp_path)


@pytest.fixture
def registry(settings: OrgSettings) -> Iterator[Registry]:
    """Registry over a fresh database under ``tmp_path``."""
    r = Registry(settings)
    try:
        yield r
    finally:
        r.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to ``tmp_path`` so the CLI works on an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes. Tests that need the path can request ``tmp_path`` directly
    (pytest deduplicates, it is the same directory).
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_user(registry: Registry, name: str, email: str | None = None) -> dict[str, Any]:
    """Create a user via HierarchyLinker, asserting success."""
    from orgctl.services.linker import HierarchyLinker

    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    result = HierarchyLinker(registry).create_user(name, email)
    assert result.ok, result.error
    return result.data


def create_group(registry: Registry, name: str, parent_id: str | None = None) -> dict[str, Any]:
    """Create a group via HierarchyLinker, asserting success."""
    from orgctl.services.linker import HierarchyLinker

    result = HierarchyLinker(registry).create_group(name, parent_id=parent_id)
    assert result.ok, result.error
    return result.data


def join(registry: Registry, user_id: str, group_id: str) -> dict[str, Any]:
    """Associate a user with a group, asserting success."""
    from orgctl.services.linker import HierarchyLinker

    result = HierarchyLinker(registry).associate_user_to_group(user_id, group_id)
    assert result.ok, result.error
    return result.data


def depths(items: list[dict[str, Any]]) -> dict[str, int]:
    """``{id: depth}`` from a listing's items."""
    return {item["id"]: item["depth"] for item in items}
