"""Tests for the check command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import and_, delete

from orgctl.cli import cli
from orgctl.config.settings import OrgSettings
from orgctl.infrastructure.database.schema import closure
from orgctl.infrastructure.registry import Registry


def _id(runner: CliRunner, *args: str) -> str:
    result = runner.invoke(cli, ["-q", *args])
    assert result.exit_code == 0, result.output
    return result.stdout.strip()


@pytest.mark.usefixtures("_isolated_root")
class TestCheckCommand:
    def test_clean(self, cli_runner: CliRunner) -> None:
        parent = _id(cli_runner, "group", "create", "Company")
        _id(cli_runner, "group", "create", "Eng", "--parent", parent)
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "No issues found (2 nodes, 3 rows)" in result.output

    def test_reports_and_rebuilds(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        company = _id(cli_runner, "group", "create", "Company")
        eng = _id(cli_runner, "group", "create", "Eng", "--parent", company)
        team = _id(cli_runner, "group", "create", "Team", "--parent", eng)

        r = Registry(OrgSettings.from_cli(root=tmp_path))
        with r.transaction() as txn:
            txn.conn.execute(
                delete(closure).where(
                    and_(closure.c.ancestor == company, closure.c.descendant == team)
                )
            )
        r.close()

        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "missing_pairs" in result.output
        assert "1 issue; run 'orgctl check --rebuild' to repair" in result.output

        result = cli_runner.invoke(cli, ["--json", "check", "--rebuild"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["changed"] == 1

        result = cli_runner.invoke(cli, ["--json", "check"])
        assert json.loads(result.stdout)["data"]["count"] == 0
