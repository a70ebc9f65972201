"""Tests for the user command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from orgctl.cli import cli


def _json(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.mark.usefixtures("_isolated_root")
class TestUserCreate:
    def test_create(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["user", "create", "Ada Lovelace", "ada@example.com"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "create_user" in result.output
        assert "ada@example.com" in result.output

    def test_create_json(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "user", "create", "Ada", "ada@example.com")
        assert data["ok"] is True
        assert data["op"] == "create_user"
        assert data["data"]["kind"] == "USER"
        assert data["data"]["email"] == "ada@example.com"

    def test_create_quiet_prints_id(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "user", "create", "Ada", "ada@example.com"])
        assert result.exit_code == 0
        node_id = result.stdout.strip()
        assert len(node_id) == 36
        assert node_id.count("-") == 4

    def test_duplicate_email_exits_1(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "create", "Ada", "ada@example.com"])
        result = cli_runner.invoke(cli, ["user", "create", "Ada Two", "ada@example.com"])
        assert result.exit_code == 1
        assert "CONSTRAINT_VIOLATION" in result.stderr
        assert result.stdout == ""

    def test_duplicate_email_json_on_stderr(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "create", "Ada", "ada@example.com"])
        result = cli_runner.invoke(
            cli, ["--json", "user", "create", "Ada Two", "ada@example.com"]
        )
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "CONSTRAINT_VIOLATION"
        assert payload["error"]["status"] == 409

    def test_invalid_email(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["user", "create", "Ada", "nope"])
        assert result.exit_code == 1
        assert "VALIDATION_FAILED" in result.stderr


@pytest.mark.usefixtures("_isolated_root")
class TestUserJoinAndOrgs:
    def _setup(self, runner: CliRunner) -> dict[str, str]:
        company = _json(runner, "group", "create", "Company")["data"]["id"]
        eng = _json(runner, "group", "create", "Engineering", "--parent", company)["data"]["id"]
        ada = _json(runner, "user", "create", "Ada", "ada@example.com")["data"]["id"]
        return {"company": company, "eng": eng, "ada": ada}

    def test_join(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        result = cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        assert result.exit_code == 0
        assert ids["eng"] in result.output

    def test_join_twice_warns(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        result = cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        assert result.exit_code == 0
        assert "WARNING: " in result.stderr
        assert "already a member" in result.stderr

    def test_join_group_to_group_refused(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        result = cli_runner.invoke(cli, ["user", "join", ids["eng"], ids["company"]])
        assert result.exit_code == 1
        assert "INVALID_NODE_KIND" in result.stderr

    def test_orgs(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        data = _json(cli_runner, "user", "orgs", ids["ada"])["data"]
        assert [(i["name"], i["depth"]) for i in data["items"]] == [
            ("Engineering", 1),
            ("Company", 2),
        ]

    def test_orgs_table(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        result = cli_runner.invoke(cli, ["user", "orgs", ids["ada"]])
        assert result.exit_code == 0
        assert "Depth" in result.output
        assert "Engineering" in result.output
        assert "2 groups" in result.output

    def test_orgs_quiet(self, cli_runner: CliRunner) -> None:
        ids = self._setup(cli_runner)
        cli_runner.invoke(cli, ["user", "join", ids["ada"], ids["eng"]])
        result = cli_runner.invoke(cli, ["-q", "user", "orgs", ids["ada"]])
        assert result.stdout.split() == [ids["eng"], ids["company"]]

    def test_orgs_unknown_user(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["user", "orgs", "ghost"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.stderr
