"""Tests for the group command group."""

from __future__ import annotations

import json
import uuid

import pytest
from click.testing import CliRunner

from orgctl.cli import cli


@pytest.mark.usefixtures("_isolated_root")
class TestGroupCreate:
    def test_create_root(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["group", "create", "Company"])
        assert result.exit_code == 0
        assert "create_group" in result.output
        assert "GROUP" in result.output
        assert "parent_id" not in result.output

    def test_create_with_parent(self, cli_runner: CliRunner) -> None:
        parent = cli_runner.invoke(cli, ["-q", "group", "create", "Company"]).stdout.strip()
        result = cli_runner.invoke(cli, ["--json", "group", "create", "Eng", "--parent", parent])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["parent_id"] == parent
        assert data["name"] == "Eng"

    def test_root_json_keeps_null_parent(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "group", "create", "Company"])
        assert json.loads(result.stdout)["data"]["parent_id"] is None

    def test_missing_parent(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["group", "create", "Eng", "--parent", str(uuid.uuid4())]
        )
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.stderr

    def test_user_parent(self, cli_runner: CliRunner) -> None:
        user = cli_runner.invoke(
            cli, ["-q", "user", "create", "Ada", "ada@example.com"]
        ).stdout.strip()
        result = cli_runner.invoke(cli, ["--json", "group", "create", "Eng", "--parent", user])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "INVALID_NODE_KIND"
        assert payload["error"]["status"] == 422

    def test_malformed_parent(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["group", "create", "Eng", "--parent", "xyz"])
        assert result.exit_code == 1
        assert "VALIDATION_FAILED" in result.stderr

    def test_blank_name(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["group", "create", "  "])
        assert result.exit_code == 1
        assert "VALIDATION_FAILED" in result.stderr
