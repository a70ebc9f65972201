"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from orgctl.output.formatters import OutputSettings, format_result
from orgctl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="NOT_FOUND", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert (s.json_output, s.quiet, s.verbose) == (False, False, False)

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(_ok("create_group", id="g-1", parent_id=None), json_output=True)
        data = json.loads(output)
        assert data["op"] == "create_group"
        assert data["data"] == {"id": "g-1", "parent_id": None}

    def test_json_error_has_status(self) -> None:
        output = format_result(_err(msg="Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"
        assert data["error"]["status"] == 404

    def test_settings_override_kwargs(self) -> None:
        output = format_result(
            _ok("stats", users=1), settings=OutputSettings(quiet=True), json_output=True
        )
        assert output == "OK: stats"

    def test_json_beats_quiet(self) -> None:
        output = format_result(_ok(id="x"), json_output=True, quiet=True)
        assert json.loads(output)["data"]["id"] == "x"

    def test_quiet_mode(self) -> None:
        assert format_result(_ok(id="g-1"), quiet=True) == "g-1"

    def test_default_is_rich_text(self) -> None:
        output = format_result(_ok("stats", users=1, groups=2, closure_edges=3))
        assert "OK" in output
        assert "groups: 2" in output
