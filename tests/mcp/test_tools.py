"""Tests for MCP tool implementations (no mcp package needed)."""

from __future__ import annotations

import uuid

from orgctl.infrastructure.registry import Registry
from orgctl.mcp.tools import (
    _to_mcp_response,
    associate_user_to_group_impl,
    create_group_impl,
    create_user_impl,
    get_node_ancestors_impl,
    get_node_descendants_impl,
    get_user_organizations_impl,
)
from orgctl.services.result import ServiceError, ServiceResult


class TestResponseShape:
    def test_success(self) -> None:
        resp = _to_mcp_response(ServiceResult(ok=True, op="stats", data={"users": 1}))
        assert resp == {"ok": True, "op": "stats", "data": {"users": 1}}

    def test_warnings_included(self) -> None:
        resp = _to_mcp_response(ServiceResult(ok=True, op="x", warnings=["careful"]))
        assert resp["warnings"] == ["careful"]

    def test_error_carries_status(self) -> None:
        error = ServiceError(code="CYCLE_DETECTED", message="no", detail={"child_id": "a"})
        resp = _to_mcp_response(ServiceResult(ok=False, op="x", error=error))
        assert resp["error"] == {
            "code": "CYCLE_DETECTED",
            "message": "no",
            "status": 409,
            "detail": {"child_id": "a"},
        }

    def test_error_without_detail(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="gone")
        resp = _to_mcp_response(ServiceResult(ok=False, op="x", error=error))
        assert "detail" not in resp["error"]


class TestTools:
    def test_full_flow(self, registry: Registry) -> None:
        company = create_group_impl(registry, "Company")
        assert company["ok"] is True
        eng = create_group_impl(registry, "Engineering", parent_id=company["data"]["id"])
        assert eng["data"]["parent_id"] == company["data"]["id"]
        ada = create_user_impl(registry, "Ada", "ada@example.com")
        joined = associate_user_to_group_impl(registry, ada["data"]["id"], eng["data"]["id"])
        assert joined["ok"] is True

        orgs = get_user_organizations_impl(registry, ada["data"]["id"])
        assert [i["name"] for i in orgs["data"]["items"]] == ["Engineering", "Company"]

        ancestors = get_node_ancestors_impl(registry, eng["data"]["id"])
        assert ancestors["data"]["count"] == 1

        descendants = get_node_descendants_impl(registry, company["data"]["id"])
        assert descendants["data"]["count"] == 2

    def test_not_found_is_404(self, registry: Registry) -> None:
        resp = get_node_ancestors_impl(registry, str(uuid.uuid4()))
        assert resp["ok"] is False
        assert resp["error"]["code"] == "NOT_FOUND"
        assert resp["error"]["status"] == 404

    def test_duplicate_email_is_409(self, registry: Registry) -> None:
        create_user_impl(registry, "Ada", "ada@example.com")
        resp = create_user_impl(registry, "Ada", "ada@example.com")
        assert resp["error"]["status"] == 409
        assert resp["error"]["detail"] == {"field": "email"}
