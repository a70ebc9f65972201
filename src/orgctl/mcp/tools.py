"""MCP tool definitions — six tools, one per inbound hierarchy operation.

Each tool has a ``<name>_impl`` function testable without the mcp
package. ``register_tools()`` wraps them with FastMCP decorators.
"""

from __future__ import annotations

from typing import Any

from orgctl.services.linker import HierarchyLinker
from orgctl.services.query import HierarchyQueryService
from orgctl.services.result import ServiceResult


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
            "status": result.error.status,
        }
        if result.error.detail:
            response["error"]["detail"] = result.error.detail
    return response


# ---------------------------------------------------------------------------
# Mutation tools (3)
# ---------------------------------------------------------------------------


def create_user_impl(registry: Any, name: str, email: str) -> dict[str, Any]:
    """Create a user."""
    return _to_mcp_response(HierarchyLinker(registry).create_user(name, email))


def create_group_impl(
    registry: Any,
    name: str,
    *,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Create a group, optionally under a parent group."""
    result = HierarchyLinker(registry).create_group(name, parent_id=parent_id)
    return _to_mcp_response(result)


def associate_user_to_group_impl(registry: Any, user_id: str, group_id: str) -> dict[str, Any]:
    """Make a user a direct member of a group."""
    result = HierarchyLinker(registry).associate_user_to_group(user_id, group_id)
    return _to_mcp_response(result)


# ---------------------------------------------------------------------------
# Query tools (3)
# ---------------------------------------------------------------------------


def get_node_ancestors_impl(registry: Any, node_id: str) -> dict[str, Any]:
    return _to_mcp_response(HierarchyQueryService(registry).get_node_ancestors(node_id))


def get_node_descendants_impl(registry: Any, node_id: str) -> dict[str, Any]:
    return _to_mcp_response(HierarchyQueryService(registry).get_node_descendants(node_id))


def get_user_organizations_impl(registry: Any, user_id: str) -> dict[str, Any]:
    return _to_mcp_response(HierarchyQueryService(registry).get_user_organizations(user_id))


def register_tools(server: Any, registry: Any) -> None:
    """Register the six hierarchy tools on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    def create_user(name: str, email: str) -> dict[str, Any]:
        """Create a user with a unique email address."""
        return create_user_impl(registry, name, email)

    @server.tool()  # type: ignore[untyped-decorator]
    def create_group(name: str, parent_id: str | None = None) -> dict[str, Any]:
        """Create a group, optionally nested under an existing group."""
        return create_group_impl(registry, name, parent_id=parent_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def associate_user_to_group(user_id: str, group_id: str) -> dict[str, Any]:
        """Add a user as a direct member of a group."""
        return associate_user_to_group_impl(registry, user_id, group_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def get_node_ancestors(node_id: str) -> dict[str, Any]:
        """List every node above a user or group, nearest first."""
        return get_node_ancestors_impl(registry, node_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def get_node_descendants(node_id: str) -> dict[str, Any]:
        """List every node below a group, nearest first."""
        return get_node_descendants_impl(registry, node_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def get_user_organizations(user_id: str) -> dict[str, Any]:
        """List every group a user belongs to, directly or through nesting."""
        return get_user_organizations_impl(registry, user_id)
