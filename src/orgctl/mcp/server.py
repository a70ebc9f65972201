"""FastMCP server setup.

Optional extra — ``mcp_available`` is False when the ``mcp`` package is
not installed. Transport: stdio by default, SSE or streamable HTTP on
request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    *,
    root: Path | None = None,
    config_path: str | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Create the MCP server with every hierarchy tool registered.

    Settings are resolved exactly as for the CLI, starting from *root*
    (or CWD) and *config_path*. *host* and *port* only matter for the
    HTTP transports.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install orgctl[mcp]"
        raise RuntimeError(msg)

    from orgctl.config.settings import OrgSettings
    from orgctl.infrastructure.registry import Registry
    from orgctl.mcp.tools import register_tools

    settings = OrgSettings.from_cli(config_path=config_path, root=root)
    registry = Registry(settings)

    server = _FastMCP("orgctl", host=host, port=port)
    register_tools(server, registry)
    return server
