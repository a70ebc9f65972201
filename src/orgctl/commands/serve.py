"""serve — start the MCP server (requires orgctl[mcp] extra)."""

from __future__ import annotations

import click

from orgctl.commands._base import OrgCommand


@click.command(
    cls=OrgCommand,
    examples="""\
  # Start the MCP server on the configured transport (stdio by default)
  orgctl serve

  # Streamable HTTP on a custom host/port
  orgctl serve --transport streamable-http --host 0.0.0.0 --port 9000""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default: [mcp] transport).",
)
@click.option("--host", default="127.0.0.1", help="Bind address (HTTP transports only).")
@click.option("--port", default=8000, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: object, transport: str | None, host: str, port: int) -> None:
    """Start the MCP server (requires orgctl[mcp] extra)."""
    from orgctl.mcp.server import create_server, mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install orgctl[mcp]", err=True)
        raise SystemExit(1)

    from orgctl.commands._context import AppContext

    assert isinstance(app, AppContext)
    settings = app.settings
    if not settings.mcp.enabled:
        click.echo("MCP server is disabled ([mcp] enabled = false).", err=True)
        raise SystemExit(1)

    server = create_server(
        root=settings.root,
        config_path=str(settings.config_path) if settings.config_path else None,
        host=host,
        port=port,
    )
    server.run(transport=transport or settings.mcp.transport)
