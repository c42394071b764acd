"""MCP server bootstrap – registers the Plausible tool and runs the stdio transport."""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from plausible_mcp.config import Settings, load_settings
from plausible_mcp.errors import StartupError
from plausible_mcp.mcp.dispatcher import dispatch, render_envelope
from plausible_mcp.mcp.tools import list_tools as registry_list_tools
from plausible_mcp.plausible.client import PlausibleClient
from plausible_mcp.schemas.common import Invocation

logger = logging.getLogger("mcp.server")

# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_mcp_server(
    client: PlausibleClient,
    name: str = "plausible-model-context-protocol-server",
    version: str | None = None,
) -> Server:
    """Create and configure the MCP server instance around an existing client."""
    server = Server(name, version=version)

    # ── Tools ─────────────────────────────────────────────────────────────

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return registry_list_tools()

    # Input validation stays with the dispatcher so failures keep their
    # plain-text JSON shape instead of becoming protocol errors.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
        envelope = await dispatch(Invocation(name=name, arguments=arguments), client)
        return [TextContent(type="text", text=render_envelope(envelope))]

    return server


# ---------------------------------------------------------------------------
# Entry-point: run MCP server over stdio
# ---------------------------------------------------------------------------


async def run_mcp_server(settings: Settings) -> None:
    """Start the MCP server using stdio transport."""
    async with PlausibleClient.from_settings(settings) as client:
        server = create_mcp_server(
            client, settings.mcp_server_name, settings.mcp_server_version
        )

        async with stdio_server() as (read_stream, write_stream):
            logger.info(
                "Plausible MCP Server running on stdio ('%s' v%s)",
                settings.mcp_server_name,
                settings.mcp_server_version,
            )
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """CLI entry-point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except StartupError as exc:
        logger.error("Fatal error in main(): %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    try:
        asyncio.run(run_mcp_server(settings))
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
