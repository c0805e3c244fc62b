"""Model Context Protocol adapter over stdio."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from distiller_mcp import __version__
from distiller_mcp.config import Settings
from distiller_mcp.execution.service import DistillerService
from distiller_mcp.tools.catalog import ToolCatalog
from distiller_mcp.tools.dispatch import ToolDispatcher

logger = logging.getLogger(__name__)


def tool_definitions(catalog: ToolCatalog) -> list[Tool]:
    """Catalog entries as MCP tool declarations."""

    return [
        Tool(
            name=spec.name,
            title=spec.title,
            description=spec.description,
            inputSchema=spec.input_schema(),
        )
        for spec in catalog
    ]


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Create the MCP server with list/call handlers bound to ``dispatcher``."""

    server: Server = Server(dispatcher.settings.server.name, version=__version__)
    definitions = tool_definitions(dispatcher.catalog)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return definitions

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        text = await dispatcher.call(name, arguments)
        return [TextContent(type="text", text=text)]

    return server


async def serve_stdio(settings: Settings) -> None:
    """Run the MCP server until the client closes stdin."""

    service = DistillerService.from_settings(settings)
    dispatcher = ToolDispatcher(service=service, settings=settings)
    server = build_server(dispatcher)
    logger.info(
        "%s %s started (binary=%s, root=%s)",
        settings.server.name,
        __version__,
        settings.tool.binary,
        settings.tool.root,
    )
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await service.aclose()
        logger.info("Transport closed")
