"""Protocol adapters exposing the tool catalog."""

from distiller_mcp.server.line_rpc import LineRpcServer, serve_lines
from distiller_mcp.server.mcp_server import build_server, serve_stdio, tool_definitions

__all__ = [
    "LineRpcServer",
    "build_server",
    "serve_lines",
    "serve_stdio",
    "tool_definitions",
]
