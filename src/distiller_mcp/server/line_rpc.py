"""Line-delimited JSON-RPC adapter: one request per input line.

Serves clients that speak newline-framed JSON-RPC instead of MCP. Requests
are handled concurrently; tool executions still go through the single
execution queue.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, TextIO

from distiller_mcp import __version__
from distiller_mcp.config import Settings
from distiller_mcp.execution.errors import DistillerError, RequestValidationError
from distiller_mcp.execution.service import DistillerService
from distiller_mcp.tools.capabilities import PROTOCOL_VERSION
from distiller_mcp.tools.dispatch import ToolDispatcher

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class LineRpcServer:
    """Dispatch ``initialize``, ``tools/list`` and ``tools/call`` requests."""

    def __init__(self, dispatcher: ToolDispatcher) -> None:
        self.dispatcher = dispatcher

    async def handle_line(self, line: str) -> dict[str, Any] | None:
        """Parse one line and return the response object, if any."""

        try:
            request = json.loads(line)
        except json.JSONDecodeError:
            return _error(None, PARSE_ERROR, "Parse error")
        return await self.handle_request(request)

    async def handle_request(self, request: Any) -> dict[str, Any] | None:
        if not isinstance(request, dict) or request.get("jsonrpc") != "2.0":
            request_id = request.get("id") if isinstance(request, dict) else None
            return _error(request_id, INVALID_REQUEST, "Invalid Request")

        request_id = request.get("id")
        method = request.get("method")
        params = request.get("params") or {}

        if request_id is None and isinstance(method, str) and method.startswith("notifications/"):
            return None

        if method == "initialize":
            return _result(
                request_id,
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {"tools": {}},
                    "serverInfo": {
                        "name": self.dispatcher.settings.server.name,
                        "version": __version__,
                    },
                },
            )
        if method == "tools/list":
            return _result(request_id, {"tools": self._tool_list()})
        if method == "tools/call":
            return await self._call_tool(request_id, params)
        return _error(request_id, METHOD_NOT_FOUND, "Method not found")

    async def serve(
        self,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        """Read requests until EOF and write one response line per request."""

        source = input_stream or sys.stdin
        sink = output_stream or sys.stdout
        loop = asyncio.get_running_loop()
        in_flight: set[asyncio.Task[None]] = set()

        async def respond(line: str) -> None:
            response = await self.handle_line(line)
            if response is not None:
                sink.write(json.dumps(response) + "\n")
                sink.flush()

        while True:
            line = await loop.run_in_executor(None, source.readline)
            if not line:
                break
            if not line.strip():
                continue
            task = asyncio.create_task(respond(line))
            in_flight.add(task)
            task.add_done_callback(in_flight.discard)

        if in_flight:
            await asyncio.gather(*in_flight)

    def _tool_list(self) -> list[dict[str, Any]]:
        return [
            {
                "name": spec.name,
                "title": spec.title,
                "description": spec.description,
                "inputSchema": spec.input_schema(),
            }
            for spec in self.dispatcher.catalog
        ]

    async def _call_tool(self, request_id: Any, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return _error(request_id, INVALID_PARAMS, "Missing tool name")
        try:
            text = await self.dispatcher.call(params["name"], params.get("arguments"))
        except RequestValidationError as error:
            return _error(request_id, INVALID_PARAMS, str(error))
        except DistillerError as error:
            return _error(request_id, INTERNAL_ERROR, str(error))
        except Exception as error:  # noqa: BLE001
            logger.exception("Unexpected error in tool %s", params["name"])
            return _error(request_id, INTERNAL_ERROR, str(error))
        return _result(request_id, {"content": [{"type": "text", "text": text}]})


async def serve_lines(settings: Settings) -> None:
    """Serve the line protocol on stdin/stdout."""

    service = DistillerService.from_settings(settings)
    server = LineRpcServer(ToolDispatcher(service=service, settings=settings))
    logger.info(
        "%s %s started in line mode (binary=%s, root=%s)",
        settings.server.name,
        __version__,
        settings.tool.binary,
        settings.tool.root,
    )
    try:
        await server.serve()
    finally:
        await service.aclose()


def _result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}
