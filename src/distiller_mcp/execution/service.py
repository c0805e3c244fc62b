"""Application service tying the builder, queue, and executor together."""

from __future__ import annotations

import logging

from distiller_mcp.config import Settings
from distiller_mcp.execution.command_builder import build_argv
from distiller_mcp.execution.errors import EmptyOutputError
from distiller_mcp.execution.executor import ProcessExecutor
from distiller_mcp.execution.models import DistillAction, StructuredRequest
from distiller_mcp.execution.queue import ExecutionQueue

logger = logging.getLogger(__name__)

_EMPTY_OUTPUT_HINTS = {
    DistillAction.DISTILL: "The path may not exist or aid binary may have issues.",
    DistillAction.DISTILL_WITH_DEPENDENCIES: (
        "File may not exist, may not be supported, or aid binary may have issues."
    ),
    DistillAction.AI_ACTION: "The path may not exist or contain no supported files.",
}


class DistillerService:
    """Run structured requests through the shared execution queue."""

    def __init__(self, queue: ExecutionQueue) -> None:
        self.queue = queue

    @classmethod
    def from_settings(cls, settings: Settings) -> DistillerService:
        executor = ProcessExecutor(settings.tool.binary, cwd=settings.tool.root)
        return cls(
            ExecutionQueue(
                executor,
                default_timeout_seconds=settings.server.timeout_seconds,
            ),
        )

    async def run(self, request: StructuredRequest, *, timeout_seconds: float | None = None) -> str:
        """Execute one request and return its non-empty payload."""

        argv = build_argv(request)
        result = await self.queue.submit(argv, timeout_seconds=timeout_seconds)
        if not result.strip():
            logger.warning("Empty result for %s (%s)", request.target, request.action.value)
            raise EmptyOutputError(
                f"No output received from aid command for {request.target}. "
                f"{_EMPTY_OUTPUT_HINTS[request.action]}",
            )
        return result

    async def aclose(self) -> None:
        await self.queue.aclose()
