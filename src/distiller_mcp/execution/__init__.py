"""Command execution pipeline for the external ``aid`` binary.

Requests are turned into argument vectors by the command builder, queued
strictly first-in-first-out, and executed one process at a time.
"""

from distiller_mcp.execution.command_builder import build_argv
from distiller_mcp.execution.errors import (
    DistillerError,
    EmptyOutputError,
    ExecutionTimeoutError,
    RequestValidationError,
    SpawnError,
    ToolFailedError,
    UnknownToolError,
)
from distiller_mcp.execution.executor import CommandRunner, ProcessExecutor, compose_payload
from distiller_mcp.execution.models import (
    AiAction,
    DistillAction,
    DistillOptions,
    ExecutionOutcome,
    JobStatus,
    OutputFormat,
    StructuredRequest,
)
from distiller_mcp.execution.queue import ExecutionQueue, QueueStats

__all__ = [
    "AiAction",
    "CommandRunner",
    "DistillAction",
    "DistillOptions",
    "DistillerError",
    "EmptyOutputError",
    "ExecutionOutcome",
    "ExecutionQueue",
    "ExecutionTimeoutError",
    "JobStatus",
    "OutputFormat",
    "ProcessExecutor",
    "QueueStats",
    "RequestValidationError",
    "SpawnError",
    "StructuredRequest",
    "ToolFailedError",
    "UnknownToolError",
    "build_argv",
    "compose_payload",
]
