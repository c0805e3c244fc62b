"""Error taxonomy for the command execution pipeline."""

from __future__ import annotations


class DistillerError(RuntimeError):
    """Base class for every error surfaced to a tool caller."""


class RequestValidationError(DistillerError, ValueError):
    """Malformed or missing field in a tool call; never reaches the queue."""


class UnknownToolError(RequestValidationError):
    """Tool name is not part of the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class SpawnError(DistillerError):
    """The external binary could not be started at all."""

    def __init__(self, binary: str, reason: str) -> None:
        super().__init__(f"Failed to start {binary}: {reason}")
        self.binary = binary
        self.reason = reason


class ToolFailedError(DistillerError):
    """The external tool ran and reported failure with a non-zero exit code."""

    def __init__(self, message: str, *, exit_code: int, stderr: str) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class ExecutionTimeoutError(DistillerError):
    """A job deadline expired and its process was killed."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"aid did not finish within {timeout_seconds:g} seconds")
        self.timeout_seconds = timeout_seconds


class EmptyOutputError(DistillerError):
    """The tool exited cleanly but produced nothing."""
