"""Subprocess-based executor for the external ``aid`` binary."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from distiller_mcp.execution.errors import ExecutionTimeoutError, SpawnError, ToolFailedError
from distiller_mcp.execution.models import ExecutionOutcome

logger = logging.getLogger(__name__)

_TERMINATE_GRACE_SECONDS = 2.0


class CommandRunner(Protocol):
    """Protocol implemented by anything the execution queue can drive."""

    async def run(self, argv: Sequence[str], *, timeout_seconds: float | None = None) -> str:
        """Run one invocation and return its composed payload."""


class ProcessExecutor:
    """Run one ``aid`` process per call and classify its outcome."""

    def __init__(
        self,
        binary: str | Path,
        *,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self.binary = str(binary)
        self.cwd = cwd
        self.env = env

    async def execute(
        self,
        argv: Sequence[str],
        *,
        timeout_seconds: float | None = None,
    ) -> ExecutionOutcome:
        """Spawn the binary with ``argv`` and wait for it to terminate.

        Raises:
            SpawnError: the process could not be created.
            ExecutionTimeoutError: ``timeout_seconds`` elapsed first.
        """

        logger.debug("Running %s with args %r (cwd=%s)", self.binary, list(argv), self.cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd is not None else None,
                env=self.env if self.env is not None else os.environ.copy(),
            )
        except OSError as error:
            logger.warning("Could not start %s: %s", self.binary, error)
            raise SpawnError(self.binary, error.strerror or str(error)) from error

        try:
            if timeout_seconds is None:
                stdout_bytes, stderr_bytes = await process.communicate()
            else:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout_seconds,
                )
        except TimeoutError as error:
            await _terminate_process(process)
            raise ExecutionTimeoutError(timeout_seconds) from error
        except asyncio.CancelledError:
            await _terminate_process(process)
            raise

        outcome = ExecutionOutcome(
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )
        logger.debug(
            "aid exited with code %s (stdout=%d bytes, stderr=%d bytes)",
            outcome.exit_code,
            len(outcome.stdout),
            len(outcome.stderr),
        )
        return outcome

    async def run(self, argv: Sequence[str], *, timeout_seconds: float | None = None) -> str:
        """Execute and classify: return the composed payload or raise."""

        outcome = await self.execute(argv, timeout_seconds=timeout_seconds)
        return compose_payload(outcome)


def compose_payload(outcome: ExecutionOutcome) -> str:
    """Combine both channels of a finished process into the caller payload.

    On success, informational stderr text precedes stdout separated by a
    blank line. On failure the stderr text becomes the error message.
    """

    if not outcome.succeeded:
        message = outcome.stderr.strip() or f"aid exited with code {outcome.exit_code}"
        raise ToolFailedError(message, exit_code=outcome.exit_code, stderr=outcome.stderr)

    if outcome.stderr.strip():
        return f"{outcome.stderr}\n\n{outcome.stdout}"
    return outcome.stdout


async def _terminate_process(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(process.wait(), timeout=_TERMINATE_GRACE_SECONDS)
    except TimeoutError:
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
