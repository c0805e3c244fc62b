from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path

import allure
import pytest

from distiller_mcp.execution.errors import ExecutionTimeoutError, SpawnError, ToolFailedError
from distiller_mcp.execution.executor import ProcessExecutor, compose_payload
from distiller_mcp.execution.models import ExecutionOutcome

pytestmark = [
    allure.epic("Execution Pipeline"),
    allure.feature("Process Executor"),
]


def test_compose_payload_puts_stderr_before_stdout() -> None:
    outcome = ExecutionOutcome(exit_code=0, stdout="RESULT", stderr="note")

    assert compose_payload(outcome) == "note\n\nRESULT"


def test_compose_payload_returns_stdout_alone_without_stderr() -> None:
    assert compose_payload(ExecutionOutcome(exit_code=0, stdout="RESULT", stderr="")) == "RESULT"


def test_compose_payload_ignores_whitespace_only_stderr() -> None:
    assert compose_payload(ExecutionOutcome(exit_code=0, stdout="RESULT", stderr=" \n")) == "RESULT"


def test_compose_payload_uses_stderr_as_failure_message() -> None:
    with pytest.raises(ToolFailedError) as error_info:
        compose_payload(ExecutionOutcome(exit_code=2, stdout="partial", stderr="bad file\n"))

    assert str(error_info.value) == "bad file"
    assert error_info.value.exit_code == 2
    assert error_info.value.stderr == "bad file\n"


def test_compose_payload_names_exit_code_when_stderr_is_empty() -> None:
    with pytest.raises(ToolFailedError, match="aid exited with code 3"):
        compose_payload(ExecutionOutcome(exit_code=3, stdout="", stderr=""))


def test_executor_runs_binary_and_captures_both_channels(fake_aid: Path) -> None:
    executor = ProcessExecutor(fake_aid)

    outcome = asyncio.run(executor.execute(["note"]))

    assert outcome == ExecutionOutcome(exit_code=0, stdout="RESULT", stderr="note")
    assert asyncio.run(executor.run(["note"])) == "note\n\nRESULT"


def test_executor_passes_arguments_without_a_shell(fake_aid: Path) -> None:
    argv = ["echo", "--include=*.py", "--ai-query=$(whoami); ls", "with space"]

    payload = asyncio.run(ProcessExecutor(fake_aid).run(argv))

    assert json.loads(payload) == argv


def test_executor_reports_tool_failure(fake_aid: Path) -> None:
    with pytest.raises(ToolFailedError) as error_info:
        asyncio.run(ProcessExecutor(fake_aid).run(["fail"]))

    assert str(error_info.value) == "bad file"
    assert error_info.value.exit_code == 2


def test_executor_reports_exit_code_for_silent_failure(fake_aid: Path) -> None:
    with pytest.raises(ToolFailedError, match="aid exited with code 3"):
        asyncio.run(ProcessExecutor(fake_aid).run(["silent-fail"]))


def test_executor_raises_spawn_error_for_missing_binary(tmp_path: Path) -> None:
    missing = tmp_path / "does-not-exist" / "aid"

    with pytest.raises(SpawnError) as error_info:
        asyncio.run(ProcessExecutor(missing).run(["src"]))

    assert error_info.value.binary == str(missing)
    assert str(missing) in str(error_info.value)


def test_executor_kills_process_after_timeout(fake_aid: Path) -> None:
    started = time.monotonic()

    with pytest.raises(ExecutionTimeoutError, match="0.5 seconds") as error_info:
        asyncio.run(ProcessExecutor(fake_aid).run(["sleep"], timeout_seconds=0.5))

    assert error_info.value.timeout_seconds == 0.5
    assert time.monotonic() - started < 10


def test_executor_runs_in_configured_directory(fake_aid: Path, tmp_path: Path) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()

    payload = asyncio.run(ProcessExecutor(fake_aid, cwd=workdir).run(["cwd"]))

    assert Path(payload).resolve() == workdir.resolve()
