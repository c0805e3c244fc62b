from __future__ import annotations

import asyncio
from pathlib import Path

import allure
import pytest

from distiller_mcp.config import ServerSettings, Settings, ToolSettings
from distiller_mcp.execution.errors import EmptyOutputError, ToolFailedError
from distiller_mcp.execution.models import AiAction, DistillAction, StructuredRequest
from distiller_mcp.execution.service import DistillerService

pytestmark = [
    allure.epic("Execution Pipeline"),
    allure.feature("Distiller Service"),
]


def _service(fake_aid: Path, root: Path, timeout_seconds: float | None = None) -> DistillerService:
    return DistillerService.from_settings(
        Settings(
            tool=ToolSettings(binary=str(fake_aid), root=root, project_root=root),
            server=ServerSettings(timeout_seconds=timeout_seconds),
        ),
    )


def _run(service: DistillerService, request: StructuredRequest) -> str:
    async def scenario() -> str:
        try:
            return await service.run(request)
        finally:
            await service.aclose()

    return asyncio.run(scenario())


def test_service_returns_composed_payload(fake_aid: Path, tmp_path: Path) -> None:
    service = _service(fake_aid, tmp_path)

    assert _run(service, StructuredRequest(target="note")) == "note\n\nRESULT"


def test_service_builds_argv_from_request(fake_aid: Path, tmp_path: Path) -> None:
    service = _service(fake_aid, tmp_path)

    payload = _run(
        service,
        StructuredRequest(
            target="echo",
            action=DistillAction.AI_ACTION,
            ai_action=AiAction.DIAGRAMS,
        ),
    )

    assert payload == '["echo", "--ai-action=prompt-for-diagrams"]'


def test_service_flags_empty_output_as_application_error(fake_aid: Path, tmp_path: Path) -> None:
    service = _service(fake_aid, tmp_path)

    with pytest.raises(EmptyOutputError, match="No output received from aid command for empty"):
        _run(service, StructuredRequest(target="empty"))


def test_service_propagates_tool_failure(fake_aid: Path, tmp_path: Path) -> None:
    service = _service(fake_aid, tmp_path)

    with pytest.raises(ToolFailedError, match="bad file"):
        _run(service, StructuredRequest(target="fail"))


def test_service_uses_configured_timeout(fake_aid: Path, tmp_path: Path) -> None:
    service = _service(fake_aid, tmp_path, timeout_seconds=12.5)

    assert service.queue.default_timeout_seconds == 12.5
