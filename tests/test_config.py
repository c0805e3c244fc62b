from __future__ import annotations

from pathlib import Path

import allure
import pytest

from distiller_mcp.config import ServerSettings, Settings, ToolSettings

pytestmark = [
    allure.epic("Configuration"),
    allure.feature("Environment Settings"),
]

_ENV_NAMES = (
    "AID_BINARY",
    "AID_ROOT",
    "AID_PROJECT_ROOT",
    "AID_MCP_TIMEOUT_SECONDS",
    "AID_MCP_DEBUG",
    "DEBUG",
    "AID_MCP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_from_env_reads_binary_and_roots(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AID_BINARY", "/opt/aid/bin/aid")
    monkeypatch.setenv("AID_ROOT", str(tmp_path))
    monkeypatch.setenv("AID_PROJECT_ROOT", str(tmp_path / "project"))

    settings = Settings.from_env()

    assert settings.tool.binary == "/opt/aid/bin/aid"
    assert settings.tool.root == tmp_path
    assert settings.tool.cache_dir == tmp_path / "project" / ".aid" / "cache" / "mcp"


def test_from_env_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", str(tmp_path))

    settings = Settings.from_env()

    assert settings.tool.binary in {"aid", "aid.exe"}
    assert settings.tool.root.resolve() == tmp_path.resolve()
    assert settings.server.timeout_seconds is None
    assert settings.server.debug is False
    assert settings.server.effective_log_level == "WARNING"


def test_explicit_arguments_override_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AID_BINARY", "env-aid")
    monkeypatch.setenv("AID_MCP_TIMEOUT_SECONDS", "60")
    monkeypatch.setenv("AID_MCP_DEBUG", "1")

    settings = Settings.from_env(binary="cli-aid", root=tmp_path, timeout_seconds=5, debug=False)

    assert settings.tool.binary == "cli-aid"
    assert settings.tool.root == tmp_path
    assert settings.server.timeout_seconds == 5
    assert settings.server.debug is False


@pytest.mark.parametrize(("raw", "expected"), [("0", None), ("", None), ("2.5", 2.5)])
def test_timeout_parsing(monkeypatch, raw: str, expected: float | None) -> None:
    monkeypatch.setenv("AID_MCP_TIMEOUT_SECONDS", raw)

    assert Settings.from_env().server.timeout_seconds == expected


@pytest.mark.parametrize(
    ("name", "raw", "message"),
    [
        ("AID_MCP_TIMEOUT_SECONDS", "soon", "Invalid AID_MCP_TIMEOUT_SECONDS"),
        ("AID_MCP_TIMEOUT_SECONDS", "-1", "AID_MCP_TIMEOUT_SECONDS must be >= 0"),
        ("AID_MCP_DEBUG", "maybe", "Invalid boolean value for AID_MCP_DEBUG"),
        ("AID_MCP_LOG_LEVEL", "chatty", "Invalid AID_MCP_LOG_LEVEL"),
    ],
)
def test_invalid_environment_values_are_rejected(monkeypatch, name, raw, message) -> None:
    monkeypatch.setenv(name, raw)

    with pytest.raises(ValueError, match=message):
        Settings.from_env()


def test_debug_flag_forces_debug_logging(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("AID_MCP_LOG_LEVEL", "error")

    settings = Settings.from_env()

    assert settings.server.log_level == "ERROR"
    assert settings.server.effective_log_level == "DEBUG"


def test_validate_rejects_missing_root(tmp_path: Path) -> None:
    settings = Settings(tool=ToolSettings(root=tmp_path / "absent"))

    with pytest.raises(ValueError, match="AID_ROOT is not a directory"):
        settings.validate()


def test_validate_rejects_empty_binary(tmp_path: Path) -> None:
    settings = Settings(tool=ToolSettings(binary=" ", root=tmp_path))

    with pytest.raises(ValueError, match="AID_BINARY must not be empty"):
        settings.validate()


def test_validate_rejects_non_positive_timeout(tmp_path: Path) -> None:
    settings = Settings(
        tool=ToolSettings(root=tmp_path),
        server=ServerSettings(timeout_seconds=0),
    )

    with pytest.raises(ValueError, match="AID_MCP_TIMEOUT_SECONDS"):
        settings.validate()
