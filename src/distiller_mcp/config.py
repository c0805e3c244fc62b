"""Runtime configuration for the aid bridge."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_BINARY_NAME = "aid.exe" if os.name == "nt" else "aid"
DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class ToolSettings:
    """Where the external binary lives and where it runs."""

    binary: str = DEFAULT_BINARY_NAME
    root: Path = field(default_factory=Path.cwd)
    project_root: Path = field(default_factory=Path.cwd)

    @property
    def cache_dir(self) -> Path:
        return self.project_root / ".aid" / "cache" / "mcp"


@dataclass(slots=True)
class ServerSettings:
    """Protocol server behavior."""

    name: str = "AI Distiller MCP"
    timeout_seconds: float | None = None
    debug: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    tool: ToolSettings = field(default_factory=ToolSettings)
    server: ServerSettings = field(default_factory=ServerSettings)

    @classmethod
    def from_env(
        cls,
        *,
        binary: str | None = None,
        root: Path | None = None,
        timeout_seconds: float | None = None,
        debug: bool | None = None,
    ) -> Settings:
        """Load settings from environment; explicit arguments win over env values."""

        cwd = Path.cwd()
        env_debug = _env_bool("AID_MCP_DEBUG", default=False) or _env_bool("DEBUG", default=False)
        return cls(
            tool=ToolSettings(
                binary=binary or _resolve_binary(os.getenv("AID_BINARY", "").strip()),
                root=root or _env_path("AID_ROOT") or cwd,
                project_root=_env_path("AID_PROJECT_ROOT") or cwd,
            ),
            server=ServerSettings(
                timeout_seconds=(
                    timeout_seconds
                    if timeout_seconds is not None
                    else _env_timeout("AID_MCP_TIMEOUT_SECONDS")
                ),
                debug=env_debug if debug is None else debug,
                log_level=_env_log_level("AID_MCP_LOG_LEVEL"),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error for values the bridge cannot run with."""

        if not self.tool.binary.strip():
            raise ValueError("AID_BINARY must not be empty.")
        if not self.tool.root.is_dir():
            raise ValueError(f"AID_ROOT is not a directory: {self.tool.root}")
        if self.server.timeout_seconds is not None and self.server.timeout_seconds <= 0:
            raise ValueError("AID_MCP_TIMEOUT_SECONDS must be > 0 when set.")
        if self.server.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid AID_MCP_LOG_LEVEL: {self.server.log_level!r}")


def _resolve_binary(configured: str) -> str:
    if configured:
        return configured
    return shutil.which(DEFAULT_BINARY_NAME) or DEFAULT_BINARY_NAME


def _env_path(name: str) -> Path | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()


def _env_timeout(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as error:
        raise ValueError(f"Invalid {name} value: {raw!r}") from error
    if value < 0:
        raise ValueError(f"{name} must be >= 0.")
    return value or None


def _env_log_level(name: str) -> str:
    value = os.getenv(name, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    if value not in _LOG_LEVELS:
        raise ValueError(f"Invalid {name} value: {value!r}. Expected one of {', '.join(_LOG_LEVELS)}.")
    return value


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
