"""Controllers for bridge CLI commands."""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from distiller_mcp.config import Settings
from distiller_mcp.execution.command_builder import build_argv
from distiller_mcp.execution.errors import DistillerError, RequestValidationError
from distiller_mcp.execution.service import DistillerService
from distiller_mcp.server import serve_lines, serve_stdio
from distiller_mcp.tools.catalog import DEFAULT_CATALOG, ParamKind, ToolSpec
from distiller_mcp.tools.dispatch import ToolDispatcher

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


@dataclass(slots=True)
class ServeCommand:
    """CLI input for running a protocol server."""

    transport: str
    binary: str | None
    root: Path | None
    timeout_seconds: float | None
    debug: bool | None


@dataclass(slots=True)
class ToolCallCommand:
    """CLI input for one direct tool invocation."""

    tool_name: str
    arg_pairs: tuple[str, ...]
    json_args: str | None
    dry_run: bool
    binary: str | None
    root: Path | None
    timeout_seconds: float | None


@dataclass(slots=True)
class ToolCallResult:
    success: bool
    lines: list[str]


class BridgeCliController:
    """Runs servers and one-off tool calls for the CLI."""

    def serve(self, command: ServeCommand) -> None:
        settings = Settings.from_env(
            binary=command.binary,
            root=command.root,
            timeout_seconds=command.timeout_seconds,
            debug=command.debug,
        )
        settings.validate()
        configure_logging(settings)
        runner = serve_lines if command.transport == "jsonl" else serve_stdio
        asyncio.run(runner(settings))

    def list_tools(self) -> list[str]:
        lines = [f"Tools: {len(DEFAULT_CATALOG)}"]
        for category, labels in DEFAULT_CATALOG.names_by_category().items():
            lines.append(f"[{category}]")
            lines.extend(f"  {label}" for label in labels)
        return lines

    def capabilities(self) -> list[str]:
        settings = Settings.from_env()
        dispatcher = ToolDispatcher(
            service=DistillerService.from_settings(settings),
            settings=settings,
        )
        return json.dumps(dispatcher.capabilities(), indent=2).splitlines()

    def call(self, command: ToolCallCommand) -> ToolCallResult:
        settings = Settings.from_env(
            binary=command.binary,
            root=command.root,
            timeout_seconds=command.timeout_seconds,
        )
        configure_logging(settings)
        try:
            spec = DEFAULT_CATALOG.get(command.tool_name)
            arguments = parse_cli_arguments(spec, command.arg_pairs, command.json_args)
            if command.dry_run and not spec.runs_binary:
                return ToolCallResult(
                    success=True,
                    lines=[f"{spec.name} is answered locally; no command is run."],
                )
            if command.dry_run:
                argv = build_argv(spec.build_request(arguments))
                return ToolCallResult(
                    success=True,
                    lines=[shlex.join((settings.tool.binary, *argv))],
                )
            text = asyncio.run(_call_once(settings, spec.name, arguments))
        except DistillerError as error:
            return ToolCallResult(success=False, lines=[f"Error: {error}"])
        return ToolCallResult(success=True, lines=text.splitlines() or [""])


def configure_logging(settings: Settings) -> None:
    """Send log records to stderr; stdout belongs to the protocol."""

    logging.basicConfig(
        level=settings.server.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_cli_arguments(
    spec: ToolSpec,
    pairs: tuple[str, ...],
    json_args: str | None,
) -> dict[str, Any]:
    """Merge ``--json-args`` with ``key=value`` pairs typed by the tool declaration."""

    arguments: dict[str, Any] = {}
    if json_args:
        try:
            decoded = json.loads(json_args)
        except json.JSONDecodeError as error:
            raise RequestValidationError(f"--json-args is not valid JSON: {error}") from error
        if not isinstance(decoded, Mapping):
            raise RequestValidationError("--json-args must be a JSON object.")
        arguments.update(decoded)

    kinds = {param.name: param.kind for param in spec.params}
    for pair in pairs:
        key, separator, raw = pair.partition("=")
        key = key.strip()
        if not separator or not key:
            raise RequestValidationError(f"Expected key=value, got {pair!r}")
        arguments[key] = _typed_value(key, raw, kinds.get(key, ParamKind.STRING))
    return arguments


def _typed_value(key: str, raw: str, kind: ParamKind) -> Any:
    if kind is ParamKind.BOOLEAN:
        normalized = raw.strip().lower()
        if normalized in _TRUE_WORDS:
            return True
        if normalized in _FALSE_WORDS:
            return False
        raise RequestValidationError(f"Argument {key!r} expects a boolean, got {raw!r}")
    if kind is ParamKind.INTEGER:
        try:
            return int(raw)
        except ValueError as error:
            raise RequestValidationError(f"Argument {key!r} expects an integer, got {raw!r}") from error
    return raw


async def _call_once(settings: Settings, tool_name: str, arguments: Mapping[str, Any]) -> str:
    service = DistillerService.from_settings(settings)
    dispatcher = ToolDispatcher(service=service, settings=settings)
    try:
        return await dispatcher.call(tool_name, arguments)
    finally:
        await service.aclose()
