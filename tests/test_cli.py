from __future__ import annotations

import json
from pathlib import Path

import allure
from click.testing import CliRunner

from distiller_mcp import __version__
from distiller_mcp.main import distiller_mcp

pytestmark = [
    allure.epic("CLI"),
    allure.feature("Direct Tool Calls"),
]


def test_version_option() -> None:
    result = CliRunner().invoke(distiller_mcp, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_tools_lists_catalog_by_category() -> None:
    result = CliRunner().invoke(distiller_mcp, ["tools"])

    assert result.exit_code == 0
    assert "Tools: 16" in result.output
    assert "[core]" in result.output
    assert "  aid_hunt_bugs - Systematic bug detection" in result.output


def test_capabilities_prints_json(aid_env: Path) -> None:
    result = CliRunner().invoke(distiller_mcp, ["capabilities"])

    assert result.exit_code == 0
    report = json.loads(result.output)
    assert report["root_path"] == str(aid_env)
    assert "json-structured" in report["supported_formats"]


def test_call_dry_run_prints_command_line(aid_env: Path, fake_aid: Path) -> None:
    result = CliRunner().invoke(
        distiller_mcp,
        [
            "call",
            "distill_directory",
            "--arg",
            "directory_path=src",
            "--arg",
            "recursive=false",
            "--arg",
            "include_patterns=*.py",
            "--dry-run",
        ],
    )

    assert result.exit_code == 0
    assert result.output.strip() == (
        f"{fake_aid} src --stdout --show-ai-agent-instructions --recursive=0 '--include=*.py'"
    )


def test_call_dry_run_for_local_tool(aid_env: Path) -> None:
    result = CliRunner().invoke(distiller_mcp, ["call", "get_capabilities", "--dry-run"])

    assert result.exit_code == 0
    assert "answered locally" in result.output


def test_call_runs_tool_with_json_args(aid_env: Path) -> None:
    result = CliRunner().invoke(
        distiller_mcp,
        [
            "call",
            "distill_with_dependencies",
            "--json-args",
            '{"file_path": "echo", "max_depth": 1}',
            "--arg",
            "include_comments=yes",
        ],
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        "echo",
        "--dependency-aware",
        "--stdout",
        "--show-ai-agent-instructions",
        "--max-depth=1",
        "--comments=1",
    ]


def test_call_reports_tool_failure(aid_env: Path) -> None:
    result = CliRunner().invoke(distiller_mcp, ["call", "distill_file", "--arg", "file_path=fail"])

    assert result.exit_code != 0
    assert "Error: bad file" in result.output
    assert "Tool distill_file failed." in result.output


def test_call_rejects_malformed_argument(aid_env: Path) -> None:
    result = CliRunner().invoke(distiller_mcp, ["call", "distill_file", "--arg", "file_path"])

    assert result.exit_code != 0
    assert "Expected key=value" in result.output


def test_call_rejects_unknown_tool(aid_env: Path) -> None:
    result = CliRunner().invoke(distiller_mcp, ["call", "distill_everything"])

    assert result.exit_code != 0
    assert "Unknown tool: distill_everything" in result.output
