"""Deterministic translation of structured requests into ``aid`` argument vectors.

The vector is handed to process creation as discrete elements and never
through a shell, so values such as glob patterns are emitted verbatim.
"""

from __future__ import annotations

from distiller_mcp.execution.models import DistillAction, DistillOptions, StructuredRequest

PAYLOAD_FLAGS: tuple[str, ...] = ("--stdout", "--show-ai-agent-instructions")
DEPENDENCY_FLAG = "--dependency-aware"

# (option attribute, default, flag emitted when the value differs from default)
_TOGGLE_FLAGS: tuple[tuple[str, bool, str], ...] = (
    ("recursive", True, "--recursive=0"),
    ("include_private", False, "--private=1"),
    ("include_protected", False, "--protected=1"),
    ("include_internal", False, "--internal=1"),
    ("include_implementation", False, "--implementation=1"),
    ("include_comments", False, "--comments=1"),
    ("include_fields", True, "--fields=0"),
    ("include_methods", True, "--methods=0"),
)

_TEXT_FLAGS: tuple[tuple[str, str], ...] = (
    ("include_patterns", "--include"),
    ("exclude_patterns", "--exclude"),
    ("ai_query", "--ai-query"),
)


def build_argv(request: StructuredRequest) -> tuple[str, ...]:
    """Build the ordered argument vector for one request."""

    argv: list[str] = [request.target]

    if request.action is DistillAction.DISTILL_WITH_DEPENDENCIES:
        argv.append(DEPENDENCY_FLAG)
    if request.action.emits_payload:
        argv.extend(PAYLOAD_FLAGS)
    if request.action is DistillAction.AI_ACTION and request.ai_action is not None:
        argv.append(f"--ai-action={request.ai_action.value}")

    argv.extend(option_flags(request.options))
    return tuple(argv)


def option_flags(options: DistillOptions) -> list[str]:
    """Flags for the option set alone, with defaults suppressed."""

    flags: list[str] = []
    if options.max_depth is not None:
        flags.append(f"--max-depth={options.max_depth}")
    if options.output_format is not None:
        flags.append(f"--format={options.output_format.value}")

    for attribute, default, flag in _TOGGLE_FLAGS:
        if bool(getattr(options, attribute)) != default:
            flags.append(flag)

    for attribute, name in _TEXT_FLAGS:
        value = getattr(options, attribute)
        if value:
            flags.append(f"{name}={value}")
    return flags
