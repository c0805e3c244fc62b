"""Response text for tool results returned to the agent."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

ResponseRenderer = Callable[[str, Mapping[str, Any]], str]

PROMPT_FILE_FALLBACK = "Check .aid/ directory"


def verbatim(result: str, arguments: Mapping[str, Any]) -> str:
    """Return the tool payload unchanged."""

    return result


def extract_prompt_file(result: str, label: str) -> str | None:
    """Find the path aid prints after ``📋 <label>:``."""

    match = re.search(rf"📋 {re.escape(label)}: (.+)", result)
    if match is None:
        return None
    return match.group(1).strip()


def prompt_file_response(
    *,
    label: str,
    headline: str | Callable[[Mapping[str, Any]], str],
    file_caption: str,
    instructions: str,
    focus_argument: str | None = None,
) -> ResponseRenderer:
    """Renderer for actions that write a prompt file and announce its path."""

    def render(result: str, arguments: Mapping[str, Any]) -> str:
        title = headline(arguments) if callable(headline) else headline
        file_path = extract_prompt_file(result, label) or PROMPT_FILE_FALLBACK
        parts = [title, f"{file_caption}: {file_path}"]
        focus = arguments.get(focus_argument) if focus_argument else None
        if focus:
            parts.append(f"Focus: {focus}")
        parts.extend([instructions, result])
        return "\n\n".join(parts)

    return render


def wrapped_response(*, headline: str, footer: str | None = None) -> ResponseRenderer:
    """Renderer that frames the payload with a headline and optional hint."""

    def render(result: str, arguments: Mapping[str, Any]) -> str:
        parts = [headline, result]
        if footer:
            parts.append(footer)
        return "\n\n".join(parts)

    return render


def docs_response(result: str, arguments: Mapping[str, Any]) -> str:
    audience = arguments.get("audience") or "general"
    return f"Documentation generation prompt created!\n\nTarget audience: {audience}\n\n{result}"
