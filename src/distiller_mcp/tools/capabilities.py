"""Static capability report for the ``get_capabilities`` tool."""

from __future__ import annotations

from distiller_mcp import __version__
from distiller_mcp.config import Settings
from distiller_mcp.execution.models import AiAction, OutputFormat

PROTOCOL_VERSION = "2025-03-26"

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "Python",
    "TypeScript",
    "JavaScript",
    "Go",
    "Java",
    "C#",
    "Rust",
    "Ruby",
    "Swift",
    "Kotlin",
    "PHP",
    "C++",
    "C",
)

FEATURES: tuple[str, ...] = (
    "Request queuing for concurrent access",
    "Automatic language detection",
    "Granular visibility control",
    "Pattern-based file filtering",
    "Multiple output formats",
    "AI-powered analysis prompts",
    "Comprehensive documentation generation",
)


def build_capabilities(settings: Settings, tools_by_category: dict[str, list[str]]) -> dict[str, object]:
    """Describe the server, its tools, and what the binary supports."""

    return {
        "server_name": settings.server.name,
        "server_version": __version__,
        "protocol_version": PROTOCOL_VERSION,
        "root_path": str(settings.tool.root),
        "cache_dir": str(settings.tool.cache_dir),
        "tools": tools_by_category,
        "supported_languages": list(SUPPORTED_LANGUAGES),
        "supported_formats": [fmt.value for fmt in OutputFormat],
        "ai_actions": {
            "prompts": [action.value for action in AiAction if not action.is_workflow],
            "workflows": [action.value for action in AiAction if action.is_workflow],
        },
        "features": list(FEATURES),
    }
