"""Agent-facing tool catalog shared by the protocol adapters."""

from distiller_mcp.tools.catalog import (
    DEFAULT_CATALOG,
    ParamKind,
    ToolCatalog,
    ToolCategory,
    ToolParam,
    ToolSpec,
)
from distiller_mcp.tools.dispatch import ToolDispatcher

__all__ = [
    "DEFAULT_CATALOG",
    "ParamKind",
    "ToolCatalog",
    "ToolCategory",
    "ToolDispatcher",
    "ToolParam",
    "ToolSpec",
]
