"""Tool catalog: parameter declarations, argument validation, request shaping.

Both protocol adapters list and dispatch tools from this single catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from distiller_mcp.execution.errors import RequestValidationError, UnknownToolError
from distiller_mcp.execution.models import (
    AiAction,
    DistillAction,
    DistillOptions,
    OutputFormat,
    StructuredRequest,
)
from distiller_mcp.tools.rendering import (
    ResponseRenderer,
    docs_response,
    prompt_file_response,
    verbatim,
    wrapped_response,
)

logger = logging.getLogger(__name__)

RequestShaper = Callable[[Mapping[str, Any]], StructuredRequest]


class ParamKind(str, Enum):
    """JSON types accepted for tool arguments."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"


class ToolCategory(str, Enum):
    """Grouping used by capability reports and the CLI listing."""

    CORE = "core"
    SPECIALIZED = "specialized"
    AI_WORKFLOWS = "ai_workflows"
    LEGACY = "legacy"
    META = "meta"


@dataclass(frozen=True, slots=True)
class ToolParam:
    """One declared tool argument."""

    name: str
    kind: ParamKind
    description: str
    required: bool = False
    choices: tuple[str, ...] = ()
    default: Any = None

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.kind.value, "description": self.description}
        if self.choices:
            schema["enum"] = list(self.choices)
        if self.default is not None:
            schema["default"] = self.default
        return schema

    def coerce(self, tool_name: str, value: Any) -> Any:
        """Check one supplied value against the declared type."""

        if self.kind is ParamKind.BOOLEAN:
            if not isinstance(value, bool):
                raise _invalid(tool_name, self.name, "a boolean", value)
            return value
        if self.kind is ParamKind.INTEGER:
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise _invalid(tool_name, self.name, "an integer", value)
            return value
        if not isinstance(value, str):
            raise _invalid(tool_name, self.name, "a string", value)
        if self.choices and value not in self.choices:
            raise RequestValidationError(
                f"Invalid value for {tool_name}.{self.name}: {value!r}. "
                f"Expected one of: {', '.join(self.choices)}",
            )
        if self.required and not value.strip():
            raise RequestValidationError(f"Argument {self.name!r} of {tool_name} must not be empty.")
        return value


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Declaration of one agent-facing tool."""

    name: str
    title: str
    description: str
    category: ToolCategory
    params: tuple[ToolParam, ...] = ()
    shape: RequestShaper | None = None
    render: ResponseRenderer = verbatim
    summary: str = ""

    @property
    def runs_binary(self) -> bool:
        return self.shape is not None

    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {param.name: param.json_schema() for param in self.params},
        }
        required = [param.name for param in self.params if param.required]
        if required:
            schema["required"] = required
        return schema

    def validate_arguments(self, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return checked arguments with tool-level defaults applied.

        Unknown keys are ignored; ``None`` counts as absent.
        """

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise RequestValidationError(f"Arguments for {self.name} must be an object.")

        declared = {param.name for param in self.params}
        ignored = sorted(key for key in arguments if key not in declared)
        if ignored:
            logger.debug("Ignoring unknown arguments for %s: %s", self.name, ", ".join(ignored))

        checked: dict[str, Any] = {}
        for param in self.params:
            value = arguments.get(param.name)
            if value is None:
                if param.required:
                    raise RequestValidationError(
                        f"Missing required argument {param.name!r} for {self.name}.",
                    )
                if param.default is not None:
                    checked[param.name] = param.default
                continue
            checked[param.name] = param.coerce(self.name, value)
        return checked

    def build_request(self, arguments: Mapping[str, Any] | None) -> StructuredRequest:
        """Validate arguments and shape them into a structured request."""

        if self.shape is None:
            raise RequestValidationError(f"Tool {self.name} does not invoke aid.")
        return self.shape(self.validate_arguments(arguments))


@dataclass(slots=True)
class ToolCatalog:
    """Ordered, name-indexed set of tools."""

    tools: tuple[ToolSpec, ...]
    _by_name: dict[str, ToolSpec] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_name = {}
        for spec in self.tools:
            if spec.name in self._by_name:
                raise ValueError(f"Duplicate tool name: {spec.name}")
            self._by_name[spec.name] = spec

    def __iter__(self):
        return iter(self.tools)

    def __len__(self) -> int:
        return len(self.tools)

    def get(self, name: str) -> ToolSpec:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def names_by_category(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for spec in self.tools:
            label = f"{spec.name} - {spec.summary}" if spec.summary else spec.name
            grouped.setdefault(spec.category.value, []).append(label)
        return grouped


def _invalid(tool_name: str, param_name: str, expected: str, value: Any) -> RequestValidationError:
    return RequestValidationError(
        f"Invalid value for {tool_name}.{param_name}: expected {expected}, got {type(value).__name__}",
    )


# -- parameter declarations ---------------------------------------------------

_FORMAT_CHOICES = tuple(fmt.value for fmt in OutputFormat)


def _path(name: str, description: str) -> ToolParam:
    return ToolParam(name, ParamKind.STRING, description, required=True)


def _flag(name: str, description: str, default: bool | None = None) -> ToolParam:
    return ToolParam(name, ParamKind.BOOLEAN, description, default=default)


def _text(name: str, description: str, *, required: bool = False) -> ToolParam:
    return ToolParam(name, ParamKind.STRING, description, required=required)


_OUTPUT_FORMAT = ToolParam(
    "output_format",
    ParamKind.STRING,
    "Output format (default: text)",
    choices=_FORMAT_CHOICES,
)
_INCLUDE_PATTERNS = _text(
    "include_patterns",
    "File patterns to include (comma-separated, e.g., '*.go,*.py')",
)
_EXCLUDE_PATTERNS = _text(
    "exclude_patterns",
    "File patterns to exclude (comma-separated, e.g., '*test*,vendor/**')",
)
_PATTERNS = (_INCLUDE_PATTERNS, _EXCLUDE_PATTERNS)

_DISTILL_CONTENT = (
    _flag("include_private", "Include private members (default: false)"),
    _flag("include_protected", "Include protected members (default: false)"),
    _flag("include_internal", "Include internal/package-private members (default: false)"),
    _flag("include_implementation", "Include function/method bodies (default: false)"),
    _flag("include_comments", "Include comments (default: false)"),
    _flag("include_fields", "Include fields/properties (default: true)"),
    _flag("include_methods", "Include methods/functions (default: true)"),
)


def _all_visibility(default: bool = True) -> ToolParam:
    return _flag(
        "include_private",
        f"Include private, protected and internal members (default: {str(default).lower()})",
        default=default,
    )


def _implementation(default: bool = True) -> ToolParam:
    return _flag(
        "include_implementation",
        f"Include implementation details (default: {str(default).lower()})",
        default=default,
    )


# -- request shaping ----------------------------------------------------------

_OPTION_ARGUMENTS = (
    "output_format",
    "recursive",
    "include_private",
    "include_protected",
    "include_internal",
    "include_implementation",
    "include_comments",
    "include_fields",
    "include_methods",
    "include_patterns",
    "exclude_patterns",
    "max_depth",
)


def _direct_options(arguments: Mapping[str, Any], **overrides: Any) -> DistillOptions:
    """Options taken one-to-one from same-named arguments."""

    values = {name: arguments[name] for name in _OPTION_ARGUMENTS if name in arguments}
    values.update(overrides)
    return DistillOptions(**values)


def _analysis_options(arguments: Mapping[str, Any]) -> DistillOptions:
    """Options for analysis tools where ``include_private`` widens all visibility levels."""

    widen = bool(arguments.get("include_private", False))
    return DistillOptions(
        include_private=widen,
        include_protected=widen,
        include_internal=widen,
        include_implementation=bool(arguments.get("include_implementation", False)),
        include_patterns=arguments.get("include_patterns"),
        exclude_patterns=arguments.get("exclude_patterns"),
    )


def _distill(path_argument: str) -> RequestShaper:
    def shape(arguments: Mapping[str, Any]) -> StructuredRequest:
        return StructuredRequest(
            target=arguments[path_argument],
            action=DistillAction.DISTILL,
            options=_direct_options(arguments),
        )

    return shape


def _distill_with_dependencies(arguments: Mapping[str, Any]) -> StructuredRequest:
    return StructuredRequest(
        target=arguments["file_path"],
        action=DistillAction.DISTILL_WITH_DEPENDENCIES,
        options=_direct_options(arguments),
    )


def _ai_action(action: AiAction) -> RequestShaper:
    def shape(arguments: Mapping[str, Any]) -> StructuredRequest:
        return StructuredRequest(
            target=arguments["target_path"],
            action=DistillAction.AI_ACTION,
            ai_action=action,
            options=_analysis_options(arguments),
        )

    return shape


_DOC_TYPE_ACTIONS = {
    "single-file-docs": AiAction.SINGLE_FILE_DOCS,
    "multi-file-docs": AiAction.MULTI_FILE_DOCS,
    "api-reference": AiAction.MULTI_FILE_DOCS,
}


def _generate_docs(arguments: Mapping[str, Any]) -> StructuredRequest:
    action = _DOC_TYPE_ACTIONS[arguments.get("doc_type", "single-file-docs")]
    return _ai_action(action)(arguments)


def _generic_analyze(arguments: Mapping[str, Any]) -> StructuredRequest:
    return StructuredRequest(
        target=arguments["target_path"],
        action=DistillAction.AI_ACTION,
        ai_action=AiAction(arguments["ai_action"]),
        options=_direct_options(arguments, ai_query=arguments.get("user_query")),
    )


# -- catalog ------------------------------------------------------------------

_AI_AGENT_NOTE = (
    "The response includes the file path - AI agents should read this file and follow "
    "its instructions."
)

CORE_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="distill_file",
        title="Extract Code Structure from File",
        summary="Extract structure from single files",
        description=(
            "Extracts essential code structure from a single file. Returns clean, structured "
            "code signatures optimized for AI context windows; language is detected "
            "automatically and implementation details are removed unless requested."
        ),
        category=ToolCategory.CORE,
        params=(_path("file_path", "Path to the file to distill"), *_DISTILL_CONTENT, _OUTPUT_FORMAT),
        shape=_distill("file_path"),
    ),
    ToolSpec(
        name="distill_directory",
        title="Extract Code Structure from Directory",
        summary="Extract structure from directories",
        description=(
            "Extracts essential code structure from an entire directory across all supported "
            "languages. Supports filtering by visibility level, file pattern, and content type."
        ),
        category=ToolCategory.CORE,
        params=(
            _path("directory_path", "Path to the directory to distill"),
            _flag("recursive", "Process subdirectories recursively (default: true)"),
            *_DISTILL_CONTENT,
            *_PATTERNS,
            _OUTPUT_FORMAT,
        ),
        shape=_distill("directory_path"),
    ),
    ToolSpec(
        name="distill_with_dependencies",
        title="Dependency-Aware Code Distillation",
        summary="Dependency-aware distillation with call graph analysis",
        description=(
            "Traces function and method calls from the target file across files and returns "
            "distilled code of only the relevant classes and methods, up to the given depth."
        ),
        category=ToolCategory.CORE,
        params=(
            _path("file_path", "Target file to analyze"),
            ToolParam(
                "max_depth",
                ParamKind.INTEGER,
                "Maximum depth to follow dependencies (default: 2)",
                default=2,
            ),
            *_DISTILL_CONTENT,
            _OUTPUT_FORMAT,
        ),
        shape=_distill_with_dependencies,
    ),
)

SPECIALIZED_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="aid_hunt_bugs",
        title="Hunt for Bugs and Quality Issues",
        summary="Systematic bug detection",
        description=(
            "Generates a bug hunting prompt with distilled code so an AI agent can look for "
            f"logical errors, race conditions, and quality issues. {_AI_AGENT_NOTE}"
        ),
        category=ToolCategory.SPECIALIZED,
        params=(
            _path("target_path", "Path to file or directory to analyze for bugs"),
            _text("focus_area", "Specific area to focus on (e.g., 'concurrency', 'error handling')"),
            _all_visibility(),
            *_PATTERNS,
        ),
        shape=_ai_action(AiAction.BUG_HUNTING),
        render=prompt_file_response(
            label="Bug Analysis Prompt",
            headline="Bug hunting prompt generated successfully!",
            file_caption="Prompt file",
            instructions=(
                "AI agents should read this file and follow the instructions to perform bug analysis."
            ),
            focus_argument="focus_area",
        ),
    ),
    ToolSpec(
        name="aid_suggest_refactoring",
        title="Suggest Code Refactoring Opportunities",
        summary="Code improvement suggestions",
        description=(
            "Generates a refactoring analysis prompt with distilled code so an AI agent can "
            f"suggest concrete before/after improvements. {_AI_AGENT_NOTE}"
        ),
        category=ToolCategory.SPECIALIZED,
        params=(
            _path("target_path", "Path to file or directory to analyze"),
            _text(
                "refactoring_goal",
                "Goal of refactoring (e.g., 'improve readability', 'reduce complexity')",
                required=True,
            ),
            _implementation(),
            *_PATTERNS,
        ),
        shape=_ai_action(AiAction.REFACTORING_SUGGESTION),
        render=prompt_file_response(
            label="Refactoring Analysis Prompt",
            headline=lambda arguments: (
                f'Refactoring prompt generated for goal: "{arguments.get("refactoring_goal", "")}"'
            ),
            file_caption="Prompt file",
            instructions=(
                "AI agents should read this file and follow the instructions to provide "
                "refactoring suggestions."
            ),
        ),
    ),
    ToolSpec(
        name="aid_generate_diagram",
        title="Generate Architecture Diagrams",
        summary="Architecture visualization",
        description=(
            "Generates a diagram creation prompt with distilled code so an AI agent can draw "
            f"flowcharts, sequence, class and architecture diagrams in Mermaid. {_AI_AGENT_NOTE}"
        ),
        category=ToolCategory.SPECIALIZED,
        params=(
            _path("target_path", "Path to file or directory to visualize"),
            _text("diagram_focus", "Specific diagram focus (e.g., 'data flow', 'class hierarchy')"),
            *_PATTERNS,
        ),
        shape=_ai_action(AiAction.DIAGRAMS),
        render=prompt_file_response(
            label="Diagram Generation Prompt",
            headline="Diagram generation prompt created!",
            file_caption="Diagram file",
            instructions=(
                "The file contains prompts for generating 10 different architectural diagrams "
                "in Mermaid format."
            ),
            focus_argument="diagram_focus",
        ),
    ),
    ToolSpec(
        name="aid_analyze_security",
        title="Perform Security Analysis",
        summary="Security vulnerability detection",
        description=(
            "Generates a security audit prompt with distilled code, focused on the OWASP Top 10, "
            f"so an AI agent can find vulnerabilities and suggest remediation. {_AI_AGENT_NOTE}"
        ),
        category=ToolCategory.SPECIALIZED,
        params=(
            _path("target_path", "Path to file or directory to analyze"),
            _text("security_focus", "Specific security concern (e.g., 'SQL injection', 'XSS')"),
            _all_visibility(),
            _implementation(),
            *_PATTERNS,
        ),
        shape=_ai_action(AiAction.SECURITY_ANALYSIS),
        render=prompt_file_response(
            label="Security Analysis Prompt",
            headline="Security analysis prompt generated!",
            file_caption="Prompt file",
            instructions=(
                "AI agents should read this file and follow the instructions to perform "
                "security analysis with OWASP Top 10 focus."
            ),
            focus_argument="security_focus",
        ),
    ),
    ToolSpec(
        name="aid_generate_docs",
        title="Generate Documentation",
        summary="Documentation generation",
        description=(
            "Generates documentation prompts with distilled code so an AI agent can write API "
            f"references, usage examples, and developer guides. {_AI_AGENT_NOTE}"
        ),
        category=ToolCategory.SPECIALIZED,
        params=(
            _path("target_path", "Path to file or directory to document"),
            ToolParam(
                "doc_type",
                ParamKind.STRING,
                "Type of documentation to generate (default: single-file-docs)",
                choices=tuple(_DOC_TYPE_ACTIONS),
            ),
            _text("audience", "Target audience (e.g., 'developers', 'api-users')"),
            *_PATTERNS,
        ),
        shape=_generate_docs,
        render=docs_response,
    ),
)

AI_WORKFLOW_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="aid_deep_file_analysis",
        title="Deep File-by-File Analysis Workflow",
        summary="File-by-file deep analysis",
        description=(
            "Generates a task list and prompts for systematic file-by-file review across "
            "security, performance, maintainability and readability."
        ),
        category=ToolCategory.AI_WORKFLOWS,
        params=(_path("target_path", "Path to analyze"), _all_visibility(), _implementation(), *_PATTERNS),
        shape=_ai_action(AiAction.DEEP_FILE_TO_FILE_ANALYSIS),
        render=wrapped_response(
            headline="Deep file-by-file analysis workflow generated!",
            footer=(
                "💡 AI agents should read the Task List file and follow all instructions to "
                "systematically analyze each file."
            ),
        ),
    ),
    ToolSpec(
        name="aid_multi_file_docs",
        title="Multi-File Documentation Workflow",
        summary="Multi-file documentation",
        description="Generates a workflow for interconnected documentation across multiple files.",
        category=ToolCategory.AI_WORKFLOWS,
        params=(_path("target_path", "Path to document"), *_PATTERNS),
        shape=_ai_action(AiAction.MULTI_FILE_DOCS),
        render=wrapped_response(
            headline="Multi-file documentation workflow generated!",
            footer=(
                "📚 The workflow includes prompts for creating interconnected documentation "
                "with proper cross-references."
            ),
        ),
    ),
    ToolSpec(
        name="aid_complex_analysis",
        title="Complex Codebase Analysis",
        summary="Enterprise-grade analysis",
        description="Generates an architecture-level analysis prompt for a whole codebase.",
        category=ToolCategory.AI_WORKFLOWS,
        params=(_path("target_path", "Path to analyze"), _all_visibility(), _implementation(), *_PATTERNS),
        shape=_ai_action(AiAction.COMPLEX_CODEBASE_ANALYSIS),
        render=wrapped_response(
            headline="Complex codebase analysis prompt generated!",
            footer=(
                "🏗️ The prompt includes guidance for creating architecture diagrams and "
                "strategic recommendations."
            ),
        ),
    ),
    ToolSpec(
        name="aid_performance_analysis",
        title="Performance Analysis",
        summary="Performance optimization",
        description="Generates a prompt for finding bottlenecks and optimization opportunities.",
        category=ToolCategory.AI_WORKFLOWS,
        params=(_path("target_path", "Path to analyze"), _implementation(), *_PATTERNS),
        shape=_ai_action(AiAction.PERFORMANCE_ANALYSIS),
        render=wrapped_response(
            headline="Performance analysis prompt generated!",
            footer="⚡ The analysis focuses on identifying bottlenecks and optimization opportunities.",
        ),
    ),
    ToolSpec(
        name="aid_best_practices",
        title="Best Practices Analysis",
        summary="Code quality assessment",
        description="Generates a prompt reviewing code quality, design patterns, and clean code.",
        category=ToolCategory.AI_WORKFLOWS,
        params=(_path("target_path", "Path to analyze"), _all_visibility(), *_PATTERNS),
        shape=_ai_action(AiAction.BEST_PRACTICES_ANALYSIS),
        render=wrapped_response(
            headline="Best practices analysis prompt generated!",
            footer="✨ The analysis covers code quality, design patterns, and clean code principles.",
        ),
    ),
)

LEGACY_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="aid_analyze",
        title="Core AI Prompt Generation Engine",
        summary="Generic AI action interface",
        description=(
            "Runs any aid AI action directly. Prefer the specialized tools when one fits; use "
            "this one for custom flows or an extra user query."
        ),
        category=ToolCategory.LEGACY,
        params=(
            ToolParam(
                "ai_action",
                ParamKind.STRING,
                "AI action to perform",
                required=True,
                choices=tuple(action.value for action in AiAction),
            ),
            _path("target_path", "Path to analyze"),
            _text("user_query", "Additional context or specific query"),
            _OUTPUT_FORMAT,
            *_DISTILL_CONTENT,
            *_PATTERNS,
        ),
        shape=_generic_analyze,
    ),
)

META_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="list_files",
        title="List Project Files",
        summary="File exploration",
        description="Lists project files with language detection and statistics.",
        category=ToolCategory.META,
        params=(
            _text("path", "Path to list (default: current directory)"),
            _text("pattern", "File pattern to match"),
            _flag("recursive", "List recursively (default: true)", default=True),
        ),
    ),
    ToolSpec(
        name="get_capabilities",
        title="Get AI Distiller Capabilities",
        summary="This tool",
        description=(
            "Returns information about AI Distiller capabilities, supported languages, and "
            "available tools."
        ),
        category=ToolCategory.META,
    ),
)

DEFAULT_CATALOG = ToolCatalog(
    tools=(*CORE_TOOLS, *SPECIALIZED_TOOLS, *AI_WORKFLOW_TOOLS, *LEGACY_TOOLS, *META_TOOLS),
)
