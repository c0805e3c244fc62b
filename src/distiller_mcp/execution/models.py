"""Typed request and outcome models for the execution pipeline."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from distiller_mcp.execution.errors import RequestValidationError


class OutputFormat(str, Enum):
    """Output formats understood by ``aid --format``."""

    TEXT = "text"
    MARKDOWN = "md"
    JSONL = "jsonl"
    JSON_STRUCTURED = "json-structured"
    XML = "xml"


class AiAction(str, Enum):
    """Prompt and workflow generators exposed by ``aid --ai-action``."""

    DEEP_FILE_TO_FILE_ANALYSIS = "flow-for-deep-file-to-file-analysis"
    MULTI_FILE_DOCS = "flow-for-multi-file-docs"
    REFACTORING_SUGGESTION = "prompt-for-refactoring-suggestion"
    COMPLEX_CODEBASE_ANALYSIS = "prompt-for-complex-codebase-analysis"
    SECURITY_ANALYSIS = "prompt-for-security-analysis"
    PERFORMANCE_ANALYSIS = "prompt-for-performance-analysis"
    BEST_PRACTICES_ANALYSIS = "prompt-for-best-practices-analysis"
    BUG_HUNTING = "prompt-for-bug-hunting"
    SINGLE_FILE_DOCS = "prompt-for-single-file-docs"
    DIAGRAMS = "prompt-for-diagrams"

    @property
    def is_workflow(self) -> bool:
        return self.value.startswith("flow-")


class DistillAction(str, Enum):
    """What the external tool is asked to do with the target."""

    DISTILL = "distill"
    DISTILL_WITH_DEPENDENCIES = "distill_with_dependencies"
    AI_ACTION = "ai_action"

    @property
    def emits_payload(self) -> bool:
        """Whether the action streams its result to stdout."""

        return self is not DistillAction.AI_ACTION


class JobStatus(str, Enum):
    """Lifecycle of one queued invocation."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in {JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELED}


@dataclass(frozen=True, slots=True)
class DistillOptions:
    """Closed option set; each field maps to at most one ``aid`` flag."""

    output_format: OutputFormat | None = None
    recursive: bool = True
    include_private: bool = False
    include_protected: bool = False
    include_internal: bool = False
    include_implementation: bool = False
    include_comments: bool = False
    include_fields: bool = True
    include_methods: bool = True
    include_patterns: str | None = None
    exclude_patterns: str | None = None
    max_depth: int | None = None
    ai_query: str | None = None

    def __post_init__(self) -> None:
        if self.output_format is not None and not isinstance(self.output_format, OutputFormat):
            object.__setattr__(self, "output_format", _coerce_enum(OutputFormat, self.output_format))
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise RequestValidationError(f"max_depth must be an integer: {self.max_depth!r}")
            if self.max_depth < 0:
                raise RequestValidationError(f"max_depth must be >= 0: {self.max_depth}")


@dataclass(frozen=True, slots=True)
class StructuredRequest:
    """One validated tool call, ready for argument construction."""

    target: str
    action: DistillAction = DistillAction.DISTILL
    ai_action: AiAction | None = None
    options: DistillOptions = field(default_factory=DistillOptions)

    def __post_init__(self) -> None:
        if not isinstance(self.target, str) or not self.target.strip():
            raise RequestValidationError("Target path is required.")
        if self.target.startswith("-"):
            raise RequestValidationError(
                f"Target path must not start with '-': {self.target!r}. Use ./{self.target} instead.",
            )
        if not isinstance(self.action, DistillAction):
            object.__setattr__(self, "action", _coerce_enum(DistillAction, self.action))
        if self.ai_action is not None and not isinstance(self.ai_action, AiAction):
            object.__setattr__(self, "ai_action", _coerce_enum(AiAction, self.ai_action))
        if self.action is DistillAction.AI_ACTION and self.ai_action is None:
            raise RequestValidationError("ai_action is required for AI action requests.")
        if self.action is not DistillAction.AI_ACTION and self.ai_action is not None:
            raise RequestValidationError(
                f"ai_action is only valid for AI action requests, not {self.action.value!r}.",
            )


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Exit status and both captured channels of one finished process."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(slots=True)
class QueuedJob:
    """One invocation tracked from submission to settlement."""

    job_id: int
    argv: tuple[str, ...]
    future: asyncio.Future[str]
    timeout_seconds: float | None = None
    status: JobStatus = JobStatus.PENDING
    submitted_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None


def _coerce_enum(enum_type: type[Enum], value: object) -> Enum:
    try:
        return enum_type(value)
    except ValueError as error:
        allowed = ", ".join(member.value for member in enum_type)
        raise RequestValidationError(
            f"Unsupported {enum_type.__name__} value {value!r}; expected one of: {allowed}",
        ) from error
