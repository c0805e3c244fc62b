"""Local project file listing with language detection."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".py": "python",
    ".pyw": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".rake": "ruby",
    ".gemspec": "ruby",
    ".java": "java",
    ".cs": "csharp",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".c": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".c++": "cpp",
    ".h": "cpp",
    ".hpp": "cpp",
    ".hh": "cpp",
    ".hxx": "cpp",
    ".h++": "cpp",
    ".php": "php",
    ".phtml": "php",
    ".php3": "php",
    ".php4": "php",
    ".php5": "php",
    ".php7": "php",
    ".phps": "php",
    ".inc": "php",
    ".swift": "swift",
}


@dataclass(slots=True)
class FileEntry:
    """One listed file."""

    path: str
    size: int
    modified: str
    language: str
    extension: str


@dataclass(slots=True)
class FileListing:
    """Listing summary returned to the agent."""

    path: str
    file_count: int
    total_size: int
    languages: dict[str, int]
    files: list[FileEntry]

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def detect_language(file_name: str) -> str | None:
    """Map a file name to a language by extension."""

    lowered = file_name.lower()
    if lowered.endswith(".d.ts"):
        return "typescript"
    return LANGUAGE_BY_EXTENSION.get(os.path.splitext(lowered)[1])


def list_files(
    path: str | Path | None = None,
    *,
    pattern: str | None = None,
    recursive: bool = True,
    base: Path | None = None,
) -> FileListing:
    """List files under ``path``; dot-directories and unreadable ones are skipped.

    Relative paths resolve against ``base`` (the configured root) when given.
    """

    base_path = Path(path) if path else Path(".")
    if not base_path.is_absolute() and base is not None:
        base_path = base / base_path
    base_path = base_path.resolve()

    entries: list[FileEntry] = []
    _scan(base_path, base_path, pattern=pattern, recursive=recursive, entries=entries)
    entries.sort(key=lambda entry: entry.path)

    languages = Counter(entry.language for entry in entries)
    return FileListing(
        path=str(base_path),
        file_count=len(entries),
        total_size=sum(entry.size for entry in entries),
        languages=dict(sorted(languages.items())),
        files=entries,
    )


def _scan(
    directory: Path,
    base_path: Path,
    *,
    pattern: str | None,
    recursive: bool,
    entries: list[FileEntry],
) -> None:
    try:
        items = list(os.scandir(directory))
    except OSError as error:
        logger.debug("Skipping unreadable directory %s: %s", directory, error)
        return

    for item in items:
        full_path = Path(item.path)
        if item.is_file():
            relative = full_path.relative_to(base_path).as_posix()
            if pattern and not fnmatch.fnmatchcase(relative, pattern):
                continue
            try:
                stats = item.stat()
            except OSError as error:
                logger.debug("Skipping unreadable file %s: %s", full_path, error)
                continue
            extension = os.path.splitext(item.name)[1].lower()
            entries.append(
                FileEntry(
                    path=relative,
                    size=stats.st_size,
                    modified=datetime.fromtimestamp(stats.st_mtime, tz=UTC).isoformat(),
                    language=detect_language(item.name) or "unknown",
                    extension=extension,
                ),
            )
        elif item.is_dir() and recursive and not item.name.startswith("."):
            _scan(full_path, base_path, pattern=pattern, recursive=recursive, entries=entries)
