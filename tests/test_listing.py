from __future__ import annotations

from pathlib import Path

import allure
import pytest

from distiller_mcp.tools.listing import detect_language, list_files

pytestmark = [
    allure.epic("Tool Catalog"),
    allure.feature("Local Tools"),
]


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "core.py").write_text("x = 1\n", "utf-8")
    (tmp_path / "pkg" / "types.d.ts").write_text("export {}\n", "utf-8")
    (tmp_path / "main.go").write_text("package main\n", "utf-8")
    (tmp_path / "README").write_text("hello\n", "utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("[core]\n", "utf-8")
    return tmp_path


@pytest.mark.parametrize(
    ("name", "language"),
    [
        ("app.py", "python"),
        ("index.D.TS", "typescript"),
        ("view.tsx", "typescript"),
        ("lib.rs", "rust"),
        ("header.hpp", "cpp"),
        ("Makefile", None),
    ],
)
def test_detect_language(name: str, language: str | None) -> None:
    assert detect_language(name) == language


def test_list_files_skips_dot_directories_and_sorts(project: Path) -> None:
    listing = list_files(project)

    assert [entry.path for entry in listing.files] == [
        "README",
        "main.go",
        "pkg/core.py",
        "pkg/types.d.ts",
    ]
    assert listing.file_count == 4
    assert listing.languages == {"go": 1, "python": 1, "typescript": 1, "unknown": 1}
    assert listing.total_size == sum(entry.size for entry in listing.files)


def test_list_files_non_recursive(project: Path) -> None:
    listing = list_files(project, recursive=False)

    assert [entry.path for entry in listing.files] == ["README", "main.go"]


def test_list_files_pattern_matches_relative_paths(project: Path) -> None:
    listing = list_files(project, pattern="*.py")

    assert [entry.path for entry in listing.files] == ["pkg/core.py"]
    assert listing.files[0].extension == ".py"


def test_relative_path_resolves_against_base(project: Path) -> None:
    listing = list_files("pkg", base=project)

    assert listing.path == str((project / "pkg").resolve())
    assert [entry.path for entry in listing.files] == ["core.py", "types.d.ts"]


def test_missing_directory_yields_empty_listing(tmp_path: Path) -> None:
    listing = list_files(tmp_path / "absent")

    assert listing.file_count == 0
    assert listing.to_dict()["files"] == []
