"""Shared test fixtures."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

# Behavior is picked by the basename of the first argument (the target path).
_FAKE_AID_SCRIPT = """
import json
import os
import sys
import time

args = sys.argv[1:]
target = args[0] if args else ""
name = target.replace("\\\\", "/").rsplit("/", 1)[-1]
log_path = os.environ.get("FAKE_AID_LOG")


def out(text):
    sys.stdout.buffer.write(text.encode("utf-8"))


def err(text):
    sys.stderr.buffer.write(text.encode("utf-8"))


def log(event):
    if log_path:
        with open(log_path, "a", encoding="utf-8") as handle:
            handle.write(f"{event} {name}\\n")


log("start")
if name == "note":
    err("note")
    out("RESULT")
elif name == "fail":
    err("bad file")
    log("end")
    raise SystemExit(2)
elif name == "silent-fail":
    log("end")
    raise SystemExit(3)
elif name == "empty":
    pass
elif name == "cwd":
    out(os.getcwd())
elif name == "echo":
    out(json.dumps(args))
elif name == "sleep":
    time.sleep(30)
elif name.startswith("slow"):
    time.sleep(float(os.environ.get("FAKE_AID_DELAY", "0.2")))
    out(name)
elif name == "prompt":
    out("📋 Bug Analysis Prompt: .aid/BUG-HUNTING.2025-01-01.md\\nPrompt written.")
else:
    out("RESULT")
log("end")
"""


def write_fake_aid(bin_dir: Path) -> Path:
    """Create an ``aid`` launcher that runs the fake implementation."""

    bin_dir.mkdir(parents=True, exist_ok=True)
    implementation = bin_dir / "aid_impl.py"
    implementation.write_text(_FAKE_AID_SCRIPT.strip() + "\n", "utf-8")

    if os.name == "nt":
        launcher = bin_dir / "aid.cmd"
        launcher.write_text(
            f'@echo off\r\n"{sys.executable}" "{implementation}" %*\r\n',
            "utf-8",
        )
        return launcher

    launcher = bin_dir / "aid"
    launcher.write_text(
        f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
        "utf-8",
    )
    launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)
    return launcher


@pytest.fixture()
def fake_aid(tmp_path: Path) -> Path:
    return write_fake_aid(tmp_path / "bin")


@pytest.fixture()
def aid_env(monkeypatch, fake_aid: Path, tmp_path: Path) -> Path:
    """Point settings at the fake binary and a scratch project root."""

    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.setenv("AID_BINARY", str(fake_aid))
    monkeypatch.setenv("AID_ROOT", str(root))
    monkeypatch.setenv("AID_PROJECT_ROOT", str(root))
    for name in ("AID_MCP_TIMEOUT_SECONDS", "AID_MCP_DEBUG", "DEBUG", "AID_MCP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return root
