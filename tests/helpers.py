"""Shared fixtures for tests that drive a real git binary."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from grm.config import Runtime

HAS_GIT = shutil.which("git") is not None


def git(*args: str, cwd: Path) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def make_repo(path: Path, *branches: str) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git("init", "-q", cwd=path)
    git("commit", "-q", "--allow-empty", "-m", "initial", cwd=path)
    for branch in branches:
        git("branch", branch, cwd=path)
    return path


def make_runtime(root: Path, repository: Path | None = None, user_name: str = "foo") -> Runtime:
    runtime = Runtime(repository=repository)
    runtime.root_dir = root
    runtime.user_name = user_name
    return runtime
