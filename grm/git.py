"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError
from .models import WorktreeEntry

logger = logging.getLogger(__name__)


def run_git(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    check: bool = True,
    capture: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure.

    With ``capture=False`` the command inherits the terminal so that progress
    output (clone) reaches the user directly.
    """

    command = ["git", *args]
    logger.debug("Running command: %s (cwd=%s)", " ".join(command), cwd or ".")
    result = subprocess.run(
        command,
        cwd=str(cwd) if cwd else None,
        env=env,
        text=True,
        capture_output=capture,
        check=False,
    )
    if check and result.returncode != 0:
        raise GitCommandError(command, result.returncode, stdout=result.stdout, stderr=result.stderr)
    return result


def is_repository(path: Path) -> bool:
    """Return whether ``path`` itself is a repository, without searching parents."""

    if not (path / ".git").exists() and not (path / "HEAD").is_file():
        return False
    env = dict(os.environ)
    env["GIT_CEILING_DIRECTORIES"] = str(path.parent)
    env.pop("GIT_DIR", None)
    env.pop("GIT_WORK_TREE", None)
    result = run_git(["rev-parse", "--git-dir"], cwd=path, env=env, check=False)
    return result.returncode == 0


def discover_repository(cwd: Path | None = None) -> Path | None:
    """Return the top-level directory (or git dir when bare) containing ``cwd``."""

    result = run_git(["rev-parse", "--show-toplevel"], cwd=cwd, check=False)
    toplevel = result.stdout.strip()
    if result.returncode == 0 and toplevel:
        return Path(toplevel)
    result = run_git(["rev-parse", "--absolute-git-dir"], cwd=cwd, check=False)
    if result.returncode == 0:
        return Path(result.stdout.strip())
    return None


def get_config(key: str, *, cwd: Path | None = None, path: bool = False) -> str | None:
    args = ["config"]
    if path:
        args.append("--path")
    args.extend(["--get", key])
    result = run_git(args, cwd=cwd, check=False)
    value = result.stdout.strip()
    if result.returncode != 0 or not value:
        return None
    return value


def set_config(repo: Path, key: str, value: str) -> None:
    run_git(["config", key, value], cwd=repo)


def clone(url: str, target: Path, depth: int = 0) -> None:
    args = ["clone"]
    if depth > 0:
        args.extend(["--depth", str(depth)])
    args.extend([url, str(target)])
    run_git(args, capture=False)


def init(target: Path) -> None:
    run_git(["init", str(target)])


def add_remote(repo: Path, name: str, url: str) -> None:
    run_git(["remote", "add", name, url], cwd=repo)


def local_branches(repo: Path) -> list[str]:
    # %(refname:short) turns into "heads/<name>" when a tag has the same name
    proc = run_git(["for-each-ref", "--format=%(refname:lstrip=2)", "refs/heads"], cwd=repo)
    return [line.strip() for line in proc.stdout.splitlines() if line.strip()]


def worktree_list(repo: Path) -> list[WorktreeEntry]:
    proc = run_git(["worktree", "list", "--porcelain"], cwd=repo)
    items: list[WorktreeEntry] = []
    current: dict | None = None
    for raw_line in proc.stdout.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        key, _, value = line.partition(" ")
        if key == "worktree":
            if current:
                items.append(WorktreeEntry(**current))
            current = {"path": Path(value.strip()), "branch": None}
        elif not current:
            continue
        elif key == "branch":
            branch = value.strip()
            if branch.startswith("refs/heads/"):
                branch = branch.split("/", 2)[-1]
            current["branch"] = branch
        elif key == "bare":
            current["is_bare"] = True
    if current:
        items.append(WorktreeEntry(**current))
    return items


def main_worktree(repo: Path) -> Path:
    """Return the main working copy of ``repo``, even from a linked worktree.

    git always lists the main worktree (or the bare repository) first.
    """

    entries = worktree_list(repo)
    if not entries:
        return repo
    return entries[0].path


def worktree_add(repo: Path, target: Path, branch: str, *, create: bool = False) -> None:
    if create:
        run_git(["worktree", "add", "-b", branch, str(target)], cwd=repo)
    else:
        run_git(["worktree", "add", str(target), branch], cwd=repo)


def worktree_move(repo: Path, source: Path, target: Path) -> None:
    run_git(["worktree", "move", str(source), str(target)], cwd=repo)


__all__ = [
    "run_git",
    "is_repository",
    "discover_repository",
    "get_config",
    "set_config",
    "clone",
    "init",
    "add_remote",
    "local_branches",
    "worktree_list",
    "main_worktree",
    "worktree_add",
    "worktree_move",
]
