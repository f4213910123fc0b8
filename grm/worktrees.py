"""High-level orchestration for linked worktrees of managed repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from . import git
from .config import Runtime
from .exceptions import NoMatchingBranchError, ValidationError
from .fs import display_path, ensure_directory, remove_if_empty, worktree_name, worktree_path
from .models import WorktreePlan

logger = logging.getLogger(__name__)


def select_branch(branches: Iterable[str], name: str) -> str:
    """Pick the branch whose name contains ``name``.

    Candidates are ordered by segment count, then UTF-8 byte length, and the
    last one wins, so ``feature/api/v2`` is preferred
    over ``api`` for the query ``api``.
    """

    matches = [branch for branch in branches if name in branch]
    if not matches:
        raise NoMatchingBranchError(f"'{name}' does not match with any branches")
    matches.sort(key=lambda branch: (len(branch.split("/")), len(branch.encode())))
    return matches[-1]


def plan_worktree(runtime: Runtime, name: str, *, raw: bool = False) -> WorktreePlan:
    repo = runtime.current_repo()
    branches = git.local_branches(repo)
    if raw:
        branch = name.strip()
        if not branch:
            raise ValidationError("Branch name cannot be empty.")
        create = branch not in branches
    else:
        branch = select_branch(branches, name)
        create = False
    main_workdir = git.main_worktree(repo)
    return WorktreePlan(
        branch=branch,
        path=worktree_path(runtime.root_dir, main_workdir, branch),
        name=worktree_name(branch),
        create_branch=create,
    )


def create_worktree(runtime: Runtime, plan: WorktreePlan) -> Path:
    """Add the planned worktree, registering it with git under ``plan.name``."""

    repo = runtime.current_repo()
    target = plan.path
    remove_if_empty(target)
    if target.exists():
        raise ValidationError(f"Worktree path already exists: {display_path(target)}")
    ensure_directory(target.parent)
    if target.name == plan.name:
        git.worktree_add(repo, target, plan.branch, create=plan.create_branch)
        return target
    # git names the worktree after the directory, so add it under its name first
    staging = target.parent / plan.name
    if staging.exists():
        raise ValidationError(f"Worktree path already exists: {display_path(staging)}")
    logger.debug("Adding worktree at %s before moving it to %s", staging, target)
    git.worktree_add(repo, staging, plan.branch, create=plan.create_branch)
    git.worktree_move(repo, staging, target)
    return target


__all__ = ["select_branch", "plan_worktree", "create_worktree"]
