"""Filesystem layout helpers for grm."""

from __future__ import annotations

import contextlib
from pathlib import Path, PurePath

from .exceptions import MissingDomainError, UnmanagedRepositoryError
from .models import CanonicalUrl

WORKTREES_DIR = "worktrees"


def local_path(root: Path, url: CanonicalUrl) -> Path:
    """Return ``root/<domain>/<url path>`` for ``url``."""

    domain = url.domain
    if not domain:
        raise MissingDomainError(f"`{url}` does not have a domain name")
    return root / domain / url.path.lstrip("/")


def worktree_root(root: Path) -> Path:
    return root / WORKTREES_DIR


def worktree_path(root: Path, main_workdir: Path, branch: str) -> Path:
    """Mirror a managed repository into the worktrees tree for ``branch``.

    ``main_workdir`` must be the main working copy, not a linked worktree.
    """

    relative = _relative_to_root(main_workdir, root)
    if relative is None:
        raise UnmanagedRepositoryError(
            f"Cannot create a worktree of an unmanaged repository: {display_path(main_workdir)}"
        )
    return worktree_root(root) / relative / branch


def worktree_name(branch: str) -> str:
    """Single path segment git uses to name the linked worktree."""

    return branch.replace("/", "__")


def display_path(path: PurePath | str) -> str:
    return str(path).replace("\\", "/")


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def remove_if_empty(path: Path) -> None:
    with contextlib.suppress(OSError):
        path.rmdir()


def _relative_to_root(path: Path, root: Path) -> Path | None:
    # git reports real paths, while the configured root may go through a symlink
    for base in dict.fromkeys((root, root.expanduser().resolve())):
        try:
            return path.relative_to(base)
        except ValueError:
            continue
    return None


__all__ = [
    "WORKTREES_DIR",
    "local_path",
    "worktree_root",
    "worktree_path",
    "worktree_name",
    "display_path",
    "ensure_directory",
    "remove_if_empty",
]
