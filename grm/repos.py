"""Enumerate and create repositories under the managed root."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from . import git
from .config import Runtime
from .exceptions import ValidationError
from .fs import display_path, local_path
from .models import CanonicalUrl

logger = logging.getLogger(__name__)


def list_managed(root: Path, absolute: bool = False) -> Iterator[Path]:
    """Yield every repository below ``root`` without walking into repositories.

    Each call performs a fresh walk. Symlinked directories are not followed.
    """

    if not root.is_dir():
        return
    for path in _walk(root):
        yield path if absolute else path.relative_to(root)


def _walk(directory: Path) -> Iterator[Path]:
    try:
        children = sorted(directory.iterdir())
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return
    for child in children:
        if child.is_symlink() or not child.is_dir():
            continue
        if git.is_repository(child):
            yield child
            continue
        yield from _walk(child)


def local_path_for(runtime: Runtime, url: CanonicalUrl) -> Path:
    return local_path(runtime.root_dir, url)


def clone(runtime: Runtime, url: CanonicalUrl, depth: int = 0) -> Path:
    target = local_path_for(runtime, url)
    git.clone(str(url), target, depth=depth)
    return target


def init(runtime: Runtime, url: CanonicalUrl) -> Path:
    """Create an empty repository for ``url`` with ``origin`` configured.

    The default branch is set up to track ``origin`` so the first push needs no
    upstream flag. Nothing is rolled back if a later step fails.
    """

    target = local_path_for(runtime, url)
    if git.is_repository(target):
        raise ValidationError(f"Repository already exists: {display_path(target)}")
    git.init(target)
    git.add_remote(target, "origin", str(url))
    branch = runtime.default_branch(target)
    git.set_config(target, f"branch.{branch}.remote", "origin")
    git.set_config(target, f"branch.{branch}.merge", f"refs/heads/{branch}")
    return target


__all__ = ["list_managed", "local_path_for", "clone", "init"]
