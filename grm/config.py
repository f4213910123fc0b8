"""Resolve the root directory, user name and other settings from git config."""

from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from . import git
from .exceptions import ConfigResolutionError, NoCurrentRepositoryError

logger = logging.getLogger(__name__)

APP_NAME = "grm"
ROOT_KEY = f"{APP_NAME}.root"
USER_NAME_KEY = "user.name"
DEFAULT_BRANCH_KEY = "init.defaultBranch"
FALLBACK_DEFAULT_BRANCH = "master"


@dataclass
class Runtime:
    """Per-invocation settings; each value is resolved at most once."""

    repository: Path | None = None
    cwd: Path | None = field(default=None, repr=False)

    @classmethod
    def open_current(cls, cwd: Path | None = None) -> "Runtime":
        return cls(repository=git.discover_repository(cwd), cwd=cwd)

    @classmethod
    def open_default(cls, cwd: Path | None = None) -> "Runtime":
        return cls(repository=None, cwd=cwd)

    @property
    def config_dir(self) -> Path | None:
        return self.repository or self.cwd

    def current_repo(self) -> Path:
        if self.repository is None:
            raise NoCurrentRepositoryError("Current directory is not a git repository.")
        return self.repository

    @cached_property
    def root_dir(self) -> Path:
        configured = git.get_config(ROOT_KEY, cwd=self.config_dir, path=True)
        if configured:
            return Path(configured).expanduser()
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise ConfigResolutionError(
                f"Failed to get root directory. Set it with: git config --global {ROOT_KEY} <path>"
            ) from exc
        logger.debug("%s is not set, falling back to %s", ROOT_KEY, home / APP_NAME)
        return home / APP_NAME

    @cached_property
    def user_name(self) -> str:
        configured = git.get_config(USER_NAME_KEY, cwd=self.config_dir)
        if configured:
            return configured
        try:
            name = getpass.getuser()
        except (KeyError, OSError) as exc:
            raise ConfigResolutionError(
                f"Failed to get user name. Set it with: git config --global {USER_NAME_KEY} <name>"
            ) from exc
        if not name:
            raise ConfigResolutionError("Failed to get user name.")
        logger.debug("%s is not set, falling back to login name %s", USER_NAME_KEY, name)
        return name

    def default_branch(self, repo: Path) -> str:
        return git.get_config(DEFAULT_BRANCH_KEY, cwd=repo) or FALLBACK_DEFAULT_BRANCH


__all__ = [
    "APP_NAME",
    "ROOT_KEY",
    "USER_NAME_KEY",
    "DEFAULT_BRANCH_KEY",
    "FALLBACK_DEFAULT_BRANCH",
    "Runtime",
]
