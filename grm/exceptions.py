"""Custom exception hierarchy for grm."""

from __future__ import annotations


class GrmError(RuntimeError):
    """Base error for the CLI."""


class InvalidReferenceError(GrmError):
    """Raised when a fully qualified repository reference is not a valid URL."""


class MissingDomainError(GrmError):
    """Raised when a URL has no domain name to place it under the root."""


class UnmanagedRepositoryError(GrmError):
    """Raised when a worktree is requested for a repository outside the root."""


class NoMatchingBranchError(GrmError):
    """Raised when no local branch contains the requested name."""


class NoCurrentRepositoryError(GrmError):
    """Raised when a command needs a repository but none was discovered."""


class ConfigResolutionError(GrmError):
    """Raised when neither git config nor the fallbacks yield a value."""


class ValidationError(GrmError):
    """Raised when user input or the target location is invalid."""


class GitCommandError(GrmError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


__all__ = [
    "GrmError",
    "InvalidReferenceError",
    "MissingDomainError",
    "UnmanagedRepositoryError",
    "NoMatchingBranchError",
    "NoCurrentRepositoryError",
    "ConfigResolutionError",
    "ValidationError",
    "GitCommandError",
]
