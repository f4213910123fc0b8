"""Shared value types used throughout the CLI."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import SplitResult, urlsplit

from .exceptions import InvalidReferenceError

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


class Scheme(str, Enum):
    """Transport used for inferred origin URLs."""

    HTTPS = "https"
    SSH = "ssh"

    @classmethod
    def from_flag(cls, ssh: bool) -> "Scheme":
        return cls.SSH if ssh else cls.HTTPS


@dataclass(frozen=True)
class CanonicalUrl:
    """A parsed remote URL with an explicit scheme."""

    parts: SplitResult

    @classmethod
    def parse(cls, text: str) -> "CanonicalUrl":
        """Parse ``text`` or raise :class:`InvalidReferenceError`.

        Whitespace, a missing or malformed scheme, an invalid port and ``.`` or
        ``..`` path segments are all rejected so that the URL can be mapped to a
        directory without escaping the root.
        """

        if not text or any(char.isspace() for char in text):
            raise InvalidReferenceError(f"`{text}` is not a valid URL: contains whitespace")
        try:
            parts = urlsplit(text)
            parts.port  # validates the port component
        except ValueError as exc:
            raise InvalidReferenceError(f"`{text}` is not a valid URL: {exc}") from exc
        if not parts.scheme or not _SCHEME_PATTERN.match(parts.scheme):
            raise InvalidReferenceError(f"`{text}` is not a valid URL: missing scheme")
        if any(segment in (".", "..") for segment in parts.path.split("/")):
            raise InvalidReferenceError(f"`{text}` is not a valid URL: relative path segment")
        return cls(parts=parts)

    @property
    def scheme(self) -> str:
        return self.parts.scheme

    @property
    def username(self) -> str | None:
        return self.parts.username

    @property
    def path(self) -> str:
        return self.parts.path

    @property
    def domain(self) -> str | None:
        """Host name of the URL, or ``None`` for IP literals and host-less URLs.

        Hosts that would not map to a single directory below the root, such as
        ``..``, are treated as missing.
        """

        host = self.parts.hostname
        if not host or host in (".", "..") or "/" in host or "\\" in host:
            return None
        try:
            ipaddress.ip_address(host)
        except ValueError:
            return host
        return None

    def __str__(self) -> str:
        return self.parts.geturl()


@dataclass(frozen=True)
class WorktreeEntry:
    """A single worktree reported by ``git worktree list``."""

    path: Path
    branch: str | None
    is_bare: bool = False


@dataclass(frozen=True)
class WorktreePlan:
    """Where a linked worktree goes and how git should name it."""

    branch: str
    path: Path
    name: str
    create_branch: bool = False


__all__ = [
    "Scheme",
    "CanonicalUrl",
    "WorktreeEntry",
    "WorktreePlan",
]
