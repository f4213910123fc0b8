"""Infer canonical origin URLs from abbreviated repository references."""

from __future__ import annotations

from .models import CanonicalUrl, Scheme

DEFAULT_HOST = "github.com"


def normalize(reference: str, username: str, scheme: Scheme) -> CanonicalUrl:
    """Qualify ``reference`` until it is a full URL and parse it.

    ``bar`` gains the user name, ``user/bar`` gains the default host and
    ``host/user/bar`` gains a scheme. Anything with three or more separators is
    parsed as-is. The separator count is taken from the current string on every
    call, so the scheme prefix itself pushes the next call into the terminal case.
    """

    separators = reference.count("/")
    if separators == 0:
        return normalize(f"{username}/{reference}", username, scheme)
    if separators == 1:
        return normalize(f"{DEFAULT_HOST}/{reference}", username, scheme)
    if separators == 2:
        return normalize(_with_scheme(reference, scheme), username, scheme)
    return CanonicalUrl.parse(reference)


def _with_scheme(reference: str, scheme: Scheme) -> str:
    if scheme is Scheme.HTTPS:
        return f"https://{reference}"
    if "@" in reference:
        return f"ssh://{reference}"
    return f"ssh://git@{reference}"


__all__ = ["DEFAULT_HOST", "normalize"]
