"""Release tag arithmetic — parse ``v1.2.3`` style tags and compute the next one."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class BumpKind(str, Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def parse_version_tag(tag: str, prefix: str = "v") -> tuple[int, int, int] | None:
    """Return ``(major, minor, patch)`` for a release tag, else None.

    Pre-release and build suffixes are not release tags and yield None.
    """
    if prefix and not tag.startswith(prefix):
        return None
    match = _VERSION_RE.match(tag[len(prefix):])
    if match is None:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def format_version_tag(version: tuple[int, int, int], prefix: str = "v") -> str:
    return f"{prefix}{version[0]}.{version[1]}.{version[2]}"


def latest_version_tag(tags: Iterable[str], prefix: str = "v") -> str | None:
    """The highest release tag by version order, ignoring non-release tags."""
    parsed: list[tuple[tuple[int, int, int], str]] = []
    for tag in tags:
        version = parse_version_tag(tag, prefix)
        if version is not None:
            parsed.append((version, tag))
    if not parsed:
        return None
    return max(parsed)[1]


def next_tag(
    latest: str | None,
    bump: BumpKind = BumpKind.PATCH,
    *,
    prefix: str = "v",
    initial: str = "0.1.0",
) -> str:
    """Compute the tag that follows ``latest``.

    With no previous release the initial version is returned. A ``latest``
    that is not a release tag raises ``ValueError``.
    """
    if latest is None:
        return f"{prefix}{initial}"
    version = parse_version_tag(latest, prefix)
    if version is None:
        raise ValueError(f"Not a release tag: {latest!r}")
    major, minor, patch = version
    if bump == BumpKind.MAJOR:
        return format_version_tag((major + 1, 0, 0), prefix)
    if bump == BumpKind.MINOR:
        return format_version_tag((major, minor + 1, 0), prefix)
    return format_version_tag((major, minor, patch + 1), prefix)
