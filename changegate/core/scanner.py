"""Enumerate a build output directory into a ``BuildArtifactSet``."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import ValidationError

from changegate.core.errors import ComparisonError
from changegate.core.hasher import file_sha256
from changegate.models.artifacts import ArtifactDigest, BuildArtifactSet

logger = logging.getLogger(__name__)


def normalize_identifier(path: Path, root: Path) -> str:
    """Relative POSIX path of ``path`` under ``root``."""
    return path.relative_to(root).as_posix()


def is_excluded(identifier: str, patterns: Iterable[str]) -> bool:
    """True if any glob matches the full identifier or its file name.

    Matching is case-sensitive so results do not depend on the host OS.
    """
    name = identifier.rsplit("/", 1)[-1]
    return any(
        fnmatch.fnmatchcase(identifier, pattern) or fnmatch.fnmatchcase(name, pattern)
        for pattern in patterns
    )


def iter_output_files(root: Path) -> Iterator[Path]:
    """Yield every regular file below ``root`` in sorted order."""
    for path in sorted(root.rglob("*")):
        if path.is_file():
            yield path


def scan_artifacts(root: Path, exclude_patterns: Iterable[str] = ()) -> BuildArtifactSet:
    """Digest every eligible file under ``root``.

    Raises ``ComparisonError`` when a file cannot be read or its name
    cannot be fingerprinted. An empty result is returned as-is; the
    caller decides whether that is fatal.
    """
    root = Path(root)
    patterns = tuple(exclude_patterns)
    entries: list[ArtifactDigest] = []
    skipped = 0

    for path in iter_output_files(root):
        identifier = normalize_identifier(path, root)
        if is_excluded(identifier, patterns):
            skipped += 1
            logger.debug("Excluded artifact %s", identifier)
            continue
        try:
            digest = file_sha256(path)
            size = path.stat().st_size
        except OSError as exc:
            raise ComparisonError(f"Cannot digest {identifier}: {exc}") from exc
        try:
            entries.append(
                ArtifactDigest(identifier=identifier, digest=digest, size_bytes=size)
            )
        except ValidationError as exc:
            raise ComparisonError(f"Unsupported artifact name {identifier!r}: {exc}") from exc

    logger.debug(
        "Scanned %s: %d artifacts, %d excluded", root, len(entries), skipped
    )
    return BuildArtifactSet(artifacts=tuple(entries))
