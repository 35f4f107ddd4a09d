"""Digest helpers for artifacts and artifact sets.

A fingerprint is derived from the sorted ``identifier:digest`` pairs of
an artifact set, so it depends only on relative names and file bytes and
never on filesystem iteration order or the checkout location.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def file_sha256(path: Path) -> str:
    """Return the SHA-256 hex digest of a file, read in chunks."""
    h = hashlib.sha256()
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def compute_fingerprint(pairs: Iterable[tuple[str, str]]) -> str:
    """SHA-256 over the sorted, newline-joined ``identifier:digest`` pairs.

    Order of ``pairs`` does not matter. Identifiers are expected to be
    unique; the caller (``BuildArtifactSet``) guarantees it.
    """
    lines = [f"{identifier}:{digest}" for identifier, digest in sorted(pairs)]
    return sha256_hex("\n".join(lines).encode("utf-8"))
