"""Artifact set comparison."""

from __future__ import annotations

from changegate.models.artifacts import BuildArtifactSet
from changegate.models.comparison import ArtifactChange, ChangeKind, ComparisonResult


def classify(current_digest: str | None, reference_digest: str | None) -> ChangeKind:
    if reference_digest is None:
        return ChangeKind.NEW
    if current_digest is None:
        return ChangeKind.REMOVED
    if current_digest != reference_digest:
        return ChangeKind.CHANGED
    return ChangeKind.UNCHANGED


def compare_artifact_sets(
    current: BuildArtifactSet, reference: BuildArtifactSet
) -> ComparisonResult:
    """Classify every identifier in either set and fingerprint both.

    ``identical`` on the result requires equal fingerprints and an empty
    change list.
    """
    current_digests = current.digests
    reference_digests = reference.digests
    changes: list[ArtifactChange] = []
    unchanged = 0

    for identifier in sorted(set(current_digests) | set(reference_digests)):
        cur = current_digests.get(identifier)
        ref = reference_digests.get(identifier)
        kind = classify(cur, ref)
        if kind == ChangeKind.UNCHANGED:
            unchanged += 1
            continue
        changes.append(
            ArtifactChange(
                identifier=identifier,
                kind=kind,
                current_digest=cur or "",
                reference_digest=ref or "",
            )
        )

    return ComparisonResult(
        current_fingerprint=current.fingerprint,
        reference_fingerprint=reference.fingerprint,
        current_file_count=current.file_count,
        reference_file_count=reference.file_count,
        unchanged_count=unchanged,
        changes=tuple(changes),
    )
