"""Comparison result models — one per detector invocation, frozen."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChangeKind(str, Enum):
    """Classification of one artifact identifier across two builds."""

    NEW = "new"
    CHANGED = "changed"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class ArtifactChange(BaseModel):
    """A single classified difference between the current and reference build."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    kind: ChangeKind
    current_digest: str = ""  # empty when REMOVED
    reference_digest: str = ""  # empty when NEW

    def describe(self) -> str:
        """Render as ``CHANGED: b.bin``."""
        return f"{self.kind.value.upper()}: {self.identifier}"


class ComparisonResult(BaseModel):
    """Both fingerprints, file counts and the classified change list.

    ``changes`` never contains UNCHANGED entries; those are only counted.
    """

    model_config = ConfigDict(frozen=True)

    current_fingerprint: str
    reference_fingerprint: str
    current_file_count: int
    reference_file_count: int
    unchanged_count: int = 0
    changes: tuple[ArtifactChange, ...] = Field(default_factory=tuple)

    @property
    def identical(self) -> bool:
        return self.current_fingerprint == self.reference_fingerprint and not self.changes

    def of_kind(self, kind: ChangeKind) -> list[ArtifactChange]:
        return [c for c in self.changes if c.kind == kind]

    @property
    def new(self) -> list[ArtifactChange]:
        return self.of_kind(ChangeKind.NEW)

    @property
    def changed(self) -> list[ArtifactChange]:
        return self.of_kind(ChangeKind.CHANGED)

    @property
    def removed(self) -> list[ArtifactChange]:
        return self.of_kind(ChangeKind.REMOVED)

    def change_lines(self) -> list[str]:
        return [c.describe() for c in self.changes]
