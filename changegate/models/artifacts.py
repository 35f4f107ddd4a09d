"""Build artifact models (immutable once computed)."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from changegate.core.hasher import compute_fingerprint


class ArtifactDigest(BaseModel):
    """A single build output file.

    The identifier is the file's path relative to the output directory,
    in POSIX form, so it is the same for every checkout location.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    digest: str  # sha256 hex of the file bytes
    size_bytes: int = 0

    @field_validator("identifier")
    @classmethod
    def _single_line_identifier(cls, value: str) -> str:
        # Fingerprint lines are newline-separated.
        if "\n" in value or "\r" in value:
            raise ValueError(f"Artifact identifier contains a line break: {value!r}")
        return value


class BuildArtifactSet(BaseModel):
    """Identifier -> digest mapping for one build.

    Computed fresh per build and never mutated. The fingerprint is a
    single digest over the sorted ``identifier:digest`` pairs.
    """

    model_config = ConfigDict(frozen=True)

    artifacts: tuple[ArtifactDigest, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_unique_identifiers(self) -> "BuildArtifactSet":
        seen: set[str] = set()
        for artifact in self.artifacts:
            if artifact.identifier in seen:
                raise ValueError(f"Duplicate artifact identifier: {artifact.identifier}")
            seen.add(artifact.identifier)
        return self

    @classmethod
    def from_digests(cls, digests: Mapping[str, str]) -> "BuildArtifactSet":
        """Build a set from a plain ``{identifier: digest}`` mapping."""
        return cls(
            artifacts=tuple(
                ArtifactDigest(identifier=ident, digest=digest)
                for ident, digest in digests.items()
            )
        )

    @property
    def digests(self) -> Mapping[str, str]:
        """Read-only ``{identifier: digest}`` view."""
        return MappingProxyType({a.identifier: a.digest for a in self.artifacts})

    @property
    def identifiers(self) -> list[str]:
        return sorted(a.identifier for a in self.artifacts)

    @property
    def file_count(self) -> int:
        return len(self.artifacts)

    @property
    def total_bytes(self) -> int:
        return sum(a.size_bytes for a in self.artifacts)

    @property
    def fingerprint(self) -> str:
        """The content fingerprint of this set."""
        return compute_fingerprint((a.identifier, a.digest) for a in self.artifacts)

    def get(self, identifier: str) -> ArtifactDigest | None:
        for artifact in self.artifacts:
            if artifact.identifier == identifier:
                return artifact
        return None

    def sorted_artifacts(self) -> list[ArtifactDigest]:
        return sorted(self.artifacts, key=lambda a: a.identifier)
