"""Detector configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

# Deterministic Release build; ContinuousIntegrationBuild maps embedded
# source paths so output bytes do not depend on the checkout location.
DEFAULT_BUILD_COMMAND: tuple[str, ...] = (
    "dotnet",
    "build",
    "{project}",
    "--configuration",
    "Release",
    "--output",
    "{output}",
    "--nologo",
    "-p:Deterministic=true",
    "-p:ContinuousIntegrationBuild=true",
)

# Packaging metadata, restore caches and debug symbols.
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "*.nupkg",
    "*.snupkg",
    "*.nuspec",
    "project.assets.json",
    "*.nuget.*",
    "*.cache",
    "*.pdb",
)


class DetectorConfig(BaseModel):
    """Everything a ``ChangeDetector`` needs, fixed at construction.

    ``project_path`` may be absolute or relative to ``repo_root``; the
    detector always rebuilds it at the same relative location inside the
    reference checkout.
    """

    model_config = ConfigDict(frozen=True)

    project_path: Path
    repo_root: Path = Path(".")
    reference_tag: str | None = None
    staging_dir: Path | None = None  # None: the system temp directory
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    tag_match: str | None = None
    ci: bool = False
    build_timeout_seconds: int = 900
    git_timeout_seconds: int = 60
