"""Runtime settings — env-driven, read once at startup.

Centralized settings using pydantic-settings. Reads from a .env file and
CHANGEGATE_* environment variables. The CLI loads these once and hands a
frozen ``DetectorConfig`` to the detector; nothing below the CLI reads
the environment.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from changegate.models.config import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_EXCLUDE_PATTERNS,
    DetectorConfig,
)


class ChangegateSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHANGEGATE_LOG_LEVEL=DEBUG
        export CHANGEGATE_STAGING_DIR=/tmp/changegate
        export CHANGEGATE_TAG_MATCH='v*'

    CI detection also honours the conventional ``CI`` variable, and step
    outputs go to the file named by ``GITHUB_OUTPUT`` when it is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHANGEGATE_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = "INFO"

    # CI integration
    ci: bool = Field(default=False, validation_alias=AliasChoices("CHANGEGATE_CI", "CI"))
    github_output: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("CHANGEGATE_GITHUB_OUTPUT", "GITHUB_OUTPUT"),
    )

    # Build and checkout
    staging_dir: Path | None = None
    build_command: list[str] = Field(default_factory=lambda: list(DEFAULT_BUILD_COMMAND))
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    tag_match: str | None = None
    tag_prefix: str = "v"

    # Timeouts
    build_timeout_seconds: int = 900
    git_timeout_seconds: int = 60

    @field_validator("ci", mode="before")
    @classmethod
    def _empty_ci_is_false(cls, value: object) -> object:
        # Some runners export CI with an empty value.
        if isinstance(value, str) and not value.strip():
            return False
        return value

    def detector_config(
        self,
        project_path: Path,
        *,
        repo_root: Path = Path("."),
        reference_tag: str | None = None,
        staging_dir: Path | None = None,
        extra_excludes: list[str] | None = None,
        tag_match: str | None = None,
        ci: bool | None = None,
    ) -> DetectorConfig:
        """Freeze these settings plus per-invocation arguments."""
        return DetectorConfig(
            project_path=project_path,
            repo_root=repo_root,
            reference_tag=reference_tag or None,
            staging_dir=staging_dir if staging_dir is not None else self.staging_dir,
            build_command=tuple(self.build_command),
            exclude_patterns=tuple(self.exclude_patterns) + tuple(extra_excludes or ()),
            tag_match=tag_match if tag_match is not None else self.tag_match,
            ci=self.ci if ci is None else ci,
            build_timeout_seconds=self.build_timeout_seconds,
            git_timeout_seconds=self.git_timeout_seconds,
        )
