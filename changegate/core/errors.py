"""Error taxonomy for change detection.

Only ``ConfigurationError`` is surfaced to callers as a hard failure.
Every other ``ChangegateError`` is recovered by the detector into the
fail-open publish decision.
"""

from __future__ import annotations


class ChangegateError(RuntimeError):
    """Base class for all changegate errors."""


class ConfigurationError(ChangegateError):
    """Raised when inputs are invalid or the project is not in a repository.

    No publish/skip decision is meaningful without a valid project, so
    this error is reported to the caller instead of being converted.
    """


class BuildFailure(ChangegateError):
    """Raised when the build tool reports failure or cannot be started."""

    def __init__(self, message: str, *, returncode: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class NoArtifactsFailure(ChangegateError):
    """Raised when a build succeeds but leaves no eligible file to fingerprint."""


class ComparisonError(ChangegateError):
    """Raised when the reference checkout or artifact digesting fails."""
