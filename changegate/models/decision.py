"""Reference point and publish/skip decision models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from changegate.models.comparison import ComparisonResult


class ReferencePoint(BaseModel):
    """The prior release a build is compared against.

    Resolved once at the start of a run and immutable for its duration.
    """

    model_config = ConfigDict(frozen=True)

    tag: str
    commit: str = ""
    explicit: bool = False  # supplied by the caller rather than discovered

    def __str__(self) -> str:
        return self.tag


class DecisionAction(str, Enum):
    SKIP = "skip"
    PUBLISH = "publish"


class DecisionReason(str, Enum):
    """Why a decision was reached."""

    NO_CHANGES = "no changes"
    FIRST_RELEASE = "first release"
    SAFETY_FALLBACK = "safety fallback"
    CHANGES_DETECTED = "changes detected"


# Process exit status per action; 2 is reserved for configuration errors.
EXIT_SKIP = 0
EXIT_PUBLISH = 1
EXIT_CONFIGURATION_ERROR = 2


class Decision(BaseModel):
    """Outcome of one detector run: Skip, or Publish(reason)."""

    model_config = ConfigDict(frozen=True)

    action: DecisionAction
    reason: DecisionReason
    reference: ReferencePoint | None = None
    comparison: ComparisonResult | None = None
    error: str = ""  # underlying error text for SAFETY_FALLBACK

    @classmethod
    def skip(
        cls,
        reference: ReferencePoint | None = None,
        comparison: ComparisonResult | None = None,
    ) -> "Decision":
        return cls(
            action=DecisionAction.SKIP,
            reason=DecisionReason.NO_CHANGES,
            reference=reference,
            comparison=comparison,
        )

    @classmethod
    def publish(
        cls,
        reason: DecisionReason,
        *,
        reference: ReferencePoint | None = None,
        comparison: ComparisonResult | None = None,
        error: str = "",
    ) -> "Decision":
        return cls(
            action=DecisionAction.PUBLISH,
            reason=reason,
            reference=reference,
            comparison=comparison,
            error=error,
        )

    @property
    def should_publish(self) -> bool:
        return self.action == DecisionAction.PUBLISH

    @property
    def exit_code(self) -> int:
        return EXIT_PUBLISH if self.should_publish else EXIT_SKIP

    def summary_line(self) -> str:
        """The single decision line printed at the end of every run."""
        return f"DECISION: {self.action.value.upper()} ({self.reason.value})"

    def change_lines(self) -> list[str]:
        if self.comparison is None:
            return []
        return self.comparison.change_lines()
