"""changegate data models — all Pydantic v2, all frozen (immutable)."""

from changegate.models.artifacts import ArtifactDigest, BuildArtifactSet
from changegate.models.comparison import ArtifactChange, ChangeKind, ComparisonResult
from changegate.models.config import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_EXCLUDE_PATTERNS,
    DetectorConfig,
)
from changegate.models.decision import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_PUBLISH,
    EXIT_SKIP,
    Decision,
    DecisionAction,
    DecisionReason,
    ReferencePoint,
)

__all__ = [
    # artifacts
    "ArtifactDigest",
    "BuildArtifactSet",
    # comparison
    "ChangeKind",
    "ArtifactChange",
    "ComparisonResult",
    # decision
    "ReferencePoint",
    "DecisionAction",
    "DecisionReason",
    "Decision",
    "EXIT_SKIP",
    "EXIT_PUBLISH",
    "EXIT_CONFIGURATION_ERROR",
    # config
    "DetectorConfig",
    "DEFAULT_BUILD_COMMAND",
    "DEFAULT_EXCLUDE_PATTERNS",
]
