"""Change detector — decides whether a project's build output changed since a release.

Flow for one invocation::

    validate -> resolve reference -+-> none: Publish("first release")
                                   +-> build current -> build reference
                                       -> compare -> Skip | Publish("changes detected")

Any failure after validation is converted into Publish("safety fallback").
A failed comparison cannot be trusted to report "no changes", so the
detector never retries and never skips on error. Only ``ConfigurationError``
reaches the caller.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import AbstractContextManager
from pathlib import Path

from changegate.core.builder import BuildTool, CommandBuildTool
from changegate.core.comparator import compare_artifact_sets
from changegate.core.errors import (
    BuildFailure,
    ComparisonError,
    ConfigurationError,
    NoArtifactsFailure,
)
from changegate.core.reference import ReferenceSource, WorktreeReferenceSource
from changegate.core.scanner import scan_artifacts
from changegate.core.vcs import GitCommandError, GitRepository
from changegate.models.artifacts import BuildArtifactSet
from changegate.models.comparison import ComparisonResult
from changegate.models.config import DetectorConfig
from changegate.models.decision import Decision, DecisionReason, ReferencePoint

logger = logging.getLogger(__name__)


class ChangeDetector:
    """Decides, for one project, whether to publish a new package.

    Parameters
    ----------
    config:
        Fixed configuration for this invocation. Nothing is read from the
        environment after construction.
    repo:
        Git adapter. Defaults to a ``GitRepository`` at ``config.repo_root``.
    build_tool:
        Build backend. Defaults to ``CommandBuildTool(config.build_command)``.
    reference_source:
        Provider of reference checkouts. Defaults to git worktrees.
    """

    def __init__(
        self,
        config: DetectorConfig,
        *,
        repo: GitRepository | None = None,
        build_tool: BuildTool | None = None,
        reference_source: ReferenceSource | None = None,
    ) -> None:
        self.config = config
        self._repo = repo or GitRepository(
            config.repo_root, timeout_seconds=config.git_timeout_seconds
        )
        self._build_tool = build_tool or CommandBuildTool(
            config.build_command, timeout_seconds=config.build_timeout_seconds
        )
        self._reference_source = reference_source or WorktreeReferenceSource(
            self._repo, config.staging_dir
        )

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def validate(self) -> tuple[Path, Path]:
        """Check the project and repository preconditions.

        Returns the repository root and the project path relative to it.

        Raises
        ------
        ConfigurationError
            If the repository root is not a git working tree, the project
            path does not exist or lies outside it, or an explicit
            reference tag does not exist.
        """
        if not self._repo.is_work_tree():
            raise ConfigurationError(
                f"Not a git working tree: {self.config.repo_root}"
            )
        try:
            toplevel = self._repo.toplevel()
        except GitCommandError as exc:
            raise ConfigurationError(f"Cannot locate repository root: {exc}") from exc

        project = self.config.project_path
        if not project.is_absolute():
            project = Path(self.config.repo_root) / project
        project = project.resolve()
        if not project.exists():
            raise ConfigurationError(f"Project path does not exist: {self.config.project_path}")
        try:
            project_rel = project.relative_to(toplevel)
        except ValueError:
            raise ConfigurationError(
                f"Project {project} is outside repository {toplevel}"
            ) from None

        tag = self.config.reference_tag
        if tag and not self._repo.tag_exists(tag):
            raise ConfigurationError(f"Reference tag does not exist: {tag}")
        return toplevel, project_rel

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def resolve_reference(self) -> ReferencePoint | None:
        """The explicit tag, else the most recent tag reachable from HEAD.

        Returns None when the repository has no tag (first release).
        """
        explicit = bool(self.config.reference_tag)
        tag = self.config.reference_tag or self._repo.latest_tag(self.config.tag_match)
        if tag is None:
            return None
        return ReferencePoint(tag=tag, commit=self._repo.rev_parse(tag), explicit=explicit)

    def build_and_fingerprint(self, source_root: Path, project_path: Path) -> BuildArtifactSet:
        """Build ``project_path`` (relative to ``source_root``) into a fresh
        directory and digest its eligible output.

        Raises
        ------
        BuildFailure
            The build tool reported failure.
        NoArtifactsFailure
            The build succeeded but nothing remained after exclusions.
        """
        staging = self.config.staging_dir
        if staging is not None:
            staging.mkdir(parents=True, exist_ok=True)
        output_dir = Path(tempfile.mkdtemp(prefix="build-", dir=staging)).resolve()
        try:
            self._build_tool.build(Path(source_root), Path(source_root) / project_path, output_dir)
            artifacts = scan_artifacts(output_dir, self.config.exclude_patterns)
        finally:
            shutil.rmtree(output_dir, ignore_errors=True)

        if artifacts.file_count == 0:
            raise NoArtifactsFailure(
                f"Build of {project_path} in {source_root} produced no eligible artifacts"
            )
        logger.info(
            "Fingerprinted %d artifacts from %s: %s",
            artifacts.file_count,
            source_root,
            artifacts.fingerprint[:16],
        )
        return artifacts

    def materialize_reference(self, reference: ReferencePoint) -> AbstractContextManager[Path]:
        """Isolated checkout of ``reference``, removed when the context exits."""
        return self._reference_source.materialize(reference)

    def compare(self, current: BuildArtifactSet, reference: BuildArtifactSet) -> ComparisonResult:
        return compare_artifact_sets(current, reference)

    # ------------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------------

    def decide(self) -> Decision:
        """Run the full detection and return Skip or Publish(reason).

        Raises
        ------
        ConfigurationError
            Only for invalid inputs; every other failure becomes
            Publish("safety fallback").
        """
        source_root, project_rel = self.validate()

        try:
            reference = self.resolve_reference()
        except ComparisonError as exc:
            return self._fallback(None, exc)

        if reference is None:
            logger.info("No reference tag found; treating as first release")
            return Decision.publish(DecisionReason.FIRST_RELEASE)

        logger.info("Comparing %s against %s", project_rel, reference.tag)
        try:
            current = self.build_and_fingerprint(source_root, project_rel)
            with self.materialize_reference(reference) as checkout:
                previous = self.build_and_fingerprint(checkout, project_rel)
            result = self.compare(current, previous)
        except Exception as exc:
            return self._fallback(reference, exc)

        if result.identical:
            logger.info("Build output identical to %s", reference.tag)
            return Decision.skip(reference=reference, comparison=result)

        logger.info(
            "Build output differs from %s: %d new, %d changed, %d removed",
            reference.tag,
            len(result.new),
            len(result.changed),
            len(result.removed),
        )
        return Decision.publish(
            DecisionReason.CHANGES_DETECTED, reference=reference, comparison=result
        )

    def _fallback(self, reference: ReferencePoint | None, exc: Exception) -> Decision:
        logger.error(
            "Comparison failed (%s: %s); publishing as a safety fallback",
            type(exc).__name__,
            exc,
            exc_info=not isinstance(exc, (BuildFailure, NoArtifactsFailure)),
        )
        if isinstance(exc, BuildFailure) and exc.output:
            # CI logs are the only record of the failed build.
            log = logger.error if self.config.ci else logger.debug
            log("Build output (tail):\n%s", exc.output)
        return Decision.publish(
            DecisionReason.SAFETY_FALLBACK, reference=reference, error=str(exc)
        )
