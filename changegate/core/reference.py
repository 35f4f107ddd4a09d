"""Reference sources — where the prior release's tree comes from.

The detector only needs a directory containing the repository at the
reference point. ``ReferenceSource`` is that seam; the git implementation
uses a linked worktree so the caller's working tree, including any
uncommitted changes, is never touched.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Protocol, runtime_checkable

from changegate.core.errors import ComparisonError
from changegate.core.vcs import GitCommandError, GitRepository
from changegate.models.decision import ReferencePoint

logger = logging.getLogger(__name__)


@runtime_checkable
class ReferenceSource(Protocol):
    """Protocol for anything that can produce a checkout of a reference."""

    def materialize(self, reference: ReferencePoint) -> AbstractContextManager[Path]:
        """Yield the root of a checkout of ``reference``; clean up on exit."""
        ...


class WorktreeReferenceSource:
    """Materializes references as detached git worktrees.

    Each checkout lives in its own temporary directory under
    ``staging_dir`` (the system temp directory when None) and is removed
    on every exit path, including exceptions and ``KeyboardInterrupt``.
    """

    def __init__(self, repo: GitRepository, staging_dir: Path | None = None) -> None:
        self._repo = repo
        self._staging = Path(staging_dir) if staging_dir is not None else None

    @contextmanager
    def materialize(self, reference: ReferencePoint) -> Iterator[Path]:
        if self._staging is not None:
            self._staging.mkdir(parents=True, exist_ok=True)
        holder = Path(tempfile.mkdtemp(prefix="reference-", dir=self._staging)).resolve()
        checkout = holder / "checkout"
        added = False
        try:
            try:
                self._repo.add_worktree(checkout, reference.commit or reference.tag)
            except GitCommandError as exc:
                raise ComparisonError(
                    f"Could not check out reference {reference.tag}: {exc}"
                ) from exc
            added = True
            yield checkout
        finally:
            self._cleanup(holder, checkout, added)

    def _cleanup(self, holder: Path, checkout: Path, added: bool) -> None:
        # Never raise from cleanup; a primary error may be in flight.
        if added:
            try:
                self._repo.remove_worktree(checkout)
            except GitCommandError as exc:
                logger.warning("Worktree removal failed for %s: %s", checkout, exc)
        shutil.rmtree(holder, ignore_errors=True)
        try:
            self._repo.prune_worktrees()
        except GitCommandError as exc:
            logger.warning("Worktree prune failed: %s", exc)
