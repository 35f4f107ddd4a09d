"""Git adapter — tag resolution and linked worktree management.

Every call shells out to the ``git`` CLI with a bounded timeout.
Failures raise ``GitCommandError``; callers decide whether that is a
configuration problem or a recoverable comparison failure.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from changegate.core.errors import ComparisonError

logger = logging.getLogger(__name__)

# Untranslated messages keep stderr stable in logs and errors.
_GIT_ENV_OVERRIDES = {"LC_ALL": "C", "LANGUAGE": ""}


class GitCommandError(ComparisonError):
    """Raised when a git invocation fails or cannot be started."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str) -> None:
        self.git_args = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"git {' '.join(args)} failed"
            + (f" (exit {returncode})" if returncode is not None else "")
            + (f": {self.stderr}" if self.stderr else "")
        )


class GitRepository:
    """Thin wrapper over the git CLI for one repository.

    Parameters
    ----------
    root:
        Any directory inside the working tree.
    timeout_seconds:
        Limit for each git invocation.
    """

    def __init__(self, root: Path, *, timeout_seconds: int = 60) -> None:
        self.root = Path(root)
        self._timeout = timeout_seconds

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        argv = ["git", *args]
        logger.debug("Running %s (cwd=%s)", " ".join(argv), self.root)
        try:
            return subprocess.run(
                argv,
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env={**os.environ, **_GIT_ENV_OVERRIDES},
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise GitCommandError(list(args), None, str(exc)) from exc

    def _git(self, *args: str) -> str:
        result = self._run(*args)
        if result.returncode != 0:
            raise GitCommandError(list(args), result.returncode, result.stderr)
        return result.stdout.strip()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_work_tree(self) -> bool:
        """True if ``root`` is inside a git working tree."""
        if not self.root.is_dir():
            return False
        try:
            return self._git("rev-parse", "--is-inside-work-tree") == "true"
        except GitCommandError:
            return False

    def toplevel(self) -> Path:
        """Absolute path of the working tree root."""
        return Path(self._git("rev-parse", "--show-toplevel")).resolve()

    def rev_parse(self, ref: str) -> str:
        """Resolve ``ref`` to a full commit SHA."""
        return self._git("rev-parse", "--verify", f"{ref}^{{commit}}")

    def tag_exists(self, tag: str) -> bool:
        result = self._run("rev-parse", "--verify", "--quiet", f"refs/tags/{tag}^{{commit}}")
        return result.returncode == 0

    def has_commits(self) -> bool:
        """False for a freshly initialised repository with no HEAD commit."""
        result = self._run("rev-parse", "--verify", "--quiet", "HEAD^{commit}")
        return result.returncode == 0

    def reachable_tags(self, match: str | None = None) -> list[str]:
        """Tags whose commit is an ancestor of ``HEAD``, optionally filtered."""
        return self._tag_list("--merged", "HEAD", pattern=match)

    def latest_tag(self, match: str | None = None) -> str | None:
        """Most recent tag reachable from ``HEAD``, or None if there is none.

        Absence of a tag is established from ``git tag --merged`` rather
        than from ``git describe`` error text, which varies by locale.
        """
        if not self.has_commits() or not self.reachable_tags(match):
            return None
        args = ["describe", "--tags", "--abbrev=0"]
        if match:
            args.extend(["--match", match])
        args.append("HEAD")
        return self._git(*args) or None

    def list_tags(self, pattern: str | None = None) -> list[str]:
        return self._tag_list(pattern=pattern)

    def _tag_list(self, *options: str, pattern: str | None = None) -> list[str]:
        args = ["tag", "--list", *options]
        if pattern:
            args.append(pattern)
        output = self._git(*args)
        return [line.strip() for line in output.splitlines() if line.strip()]

    # ------------------------------------------------------------------
    # Worktrees
    # ------------------------------------------------------------------

    def add_worktree(self, path: Path, ref: str) -> None:
        """Check out ``ref`` as a detached linked worktree at ``path``."""
        self._git("worktree", "add", "--detach", str(path), ref)
        logger.info("Created worktree for %s at %s", ref, path)

    def remove_worktree(self, path: Path) -> None:
        """Remove a linked worktree, discarding any build output in it."""
        self._git("worktree", "remove", "--force", str(path))
        logger.info("Removed worktree %s", path)

    def prune_worktrees(self) -> None:
        self._git("worktree", "prune")
