"""changegate: publish a package only when its build output changed.

Builds a project at HEAD and at the previous release tag (in an isolated
git worktree), fingerprints both outputs by per-file content digest, and
decides Skip or Publish. Any failure during comparison publishes rather
than risk skipping a real change.
"""

__version__ = "0.1.0"
__description__ = "Build-output change detection for release gating"

from changegate.core.detector import ChangeDetector
from changegate.models.decision import Decision
from changegate.cli.app import app as cli

__all__ = ["ChangeDetector", "Decision", "cli", "__version__"]
