"""Shared test fixtures for changegate."""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest

from changegate.core.detector import ChangeDetector
from changegate.core.errors import BuildFailure
from changegate.models.config import DetectorConfig
from changegate.models.decision import ReferencePoint

# Copies the project directory into the output directory.
COPY_SCRIPT = "import shutil, sys; shutil.copytree(sys.argv[1], sys.argv[2], dirs_exist_ok=True)"
COPY_BUILD_COMMAND: tuple[str, ...] = (sys.executable, "-c", COPY_SCRIPT, "{project}", "{output}")


def write_tree(root: Path, files: Mapping[str, bytes]) -> Path:
    """Create ``files`` (relative POSIX path -> bytes) under ``root``."""
    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


# ---------------------------------------------------------------------------
# In-memory collaborators for ChangeDetector
# ---------------------------------------------------------------------------


class FakeRepository:
    """Duck-typed stand-in for ``GitRepository``."""

    def __init__(
        self,
        root: Path,
        *,
        tags: list[str] | None = None,
        work_tree: bool = True,
        describe_error: Exception | None = None,
    ) -> None:
        self.root = root
        self.tags = list(tags or [])
        self.work_tree = work_tree
        self.describe_error = describe_error

    def is_work_tree(self) -> bool:
        return self.work_tree

    def toplevel(self) -> Path:
        return self.root.resolve()

    def tag_exists(self, tag: str) -> bool:
        return tag in self.tags

    def latest_tag(self, match: str | None = None) -> str | None:
        if self.describe_error is not None:
            raise self.describe_error
        return self.tags[-1] if self.tags else None

    def rev_parse(self, ref: str) -> str:
        return f"commit-of-{ref}"


class FakeBuildTool:
    """Writes a fixed file mapping per source root, or fails on request."""

    def __init__(
        self,
        outputs: Mapping[Path, Mapping[str, bytes]],
        *,
        fail_for: set[Path] | None = None,
    ) -> None:
        self.outputs = {Path(k).resolve(): v for k, v in outputs.items()}
        self.fail_for = {Path(p).resolve() for p in (fail_for or set())}
        self.calls: list[tuple[Path, Path, Path]] = []

    def build(self, source_root: Path, project_path: Path, output_dir: Path) -> None:
        self.calls.append((source_root, project_path, output_dir))
        key = Path(source_root).resolve()
        if key in self.fail_for:
            raise BuildFailure(f"simulated failure in {source_root}", returncode=1, output="error CS0001")
        write_tree(output_dir, self.outputs.get(key, {}))


class FakeReferenceSource:
    """Yields a fixed directory and records entry and exit."""

    def __init__(self, checkout: Path) -> None:
        self.checkout = checkout
        self.entered: list[ReferencePoint] = []
        self.exited = 0

    @contextmanager
    def materialize(self, reference: ReferencePoint) -> Iterator[Path]:
        self.entered.append(reference)
        try:
            yield self.checkout
        finally:
            self.exited += 1


# ---------------------------------------------------------------------------
# Real git sandbox
# ---------------------------------------------------------------------------


class GitSandbox:
    """A throwaway git repository for integration-style tests."""

    def __init__(self, root: Path) -> None:
        self.root = root
        root.mkdir(parents=True, exist_ok=True)
        self.git("init", "--quiet")
        self.git("config", "user.email", "dev@example.com")
        self.git("config", "user.name", "Dev")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def write(self, files: Mapping[str, bytes]) -> None:
        write_tree(self.root, files)

    def commit(self, message: str = "change") -> str:
        self.git("add", "--all")
        self.git("commit", "--quiet", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")

    def tag(self, name: str) -> None:
        self.git("tag", name)

    def worktree_count(self) -> int:
        listing = self.git("worktree", "list", "--porcelain")
        return sum(1 for line in listing.splitlines() if line.startswith("worktree "))


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def make_tree(tmp_dir: Path) -> Callable[[str, Mapping[str, bytes]], Path]:
    """Factory fixture: write a file tree under ``tmp_dir/<name>``."""

    def _factory(name: str, files: Mapping[str, bytes]) -> Path:
        return write_tree(tmp_dir / name, files)

    return _factory


@pytest.fixture
def git_sandbox(tmp_dir: Path) -> GitSandbox:
    """A fresh git repository; skips the test when git is missing."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    return GitSandbox(tmp_dir / "repo")


@pytest.fixture(autouse=True)
def _isolate_ci_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests must not inherit CI settings from the machine running them."""
    for name in ("CI", "GITHUB_OUTPUT", "CHANGEGATE_CI", "CHANGEGATE_GITHUB_OUTPUT"):
        monkeypatch.delenv(name, raising=False)


class DetectorHarness:
    """Wires a ``ChangeDetector`` to in-memory collaborators.

    The current tree lives at ``current_root`` and the reference checkout
    at ``reference_root``; both contain the project directory.
    """

    def __init__(self, root: Path) -> None:
        self.current_root = root / "current"
        self.reference_root = root / "reference"
        self.staging = root / "staging"
        self.project = Path("src/Lib")
        (self.current_root / self.project).mkdir(parents=True)
        (self.reference_root / self.project).mkdir(parents=True)
        self.repo: FakeRepository | None = None
        self.tool: FakeBuildTool | None = None
        self.source: FakeReferenceSource | None = None

    def detector(
        self,
        current: Mapping[str, bytes],
        reference: Mapping[str, bytes],
        *,
        tags: list[str] | None = None,
        fail_for: set[str] | None = None,
        reference_tag: str | None = None,
        describe_error: Exception | None = None,
        work_tree: bool = True,
        project: Path | None = None,
        **config_overrides: Any,
    ) -> ChangeDetector:
        roots = {"current": self.current_root, "reference": self.reference_root}
        self.repo = FakeRepository(
            self.current_root,
            tags=["v1.0.0"] if tags is None else tags,
            work_tree=work_tree,
            describe_error=describe_error,
        )
        self.tool = FakeBuildTool(
            {self.current_root: current, self.reference_root: reference},
            fail_for={roots[label] for label in (fail_for or set())},
        )
        self.source = FakeReferenceSource(self.reference_root)
        config = DetectorConfig(
            project_path=project if project is not None else self.project,
            repo_root=self.current_root,
            reference_tag=reference_tag,
            staging_dir=self.staging,
            **config_overrides,
        )
        return ChangeDetector(
            config,
            repo=self.repo,  # type: ignore[arg-type]
            build_tool=self.tool,
            reference_source=self.source,
        )


@pytest.fixture
def harness(tmp_dir: Path) -> DetectorHarness:
    """Provide a DetectorHarness rooted in a temp directory."""
    return DetectorHarness(tmp_dir)


@pytest.fixture
def copy_build_command() -> tuple[str, ...]:
    """A build command that copies the project directory to the output."""
    return COPY_BUILD_COMMAND
