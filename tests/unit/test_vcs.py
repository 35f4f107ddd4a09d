"""Tests for GitRepository against real throwaway repositories."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from changegate.core.vcs import GitCommandError, GitRepository


@pytest.fixture
def repo(git_sandbox) -> GitRepository:
    git_sandbox.write({"src/a.txt": b"a"})
    git_sandbox.commit("initial")
    return GitRepository(git_sandbox.root)


class TestQueries:
    def test_plain_directory_is_not_work_tree(self, tmp_dir: Path):
        if shutil.which("git") is None:
            pytest.skip("git not installed")
        plain = tmp_dir / "plain"
        plain.mkdir()
        assert GitRepository(plain).is_work_tree() is False

    def test_missing_directory_is_not_work_tree(self, tmp_dir: Path):
        assert GitRepository(tmp_dir / "missing").is_work_tree() is False

    def test_work_tree_and_toplevel(self, repo: GitRepository, git_sandbox):
        nested = GitRepository(git_sandbox.root / "src")
        assert nested.is_work_tree() is True
        assert nested.toplevel() == git_sandbox.root.resolve()

    def test_latest_tag_none_without_tags(self, repo: GitRepository):
        assert repo.latest_tag() is None

    def test_latest_tag_is_nearest_reachable(self, repo: GitRepository, git_sandbox):
        git_sandbox.tag("v1.0.0")
        git_sandbox.write({"src/a.txt": b"b"})
        git_sandbox.commit("second")
        git_sandbox.tag("v1.1.0")
        git_sandbox.write({"src/a.txt": b"c"})
        git_sandbox.commit("untagged")
        assert repo.latest_tag() == "v1.1.0"

    def test_latest_tag_with_match(self, repo: GitRepository, git_sandbox):
        git_sandbox.tag("v1.0.0")
        git_sandbox.commit("second")
        git_sandbox.tag("nightly-2")
        assert repo.latest_tag() == "nightly-2"
        assert repo.latest_tag("v*") == "v1.0.0"

    def test_latest_tag_none_under_translated_messages(
        self, repo: GitRepository, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("LANG", "de_DE.UTF-8")
        monkeypatch.setenv("LANGUAGE", "de")
        assert repo.latest_tag() is None
        assert repo.latest_tag("v*") is None

    def test_latest_tag_none_when_match_excludes_all(self, repo: GitRepository, git_sandbox):
        git_sandbox.tag("nightly-1")
        assert repo.latest_tag("v*") is None

    def test_latest_tag_none_before_first_commit(self, git_sandbox):
        repo = GitRepository(git_sandbox.root)
        assert repo.has_commits() is False
        assert repo.latest_tag() is None

    def test_reachable_tags_ignores_other_branches(self, repo: GitRepository, git_sandbox):
        git_sandbox.tag("v1.0.0")
        git_sandbox.git("checkout", "--quiet", "-b", "side")
        git_sandbox.commit("side work")
        git_sandbox.tag("v2.0.0-side")
        git_sandbox.git("checkout", "--quiet", "-")
        assert repo.reachable_tags() == ["v1.0.0"]
        assert repo.latest_tag() == "v1.0.0"

    def test_tag_exists_and_rev_parse(self, repo: GitRepository, git_sandbox):
        head = git_sandbox.git("rev-parse", "HEAD")
        git_sandbox.tag("v1.0.0")
        assert repo.tag_exists("v1.0.0") is True
        assert repo.tag_exists("v2.0.0") is False
        assert repo.rev_parse("v1.0.0") == head

    def test_list_tags(self, repo: GitRepository, git_sandbox):
        git_sandbox.tag("v1.0.0")
        git_sandbox.tag("v1.0.1")
        assert sorted(repo.list_tags()) == ["v1.0.0", "v1.0.1"]
        assert repo.list_tags("v1.0.1") == ["v1.0.1"]

    def test_failed_command_raises(self, repo: GitRepository):
        with pytest.raises(GitCommandError) as excinfo:
            repo.rev_parse("no-such-ref")
        assert excinfo.value.returncode != 0


class TestWorktrees:
    def test_add_and_remove(self, repo: GitRepository, git_sandbox, tmp_dir: Path):
        git_sandbox.tag("v1.0.0")
        git_sandbox.write({"src/a.txt": b"changed"})
        git_sandbox.commit("after tag")

        checkout = tmp_dir / "wt"
        repo.add_worktree(checkout, "v1.0.0")
        assert (checkout / "src" / "a.txt").read_bytes() == b"a"
        assert git_sandbox.worktree_count() == 2

        repo.remove_worktree(checkout)
        assert not checkout.exists()
        assert git_sandbox.worktree_count() == 1

    def test_main_tree_untouched(self, repo: GitRepository, git_sandbox, tmp_dir: Path):
        git_sandbox.tag("v1.0.0")
        (git_sandbox.root / "src" / "a.txt").write_bytes(b"uncommitted")
        repo.add_worktree(tmp_dir / "wt", "v1.0.0")
        repo.remove_worktree(tmp_dir / "wt")
        assert (git_sandbox.root / "src" / "a.txt").read_bytes() == b"uncommitted"
