"""Tests for artifact set comparison."""

from __future__ import annotations

from changegate.core.comparator import classify, compare_artifact_sets
from changegate.models.artifacts import BuildArtifactSet
from changegate.models.comparison import ChangeKind


def _set(**digests: str) -> BuildArtifactSet:
    return BuildArtifactSet.from_digests({f"{k}.bin": v for k, v in digests.items()})


class TestClassify:
    def test_all_kinds(self):
        assert classify("h", None) == ChangeKind.NEW
        assert classify(None, "h") == ChangeKind.REMOVED
        assert classify("h1", "h2") == ChangeKind.CHANGED
        assert classify("h", "h") == ChangeKind.UNCHANGED


class TestCompareArtifactSets:
    def test_identical_sets(self):
        result = compare_artifact_sets(_set(a="H1", b="H2"), _set(b="H2", a="H1"))
        assert result.identical is True
        assert result.changes == ()
        assert result.unchanged_count == 2
        assert result.current_fingerprint == result.reference_fingerprint

    def test_changed_artifact(self):
        result = compare_artifact_sets(_set(a="H1", b="H3"), _set(a="H1", b="H2"))
        assert result.identical is False
        assert result.change_lines() == ["CHANGED: b.bin"]
        change = result.changes[0]
        assert change.current_digest == "H3"
        assert change.reference_digest == "H2"

    def test_new_artifact(self):
        result = compare_artifact_sets(_set(a="H1", c="H4"), _set(a="H1"))
        assert result.change_lines() == ["NEW: c.bin"]
        assert result.changes[0].reference_digest == ""

    def test_removed_artifact(self):
        result = compare_artifact_sets(_set(a="H1"), _set(a="H1", c="H4"))
        assert result.change_lines() == ["REMOVED: c.bin"]
        assert result.changes[0].current_digest == ""

    def test_counts(self):
        result = compare_artifact_sets(_set(a="H1", b="H2", c="H3"), _set(a="H1"))
        assert result.current_file_count == 3
        assert result.reference_file_count == 1
        assert result.unchanged_count == 1

    def test_changes_sorted_by_identifier(self):
        result = compare_artifact_sets(_set(z="1", a="2"), _set(m="3"))
        assert [c.identifier for c in result.changes] == ["a.bin", "m.bin", "z.bin"]
