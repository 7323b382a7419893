"""Tests for git/references.py."""

from __future__ import annotations

from gitop.git.references import ReferenceKind, RepositoryReference, parse_references

SHA = "0123456789abcdef0123456789abcdef01234567"


class TestRepositoryReference:
    def test_branch(self) -> None:
        ref = RepositoryReference(name="refs/heads/feature/x", target=SHA)
        assert ref.kind is ReferenceKind.BRANCH
        assert ref.short_name == "feature/x"

    def test_remote_branch(self) -> None:
        ref = RepositoryReference(name="refs/remotes/origin/main", target=SHA)
        assert ref.kind is ReferenceKind.REMOTE_BRANCH
        assert ref.short_name == "origin/main"
        assert ref.is_symbolic_head is False

    def test_remote_head(self) -> None:
        ref = RepositoryReference(name="refs/remotes/origin/HEAD", target=SHA)
        assert ref.is_symbolic_head is True

    def test_tag(self) -> None:
        ref = RepositoryReference(name="refs/tags/v1.2.0", target=SHA, object_type="tag")
        assert ref.kind is ReferenceKind.TAG
        assert ref.short_name == "v1.2.0"

    def test_other(self) -> None:
        ref = RepositoryReference(name="refs/stash", target=SHA)
        assert ref.kind is ReferenceKind.OTHER
        assert ref.short_name == "stash"

    def test_kind_str(self) -> None:
        assert str(ReferenceKind.REMOTE_BRANCH) == "remote_branch"


class TestParseReferences:
    def test_keeps_order(self) -> None:
        refs = parse_references(
            [
                f"{SHA} commit refs/tags/b",
                f"{SHA} commit refs/heads/a",
            ]
        )
        assert [r.name for r in refs] == ["refs/tags/b", "refs/heads/a"]

    def test_fields(self) -> None:
        [ref] = parse_references([f"{SHA} tag refs/tags/v1"])
        assert ref == RepositoryReference(name="refs/tags/v1", target=SHA, object_type="tag")

    def test_skips_malformed_lines(self) -> None:
        refs = parse_references(["", "garbage", f"{SHA} commit", f"{SHA} commit refs/heads/ok"])
        assert [r.name for r in refs] == ["refs/heads/ok"]

    def test_empty(self) -> None:
        assert parse_references([]) == []
