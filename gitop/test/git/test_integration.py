"""End-to-end clone and reference listing against the real git executable."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from gitop.core.result import Err, Ok
from gitop.git.credentials import NoCredentials
from gitop.git.errors import CloneDirectoryNotEmpty, CloneFailed
from gitop.git.references import ReferenceKind
from gitop.git.repository import Repository, RepositoryProtocol

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=gitop", "-c", "user.email=gitop@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def isolated_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global git config out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)


@pytest.fixture
def origin(tmp_path: Path, isolated_git: None) -> Path:
    path = tmp_path / "origin"
    path.mkdir()
    _git(path, "init", "-q")
    _git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    (path / "README").write_text("hello\n")
    _git(path, "add", "README")
    _git(path, "commit", "-q", "-m", "initial")
    _git(path, "branch", "dev")
    _git(path, "tag", "-a", "v1.0", "-m", "release")
    return path


class Lines:
    def __init__(self) -> None:
        self.progress: list[str] = []
        self.arguments: list[list[str]] = []

    def will_start_task(self, repository: RepositoryProtocol, arguments: list[str]) -> None:
        self.arguments.append(arguments)

    def did_progress_clone(self, repository: RepositoryProtocol, progress: str) -> None:
        self.progress.append(progress)


class TestRealGit:
    def test_clone_and_list_references(self, origin: Path, tmp_path: Path) -> None:
        repo = Repository.from_remote(str(origin), NoCredentials())
        lines = Lines()
        repo.delegate = lines
        dest = tmp_path / "clone"

        assert repo.clone(dest) == Ok(None)
        assert (dest / "README").read_text() == "hello\n"
        assert lines.progress
        assert lines.arguments[0][:2] == ["git", "clone"]

        result = repo.fetch_references()
        assert isinstance(result, Ok)
        names = {ref.name for ref in result.value}
        assert "refs/heads/main" in names
        assert "refs/remotes/origin/dev" in names
        assert "refs/tags/v1.0" in names

        tag = next(ref for ref in result.value if ref.name == "refs/tags/v1.0")
        assert tag.kind is ReferenceKind.TAG
        assert tag.object_type == "tag"

    def test_at_path_lists_local_branches(self, origin: Path) -> None:
        repo = Repository.at_path(origin, NoCredentials())
        assert repo is not None

        result = repo.fetch_references()

        assert isinstance(result, Ok)
        branches = [r.short_name for r in result.value if r.kind is ReferenceKind.BRANCH]
        assert branches == ["dev", "main"]

    def test_missing_remote(self, tmp_path: Path, isolated_git: None) -> None:
        repo = Repository.from_remote(str(tmp_path / "does-not-exist"), NoCredentials())
        dest = tmp_path / "clone"

        result = repo.clone(dest)

        assert isinstance(result, Err)
        assert isinstance(result.error, CloneFailed)
        assert result.error.returncode != 0
        assert result.error.message
        assert not dest.exists()

    def test_non_empty_target(self, origin: Path, tmp_path: Path) -> None:
        dest = tmp_path / "clone"
        dest.mkdir()
        (dest / "file").write_text("x")

        result = Repository.from_remote(str(origin), NoCredentials()).clone(dest)

        assert result == Err(CloneDirectoryNotEmpty(path=dest))
