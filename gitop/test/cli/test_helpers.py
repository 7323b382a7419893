from __future__ import annotations

import os
import signal

import pytest

from gitop.cli.commands._helpers import cancel_on_interrupt, default_directory_name


class FakeRepo:
    def __init__(self) -> None:
        self.cancelled = 0

    def cancel(self) -> None:
        self.cancelled += 1


@pytest.mark.parametrize(
    ("url", "name"),
    [
        ("https://example.com/org/repo.git", "repo"),
        ("https://example.com/org/repo", "repo"),
        ("https://example.com/org/repo/", "repo"),
        ("git@example.com:org/tool.git", "tool"),
        ("git@example.com:tool.git", "tool"),
        ("/srv/git/project/.git", "project"),
        ("file:///srv/git/lib.git", "lib"),
    ],
)
def test_default_directory_name(url: str, name: str) -> None:
    assert default_directory_name(url) == name


def test_default_directory_name_fallback() -> None:
    assert default_directory_name(".git") == "repository"


@pytest.mark.skipif(os.name != "posix", reason="POSIX signals")
def test_sigint_cancels_repository() -> None:
    repo = FakeRepo()
    previous = signal.getsignal(signal.SIGINT)

    with cancel_on_interrupt(repo):  # type: ignore[arg-type]
        os.kill(os.getpid(), signal.SIGINT)

    assert repo.cancelled == 1
    assert signal.getsignal(signal.SIGINT) is previous
