from __future__ import annotations

import contextlib
import signal
import threading
from collections.abc import Iterator
from types import FrameType

from gitop.git.repository import RepositoryProtocol


def default_directory_name(url: str) -> str:
    """Directory name git itself would pick for ``url``.

    "https://host/org/repo.git" -> "repo", "git@host:org/repo" -> "repo".
    """
    tail = url.rstrip("/").removesuffix("/.git")
    tail = tail.rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    name = tail.removesuffix(".git")
    return name or "repository"


@contextlib.contextmanager
def cancel_on_interrupt(repo: RepositoryProtocol) -> Iterator[None]:
    """Turn Ctrl-C into ``repo.cancel()`` for the duration of the block.

    Signal handlers can only be installed from the main thread; elsewhere the
    block runs unchanged.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, frame: FrameType | None) -> None:
        repo.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)
