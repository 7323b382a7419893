"""Repository event delegate and the weak handle that calls it.

A delegate may implement either hook, both or neither; missing hooks are
no-ops. The repository only keeps a weak reference, so registering a
delegate never extends its lifetime.

Hooks run on the thread that called ``clone``/``fetch_references``.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gitop.git.repository import RepositoryProtocol

__all__ = ["DelegateHandle", "RepositoryDelegate"]

logger = logging.getLogger(__name__)


class RepositoryDelegate(Protocol):
    """Receiver of repository events."""

    def will_start_task(self, repository: RepositoryProtocol, arguments: list[str]) -> None:
        """Called once per operation with the full git command line."""
        ...

    def did_progress_clone(self, repository: RepositoryProtocol, progress: str) -> None:
        """Called for each line git prints while cloning."""
        ...


class DelegateHandle:
    """Non-owning reference to a delegate that tolerates its disappearance."""

    def __init__(self) -> None:
        self._ref: weakref.ReferenceType[object] | None = None

    def get(self) -> RepositoryDelegate | None:
        if self._ref is None:
            return None
        return self._ref()  # type: ignore[return-value]

    def set(self, delegate: RepositoryDelegate | None) -> None:
        """Register ``delegate`` (None unregisters).

        Raises:
            TypeError: If the object cannot be weakly referenced (e.g. a
                slotted class without ``__weakref__``).
        """
        self._ref = weakref.ref(delegate) if delegate is not None else None

    def will_start_task(self, repository: RepositoryProtocol, arguments: Sequence[str]) -> None:
        self._notify("will_start_task", repository, list(arguments))

    def did_progress_clone(self, repository: RepositoryProtocol, progress: str) -> None:
        self._notify("did_progress_clone", repository, progress)

    def _notify(self, hook: str, *args: object) -> None:
        delegate = self.get()
        if delegate is None:
            return
        method = getattr(delegate, hook, None)
        if method is None:
            return
        try:
            method(*args)
        except Exception:
            # Notifications are diagnostics; a broken delegate must not
            # abort the git operation.
            logger.warning("delegate hook %s raised", hook, exc_info=True)
