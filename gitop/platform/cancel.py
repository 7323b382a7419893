"""Cooperative cancellation token.

A token is created per operation and threaded into the process layer. Any
thread may call ``cancel()``; it flips the flag, runs the registered
callbacks once and returns without waiting for the operation to finish.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

__all__ = ["CancelToken"]

logger = logging.getLogger(__name__)


class CancelToken:
    """Thread-safe, one-shot cancellation signal."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Request cancellation.

        Returns:
            True if this call flipped the token, False if it was already
            cancelled.
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        # Callbacks run outside the lock so they may touch the token.
        for callback in callbacks:
            _invoke(callback)
        return True

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback run on cancellation.

        If the token is already cancelled the callback runs immediately on
        the calling thread.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        _invoke(callback)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return the flag."""
        return self._event.wait(timeout)


def _invoke(callback: Callable[[], None]) -> None:
    try:
        callback()
    except OSError as e:
        # The process may already be gone; nothing left to terminate.
        logger.debug("cancel callback failed: %s", e)
