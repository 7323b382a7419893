"""One-operation-at-a-time guard for a repository instance.

``try_acquire`` never blocks: a second caller is told "no" immediately
instead of being queued behind the running operation.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto

from gitop.platform.cancel import CancelToken

__all__ = ["Operation", "OperationGuard", "OperationState"]


class OperationState(Enum):
    """Lifecycle of a single operation.

    IDLE -> STARTING -> RUNNING -> COMPLETED | FAILED | CANCELLED -> IDLE
    """

    IDLE = auto()
    STARTING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    CANCELLED = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_busy(self) -> bool:
        return self in (OperationState.STARTING, OperationState.RUNNING)

    @property
    def is_terminal(self) -> bool:
        return self in (OperationState.COMPLETED, OperationState.FAILED, OperationState.CANCELLED)


@dataclass(slots=True)
class Operation:
    """The in-flight operation held by a guard."""

    kind: str
    token: CancelToken = field(default_factory=CancelToken)
    state: OperationState = OperationState.STARTING


class OperationGuard:
    """Atomic busy flag with cancellation of the holder."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Operation | None = None
        self._last_state = OperationState.IDLE

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._active is not None

    @property
    def active(self) -> Operation | None:
        with self._lock:
            return self._active

    @property
    def state(self) -> OperationState:
        with self._lock:
            if self._active is None:
                return OperationState.IDLE
            return self._active.state

    @property
    def last_state(self) -> OperationState:
        """Terminal state of the most recently released operation."""
        with self._lock:
            return self._last_state

    def try_acquire(self, kind: str = "operation") -> bool:
        """Mark the guard busy if it is free.

        Returns:
            True if the caller now owns the guard, False if another
            operation already does.
        """
        with self._lock:
            if self._active is not None:
                return False
            self._active = Operation(kind=kind)
            return True

    def transition(self, state: OperationState) -> None:
        """Move the active operation to ``state``; ignored when idle."""
        with self._lock:
            if self._active is not None:
                self._active.state = state

    def release(self) -> None:
        with self._lock:
            if self._active is None:
                return
            state = self._active.state
            self._last_state = state if state.is_terminal else OperationState.FAILED
            self._active = None

    def cancel(self) -> bool:
        """Request cancellation of the active operation.

        Returns:
            True if an operation was active, False when idle.
        """
        with self._lock:
            active = self._active
        if active is None:
            return False
        active.token.cancel()
        return True
