"""Failure kinds returned by repository operations.

The kinds are mutually exclusive and are returned inside ``Err`` rather than
raised. Match on them:

    match repo.clone(dest):
        case Err(CloneDirectoryNotEmpty(path=path)):
            ...
        case Err(CloneFailed(cancelled=True)):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

__all__ = [
    "ActiveOperationInProgress",
    "CloneDirectoryNotEmpty",
    "CloneFailed",
    "RepositoryError",
    "RepositoryLocalPathNotExists",
    "RepositoryNotInitialized",
    "CANCELLED_MESSAGE",
]

CANCELLED_MESSAGE = "operation cancelled by user request"


@dataclass(frozen=True, slots=True)
class ActiveOperationInProgress:
    """Another operation is running on this repository instance.

    Use a second instance to run operations side by side.
    """

    active: str = "operation"


@dataclass(frozen=True, slots=True)
class RepositoryNotInitialized:
    """The binding needed by the operation is missing.

    ``required`` is ``"remote"`` for clone and ``"local_path"`` for
    reference listing.
    """

    required: Literal["remote", "local_path"]


@dataclass(frozen=True, slots=True)
class RepositoryLocalPathNotExists:
    path: Path


@dataclass(frozen=True, slots=True)
class CloneDirectoryNotEmpty:
    path: Path


@dataclass(frozen=True, slots=True)
class CloneFailed:
    """git failed, could not be started, timed out or was cancelled.

    Attributes:
        message: Diagnostic text captured from git (stderr tail or last
            output), or ``CANCELLED_MESSAGE``.
        returncode: git's exit status, -1 when it never ran.
        cancelled: True when termination was requested through ``cancel()``.
    """

    message: str
    returncode: int = 1
    cancelled: bool = False


RepositoryError = (
    ActiveOperationInProgress
    | RepositoryNotInitialized
    | RepositoryLocalPathNotExists
    | CloneDirectoryNotEmpty
    | CloneFailed
)
