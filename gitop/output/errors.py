"""Error presentation utilities.

Centralized repository error formatting and exit code mapping.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from gitop.core.errors import ErrorCode
from gitop.git.errors import (
    ActiveOperationInProgress,
    CloneDirectoryNotEmpty,
    CloneFailed,
    RepositoryError,
    RepositoryLocalPathNotExists,
    RepositoryNotInitialized,
)
from gitop.output.console import Style

if TYPE_CHECKING:
    from gitop.output.console import ConsoleProtocol

__all__ = ["print_repository_error", "repository_error_exit_code"]

# stderr fragments git prints when the remote cannot be reached or refuses us.
_NETWORK_PATTERNS = re.compile(
    r"could not resolve host|unable to access|connection (refused|timed out)"
    r"|authentication failed|could not read from remote repository",
    re.IGNORECASE,
)


def print_repository_error(error: RepositoryError, console: ConsoleProtocol) -> None:
    """Print a repository error with a hint where one helps."""
    match error:
        case ActiveOperationInProgress(active=active):
            console.error(f"another operation is in progress ({active})")
            console.print("hint: use a separate repository instance", Style.DIM)
        case RepositoryNotInitialized(required="remote"):
            console.error("repository has no remote to clone from")
        case RepositoryNotInitialized():
            console.error("repository has no working copy yet")
            console.print("hint: clone it first", Style.DIM)
        case RepositoryLocalPathNotExists(path=path):
            console.error(f"working copy no longer exists: {path}")
        case CloneDirectoryNotEmpty(path=path):
            console.error(f"destination is not an empty directory: {path}")
        case CloneFailed(cancelled=True):
            console.warning("cancelled")
        case CloneFailed(message=message, returncode=rc):
            console.error(f"git failed (exit {rc})")
            for line in message.splitlines():
                console.print(line, Style.DIM)


def repository_error_exit_code(error: RepositoryError) -> int:
    """Get exit code for a repository error."""
    match error:
        case ActiveOperationInProgress() | CloneDirectoryNotEmpty() | RepositoryNotInitialized():
            return int(ErrorCode.USER_ERROR)
        case RepositoryLocalPathNotExists():
            return int(ErrorCode.IO_ERROR)
        case CloneFailed(cancelled=True):
            return int(ErrorCode.CANCELLED)
        case CloneFailed(returncode=-1):
            return int(ErrorCode.ENV_ERROR)
        case CloneFailed(message=message) if _NETWORK_PATTERNS.search(message):
            return int(ErrorCode.NETWORK_ERROR)
        case CloneFailed():
            return int(ErrorCode.GIT_ERROR)
    return int(ErrorCode.GIT_ERROR)
