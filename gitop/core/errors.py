"""Exit codes for CLI commands.

Every repository failure kind maps to one of these codes (see
``gitop.output.errors``). Values are process exit codes and must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad arguments, non-empty clone target, busy repository)
    - 2: Environment error (git missing, invalid config)
    - 3: Git error (git exited with a failure status)
    - 4: Network error (remote unreachable, authentication refused)
    - 5: I/O error (working copy vanished, permission denied)
    - 130: Cancelled by the user (mirrors the shell's SIGINT status)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    CANCELLED = 130

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
