"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .errors import print_repository_error, repository_error_exit_code
from .logging import configure_logging

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "configure_logging",
    "print_repository_error",
    "repository_error_exit_code",
]
