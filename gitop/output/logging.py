"""Logging setup for the CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the entry point.
"""

from __future__ import annotations

import logging

__all__ = ["configure_logging"]

_FORMAT = "%(name)s: %(message)s"


def configure_logging(*, verbose: bool = False) -> None:
    """Route ``gitop`` log records to stderr through Rich.

    ``verbose`` lowers the level to DEBUG (git command lines, exit
    statuses, cancellation); otherwise only warnings are shown.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter(_FORMAT))

    logger = logging.getLogger("gitop")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
