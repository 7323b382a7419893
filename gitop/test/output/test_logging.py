"""Tests for gitop.output.logging module."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from gitop.output.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    logger = logging.getLogger("gitop")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestConfigureLogging:
    def test_default_level_is_warning(self) -> None:
        configure_logging()
        logger = logging.getLogger("gitop")
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("gitop.git.repository").isEnabledFor(logging.DEBUG)

    def test_single_rich_handler(self) -> None:
        configure_logging()
        configure_logging(verbose=True)

        handlers = logging.getLogger("gitop").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
