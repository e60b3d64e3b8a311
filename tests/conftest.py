"""Global pytest fixtures for vow."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from tests.helpers.recorders import CallRecorder

pytest_plugins = [
    "tests.fixtures.deferreds",
]


@pytest.fixture
def recorder() -> CallRecorder:
    """A fresh call recorder for observing continuation invocations."""
    return CallRecorder()


@pytest.fixture
def vow_logger() -> Iterator[logging.Logger]:
    """The ``vow`` logger, with its handlers and level restored afterwards."""
    logger = logging.getLogger("vow")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
