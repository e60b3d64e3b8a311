"""Configuration utilities for vow.

The library itself needs no configuration. The only setting read from the
environment is the level used by the opt-in console logging helpers in
``vow.logging``.
"""

import logging
import os

from vow.errors import InvalidLogLevelError

LOG_LEVEL_ENV = "VOW_LOG_LEVEL"  # pragma: no mutate


def get_log_level(default: int = logging.WARNING) -> int:
    """Get the console log level from the environment.

    The ``VOW_LOG_LEVEL`` variable may hold a level name such as ``debug`` or
    ``WARNING`` (case-insensitive) or a non-negative integer.

    Args:
        default: Level returned when the variable is unset or blank.

    Returns:
        The numeric logging level.

    Raises:
        InvalidLogLevelError: If the variable holds an unknown level.
    """
    if not (raw := os.environ.get(LOG_LEVEL_ENV, "").strip()):
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise InvalidLogLevelError(LOG_LEVEL_ENV, raw)
    return level
