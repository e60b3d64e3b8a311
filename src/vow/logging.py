"""Console logging helpers for vow.

The library only ever emits records through ``logging.getLogger(__name__)``
loggers under the ``vow`` namespace and never configures logging on import.
Applications that want to watch settlements and continuation failures while
debugging can attach a Rich console handler with the helpers below.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from vow.config import get_log_level

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "vow"
CONSOLE_HANDLER_NAME = "vow-console"

CONSOLE_FORMAT = "%(prefix)s%(message)s"
DEBUG_FORMAT = "%(prefix)s%(name)s [%(threadName)s]: %(message)s"
"""Debug format: adds the emitting module and the settling thread."""


class ForeignLoggerPrefixFilter(logging.Filter):
    """Annotate records from other libraries with a short prefix.

    Records whose logger name is outside the ``vow`` namespace get
    ``record.prefix`` set to a bracketed token like ``"[asyncio] "``; records
    from vow get an empty prefix. The filter never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == PROJECT_PREFIX or name.startswith(PROJECT_PREFIX + "."):
            record.prefix = ""
        else:
            record.prefix = f"[{name.split('.')[0]}] "
        return True


def config_console_handler(
    level: int = logging.INFO, *, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build a stderr RichHandler for watching vow's log records.

    Args:
        level: Minimum level shown. Ignored in debug mode, which shows everything.
        debug_mode: Show DEBUG records with timestamps, the emitting module and
            thread, and Rich tracebacks for continuation failures.
        color: Enable color output when True.

    Returns:
        RichHandler: The configured, not yet attached, handler.
    """
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system="auto" if color else None, stderr=True),
        show_time=debug_mode,
        show_path=False,
        markup=False,
        rich_tracebacks=debug_mode,
    )
    handler.setFormatter(
        logging.Formatter(fmt=DEBUG_FORMAT if debug_mode else CONSOLE_FORMAT)
    )
    handler.addFilter(ForeignLoggerPrefixFilter())
    return handler


def install_console_logging(
    level: int | None = None, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Attach a console handler to the ``vow`` logger.

    Calling this again replaces the handler installed by the previous call
    rather than stacking another one.

    Args:
        level: Console level. When None, read from ``VOW_LOG_LEVEL`` via
            ``vow.config.get_log_level``.
        debug_mode: Passed through to ``config_console_handler``.
        color: Passed through to ``config_console_handler``.

    Returns:
        RichHandler: The installed handler.

    Raises:
        InvalidLogLevelError: If ``level`` is None and ``VOW_LOG_LEVEL`` is invalid.
    """
    if level is None:
        level = get_log_level()

    logger = logging.getLogger(PROJECT_PREFIX)
    for existing in list(logger.handlers):
        if existing.get_name() == CONSOLE_HANDLER_NAME:
            logger.removeHandler(existing)

    handler = config_console_handler(level, debug_mode=debug_mode, color=color)
    handler.set_name(CONSOLE_HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(handler.level)
    return handler
