"""Logging setup for the command line front end.

Only the `filterkit` logger hierarchy is touched; the library itself never
installs handlers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "filterkit"


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    handlers: list[logging.Handler]
    propagate: bool


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> LoggingState:
    """Send `filterkit` logs to stderr through rich; returns the previous state."""
    logger = logging.getLogger(_LOGGER_NAME)
    previous = LoggingState(
        level=logger.level, handlers=list(logger.handlers), propagate=logger.propagate
    )
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbosity >= 2,
        rich_tracebacks=verbosity >= 2,
    )
    logger.handlers = [handler]
    logger.setLevel(_level_for_verbosity(verbosity))
    logger.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(_LOGGER_NAME)
    logger.handlers = list(state.handlers)
    logger.setLevel(state.level)
    logger.propagate = state.propagate
