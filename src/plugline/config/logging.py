# topmark:header:start
#
#   project      : Plugline
#   file         : logging.py
#   file_relpath : src/plugline/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Internal logging for Plugline.

Engine modules log through `get_logger(__name__)`. Exchanges are logged at
INFO (``GET /hello -> 200``), route and config findings at WARNING, and the
per-step, per-dispatch detail at TRACE, a level below DEBUG.

Logging is independent of the CLI's ``-v/-q`` program output: the level comes
from ``PLUGLINE_LOG_LEVEL`` and defaults to CRITICAL, so a plain run prints
nothing but its results.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV: Final[str] = "PLUGLINE_LOG_LEVEL"

LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"


class PluglineLogger(logging.Logger):
    """Logger with a `trace` method for the TRACE level."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log ``msg % args`` at TRACE level."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, extra=extra, stacklevel=2)


logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.setLoggerClass(PluglineLogger)


# Lowest level first; a record takes the color of the highest threshold it reaches
_LEVEL_COLORS: Final[tuple[tuple[int, Callable[[str], str]], ...]] = (
    (TRACE_LEVEL, chalk.blue),
    (logging.DEBUG, chalk.gray),
    (logging.INFO, chalk.green),
    (logging.WARNING, chalk.yellow),
    (logging.ERROR, chalk.red),
    (logging.CRITICAL, chalk.red_bright),
)


class ChalkFormatter(logging.Formatter):
    """Formatter coloring each record by severity."""

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` and color it by its level."""
        message = super().format(record)
        color: Callable[[str], str] = chalk.dim
        for threshold, colorizer in _LEVEL_COLORS:
            if record.levelno >= threshold:
                color = colorizer
        return color(message)


_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_log_level(value: str) -> int | None:
    """Return the level for a name (``"trace"``, ``"INFO"``) or a number (``"10"``), else None."""
    text = value.strip().upper()
    if text.isdigit():
        return int(text)
    return _LEVEL_NAMES.get(text)


def resolve_env_log_level() -> int | None:
    """Return the level named by ``PLUGLINE_LOG_LEVEL``, or None when unset or invalid."""
    value = os.environ.get(LOG_LEVEL_ENV)
    return parse_log_level(value) if value else None


def setup_logging(level: int | None = None) -> None:
    """Install a single colored stdout handler on the root logger.

    Args:
        level (int | None): Log level; None consults ``PLUGLINE_LOG_LEVEL`` and
            falls back to CRITICAL. Below INFO, records carry their logger
            name and line number.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> PluglineLogger:
    """Return the `PluglineLogger` named ``name`` (usually ``__name__``)."""
    return cast("PluglineLogger", logging.getLogger(name))
