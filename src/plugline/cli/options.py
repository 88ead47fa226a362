# topmark:header:start
#
#   project      : Plugline
#   file         : options.py
#   file_relpath : src/plugline/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities for the Plugline CLI.

This module centralizes reusable options (verbosity, color, configuration)
and their resolution logic, so the group and the commands can stay thin.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from enum import Enum
from typing import ParamSpec, TypeVar

import click

from plugline.cli.errors import PluglineUsageError

P = ParamSpec("P")
R = TypeVar("R")


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output verbosity from ``-v`` and ``-q`` counts.

    Args:
        verbose_count: Number of times ``-v`` is passed.
        quiet_count: Number of times ``-q`` is passed.

    Returns:
        ``verbose_count`` as a positive level, ``-quiet_count`` as a negative
        level, or 0 (terse) when neither is given.

    Raises:
        PluglineUsageError: If both verbose and quiet flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise PluglineUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    if verbose_count:
        return min(verbose_count, 2)
    return -min(quiet_count, 2)


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add -v/--verbose and -q/--quiet (counted, mutually exclusive) to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to twice for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress output. Specify up to twice for even less.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Args:
        cli_mode: Explicit color mode from CLI options (auto, always, never).
        stdout_isatty: Whether stdout is a TTY; if None, auto-detected.

    Returns:
        True if color output should be enabled, False otherwise.

    Behavior:
        Honors --color and --no-color CLI flags, then the FORCE_COLOR and
        NO_COLOR environment variables, then whether stdout is a TTY.
    """
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add --color (auto, always, never) and --no-color to a command."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the configuration options shared by every command.

    Adds ``--config`` (repeatable extra TOML files, merged last), ``--no-config``
    (skip discovery of ``plugline.toml``/``pyproject.toml``), ``--app``
    (application factory ``module:attr``) and ``--strict/--no-strict``
    (duplicate routes are fatal).
    """
    f = click.option(
        "--config",
        "-c",
        "config_paths",
        multiple=True,
        type=click.Path(dir_okay=False, path_type=str),
        help="Additional TOML config file(s) to merge, in order.",
    )(f)
    f = click.option(
        "--no-config",
        is_flag=True,
        default=False,
        help="Ignore plugline.toml and pyproject.toml files found in the working directory.",
    )(f)
    f = click.option(
        "--app",
        "app_factory",
        default=None,
        metavar="MODULE:ATTR",
        help="Application factory, called with the resolved configuration.",
    )(f)
    f = click.option(
        "--strict/--no-strict",
        "strict",
        default=None,
        help="Fail on unreachable duplicate routes instead of warning.",
    )(f)
    return f
