# topmark:header:start
#
#   project      : Plugline
#   file         : errors.py
#   file_relpath : src/plugline/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the Plugline CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes (see `plugline.core.exit_codes.ExitCode`).

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default.
"""

from __future__ import annotations

from typing import IO, Any

import click

from plugline.core.exit_codes import ExitCode


class PluglineCliError(click.ClickException):
    """Base class for all Plugline CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized later by `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(self.format_message())
                return
        super().show(file)


class PluglineUsageError(PluglineCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class PluglineConfigError(PluglineCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class PluglineAppNotFoundError(PluglineCliError):
    """Error when the application factory cannot be imported or called."""

    exit_code = ExitCode.APP_NOT_FOUND


class PluglineRouteConflictError(PluglineCliError):
    """Error for unreachable duplicate routes (``routes --check``, strict tables)."""

    exit_code = ExitCode.ROUTE_CONFLICT


class PluglinePipelineError(PluglineCliError):
    """Error for invalid pipelines or routes found while building the application."""

    exit_code = ExitCode.PIPELINE_ERROR
