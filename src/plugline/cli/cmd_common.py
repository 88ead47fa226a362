# topmark:header:start
#
#   project      : Plugline
#   file         : cmd_common.py
#   file_relpath : src/plugline/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by the Plugline subcommands.

The group stores the parsed global options in ``ctx.obj``; commands call
`build_config` and `build_endpoint` to resolve them lazily, so commands that
need no configuration (``version``) never touch the file system.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from plugline.cli.app_loader import load_endpoint
from plugline.cli.errors import PluglineConfigError
from plugline.config.logging import get_logger
from plugline.config.model import MutableConfig
from plugline.core.diagnostics import DiagnosticLevel
from plugline.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from plugline.cli.console import ConsoleLike
    from plugline.config.logging import PluglineLogger
    from plugline.config.model import Config
    from plugline.core.diagnostics import Diagnostic
    from plugline.endpoint import Endpoint

logger: PluglineLogger = get_logger(__name__)


def get_console(ctx: click.Context) -> ConsoleLike:
    """Return the console stored on the context by the group."""
    ctx.ensure_object(dict)
    return ctx.obj["console"]


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity (negative when quiet, 0 terse)."""
    return int(ctx.obj.get("verbosity_level", 0))


def report_diagnostics(
    ctx: click.Context,
    diagnostics: Iterable[Diagnostic],
) -> None:
    """Print diagnostics to stderr; info-level ones only with ``-v``."""
    console = get_console(ctx)
    vlevel = get_effective_verbosity(ctx)
    for diag in diagnostics:
        if diag.level is DiagnosticLevel.INFO and vlevel < 1:
            continue
        if vlevel < 0 and diag.level is not DiagnosticLevel.ERROR:
            continue
        console.warn(diag.render())


def build_config(ctx: click.Context) -> Config:
    """Resolve the effective configuration from the group options.

    Layers, lowest first: bundled defaults, discovered config files (unless
    ``--no-config``), ``--config`` files, then ``--app``/``--strict``.

    Raises:
        PluglineConfigError: If a config file is missing or malformed.
    """
    ctx.ensure_object(dict)
    cached: Config | None = ctx.obj.get("config")
    if cached is not None:
        return cached

    config_paths: tuple[str, ...] = ctx.obj.get("config_paths", ())
    for raw in config_paths:
        if not Path(raw).is_file():
            raise PluglineConfigError(f"Config file not found: {raw}")
    try:
        draft = MutableConfig.load_merged(
            extra_config_files=[Path(p) for p in config_paths],
            no_config=bool(ctx.obj.get("no_config", False)),
        )
    except ConfigError as exc:
        raise PluglineConfigError(str(exc)) from exc

    draft.apply_args(
        {
            "app": ctx.obj.get("app_factory"),
            "strict": ctx.obj.get("strict"),
        }
    )
    config = draft.freeze()
    logger.trace("Effective config: %s", config)
    report_diagnostics(ctx, config.diagnostics)
    ctx.obj["config"] = config
    return config


def build_endpoint(ctx: click.Context) -> Endpoint:
    """Build the application endpoint for the effective configuration."""
    ctx.ensure_object(dict)
    endpoint: Endpoint | None = ctx.obj.get("endpoint")
    if endpoint is None:
        endpoint = load_endpoint(build_config(ctx))
        ctx.obj["endpoint"] = endpoint
    return endpoint
