# topmark:header:start
#
#   project      : Plugline
#   file         : main.py
#   file_relpath : src/plugline/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click entry point of the ``plugline`` CLI.

Key ideas:
- Group-level options are parsed once and placed into ``ctx.obj``.
- Configuration and the application are resolved lazily by the subcommands
  (see `plugline.cli.cmd_common`).
- Program output goes through a `ClickConsole`; internal logging is
  configured from ``PLUGLINE_LOG_LEVEL``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from plugline.cli.commands.dump_config import dump_config_command
from plugline.cli.commands.pipelines import pipelines_command
from plugline.cli.commands.request import request_command
from plugline.cli.commands.routes import routes_command
from plugline.cli.commands.version import version_command
from plugline.cli.console import ClickConsole
from plugline.cli.options import (
    ColorMode,
    common_color_options,
    common_config_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from plugline.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from plugline.cli.console import ConsoleLike
    from plugline.config.logging import PluglineLogger

logger: PluglineLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    # Internal logging is driven by the environment, not by -v/-q
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=ColorMode(effective_color_mode))
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Plugline CLI: inspect and exercise a Plugline application.",
)
@common_verbose_options
@common_color_options
@common_config_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
    app_factory: str | None,
    strict: bool | None,
) -> None:
    """Entry point for the Plugline CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    ctx.obj["config_paths"] = tuple(config_paths)
    ctx.obj["no_config"] = no_config
    ctx.obj["app_factory"] = app_factory
    ctx.obj["strict"] = strict
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'plugline routes' to list the routes of the application.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(routes_command)

cli.add_command(pipelines_command)

cli.add_command(request_command)

cli.add_command(dump_config_command)

if __name__ == "__main__":
    cli()
