# topmark:header:start
#
#   project      : Plugline
#   file         : dump_config.py
#   file_relpath : src/plugline/cli/commands/dump_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline `dump-config` command.

Emits the effective configuration as TOML after applying the bundled defaults,
discovered config files, ``--config`` files and CLI overrides. The output is
wrapped between ``# === BEGIN ===`` and ``# === END ===`` markers for easy
parsing in tests or tooling. ``--pyproject`` nests the tables under
``[tool.plugline]`` so the output can be pasted into ``pyproject.toml``.
"""

from __future__ import annotations

import click

from plugline.cli.cmd_common import build_config, get_console, get_effective_verbosity
from plugline.config.io import nest_toml_under_section, to_toml
from plugline.config.logging import get_logger
from plugline.constants import PYPROJECT_TOOL_SECTION

logger = get_logger(__name__)

BEGIN_MARKER = "# === BEGIN ==="
END_MARKER = "# === END ==="


@click.command(
    name="dump-config",
    help="Dump the final merged Plugline configuration as TOML.",
)
@click.option(
    "--pyproject",
    is_flag=True,
    default=False,
    help="Nest the output under [tool.plugline] for use in pyproject.toml.",
)
def dump_config_command(*, pyproject: bool) -> None:
    """Dump the final merged configuration as TOML.

    Args:
        pyproject (bool): Nest the tables under ``[tool.plugline]``.
    """
    ctx = click.get_current_context()
    console = get_console(ctx)
    config = build_config(ctx)

    document = to_toml(config.to_toml_dict())
    if pyproject:
        document = nest_toml_under_section(document, f"tool.{PYPROJECT_TOOL_SECTION}")
    logger.trace("Dumping config:\n%s", document)

    if get_effective_verbosity(ctx) > 0:
        console.print(console.styled("Plugline Config Dump:", bold=True, underline=True))
        for path in config.config_files:
            console.print(f"# from: {path}")
    console.print(BEGIN_MARKER)
    console.print(document.rstrip("\n"))
    console.print(END_MARKER)
