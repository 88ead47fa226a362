# topmark:header:start
#
#   project      : Plugline
#   file         : version.py
#   file_relpath : src/plugline/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline `version` command.

Prints the current Plugline version as installed in the active Python environment.
"""

from __future__ import annotations

import click

from plugline.cli.cmd_common import get_console, get_effective_verbosity
from plugline.constants import PLUGLINE_VERSION


@click.command(
    name="version",
    help="Show the current version of Plugline.",
)
def version_command() -> None:
    """Show the current version of Plugline."""
    ctx = click.get_current_context()
    console = get_console(ctx)

    if get_effective_verbosity(ctx) > 0:
        console.print(console.styled("Plugline version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(PLUGLINE_VERSION, bold=True)}")
    else:
        console.print(console.styled(PLUGLINE_VERSION, bold=True))
