# topmark:header:start
#
#   project      : Plugline
#   file         : pipelines.py
#   file_relpath : src/plugline/cli/commands/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline `pipelines` command: list named pipelines and their steps."""

from __future__ import annotations

import click

from plugline.cli.cmd_common import build_endpoint, get_console, get_effective_verbosity


@click.command(
    name="pipelines",
    help="List the named pipelines of the application and their steps.",
)
def pipelines_command() -> None:
    """List the named pipelines and, with ``-v``, the routes using each one."""
    ctx = click.get_current_context()
    console = get_console(ctx)
    table = build_endpoint(ctx).table
    vlevel = get_effective_verbosity(ctx)

    for name, pipeline in table.pipelines.items():
        console.print(console.styled(name, bold=True))
        if not len(pipeline):
            console.print("    (no steps)")
        for entry in pipeline:
            suffix = f"  (only {', '.join(sorted(entry.actions))})" if entry.actions else ""
            console.print(f"    {entry.step.name}{suffix}")
        if vlevel > 0:
            users = sum(1 for route in table if name in route.pipelines)
            console.print(console.styled(f"    used by {users} route(s)", dim=True))
