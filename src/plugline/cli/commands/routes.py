# topmark:header:start
#
#   project      : Plugline
#   file         : routes.py
#   file_relpath : src/plugline/cli/commands/routes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline `routes` command.

Lists the route table of the application in resolution order, one route per
line (helper, method, path, target), followed by the build diagnostics. With
``--check`` the command fails when a route is unreachable because an earlier
route has the same method and path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from plugline.cli.cmd_common import build_endpoint, get_console, report_diagnostics
from plugline.cli.errors import PluglineRouteConflictError, PluglineUsageError
from plugline.core.errors import RouteConfigError
from plugline.http.methods import HttpMethod

if TYPE_CHECKING:
    from collections.abc import Sequence

    from plugline.routing.route import Route


def format_routes(routes: Sequence[Route], *, color: bool = False) -> list[str]:
    """Return aligned listing lines for ``routes``.

    Args:
        routes (Sequence[Route]): Routes in resolution order.
        color (bool): Colorize the HTTP methods.

    Returns:
        list[str]: One line per route, e.g. ``"page_path  GET  /  PageController :index"``.
    """
    rows = [
        (
            f"{route.helper}_path" if route.helper else "",
            route.method,
            route.path,
            route.describe_target(),
        )
        for route in routes
    ]
    if not rows:
        return []
    helper_w = max(len(r[0]) for r in rows)
    method_w = max(len(r[1].value) for r in rows)
    path_w = max(len(r[2]) for r in rows)
    lines: list[str] = []
    for helper, method, path, target in rows:
        # Pad on the plain text; color codes would skew the width
        padding = " " * (method_w - len(method.value))
        lines.append(
            f"{helper.rjust(helper_w)}  {method.styled(enable=color)}{padding}  "
            f"{path.ljust(path_w)}  {target}".rstrip()
        )
    return lines


@click.command(
    name="routes",
    help="List the routes of the application in resolution order.",
)
@click.option(
    "--method",
    "-m",
    "method",
    default=None,
    help="Only list routes serving this HTTP method (e.g. GET).",
)
@click.option(
    "--check",
    is_flag=True,
    default=False,
    help="Exit with status 65 when unreachable duplicate routes exist.",
)
def routes_command(*, method: str | None, check: bool) -> None:
    """List the routes of the application.

    Args:
        method (str | None): Optional method filter; forward routes (any method)
            always match.
        check (bool): Fail when duplicate routes exist.
    """
    ctx = click.get_current_context()
    console = get_console(ctx)
    table = build_endpoint(ctx).table

    routes = list(table)
    if method is not None:
        try:
            wanted = HttpMethod.parse(method)
        except RouteConfigError as exc:
            raise PluglineUsageError(str(exc)) from exc
        routes = [r for r in routes if r.method.accepts(wanted)]

    for line in format_routes(routes, color=bool(ctx.obj.get("color_enabled"))):
        console.print(line)

    report_diagnostics(ctx, table.diagnostics)

    if check:
        duplicates = table.find_duplicates()
        if duplicates:
            raise PluglineRouteConflictError(f"{len(duplicates)} unreachable duplicate route(s)")
