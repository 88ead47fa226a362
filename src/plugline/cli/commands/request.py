# topmark:header:start
#
#   project      : Plugline
#   file         : request.py
#   file_relpath : src/plugline/cli/commands/request.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline `request` command.

Runs a single request/response exchange through the application, in process,
and prints the outcome:

    $ plugline request GET "/hello?_format=text"
    HTTP 200 OK
    content-type: text/plain; charset=utf-8
    ...

    Welcome Back

With ``-q`` only the body is printed; with ``-v`` the flash messages and the
assigns computed by the steps are printed too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from plugline.cli.cmd_common import build_endpoint, get_console, get_effective_verbosity
from plugline.cli.errors import PluglineUsageError
from plugline.core.errors import RouteConfigError
from plugline.http.methods import HttpMethod
from plugline.http.request import Request

if TYPE_CHECKING:
    from collections.abc import Iterable


def parse_pairs(values: Iterable[str], sep: str, option: str) -> dict[str, str]:
    """Parse ``NAME<sep>VALUE`` strings into a dict.

    Raises:
        PluglineUsageError: If a value lacks the separator or has an empty name.
    """
    out: dict[str, str] = {}
    for raw in values:
        name, found, value = raw.partition(sep)
        if not found or not name.strip():
            raise PluglineUsageError(f"Invalid {option} value {raw!r}; expected NAME{sep}VALUE")
        out[name.strip()] = value.strip() if sep == ":" else value
    return out


@click.command(
    name="request",
    help="Run one request through the application and print the response.",
)
@click.argument("method")
@click.argument("target")
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    metavar="NAME: VALUE",
    help="Request header (repeatable), e.g. -H 'x-user-id: 1'.",
)
@click.option(
    "--data",
    "-d",
    "data",
    multiple=True,
    metavar="KEY=VALUE",
    help="Body param (repeatable), merged over the query params.",
)
def request_command(
    *,
    method: str,
    target: str,
    headers: tuple[str, ...],
    data: tuple[str, ...],
) -> None:
    """Run one exchange and print status, headers, flash and body.

    Args:
        method (str): Request method, e.g. ``GET``.
        target (str): Request target: a path with an optional query string.
        headers (tuple[str, ...]): ``NAME: VALUE`` header strings.
        data (tuple[str, ...]): ``KEY=VALUE`` body params.
    """
    ctx = click.get_current_context()
    console = get_console(ctx)
    vlevel = get_effective_verbosity(ctx)

    try:
        parsed = HttpMethod.parse(method)
    except RouteConfigError as exc:
        raise PluglineUsageError(str(exc)) from exc
    if parsed is HttpMethod.ANY:
        raise PluglineUsageError("METHOD must be a concrete HTTP method, not '*'")
    if not target.startswith("/"):
        raise PluglineUsageError(f"TARGET must start with '/', got {target!r}")
    request = Request.from_target(
        parsed.value,
        target,
        headers=parse_pairs(headers, ":", "--header"),
        body_params=parse_pairs(data, "=", "--data"),
    )
    conn = build_endpoint(ctx).call(request)
    response = conn.response
    assert response is not None

    if vlevel >= 0:
        status_line = f"HTTP {response.status} {response.reason}".rstrip()
        color = "green" if response.status < 400 else "red"
        console.print(console.styled(status_line, fg=color, bold=True))
        for name, value in response.headers:
            console.print(f"{name}: {value}")
        for kind, message in sorted(conn.flash.items()):
            console.print(console.styled(f"flash[{kind}]: {message}", fg="cyan"))
        if vlevel > 0:
            for key, value in conn.assigns.items():
                console.print(console.styled(f"assign[{key}]: {value!r}", dim=True))
        console.print()
    console.print(response.body)
