# topmark:header:start
#
#   project      : Plugline
#   file         : test_routes_cmd.py
#   file_relpath : tests/cli/test_routes_cmd.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `plugline routes` command.

The demo application declares three unreachable routes on purpose, so the
default listing warns and ``--check`` (or a strict router) fails with 65.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plugline.cli.commands.routes import format_routes
from plugline.core.exit_codes import ExitCode
from plugline.routing.router import Router
from tests.cli.conftest import assert_EXIT, assert_SUCCESS, assert_USAGE_ERROR, run_cli, run_cli_in
from tests.conftest import mark_cli

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


def _route_lines(result: Result) -> list[str]:
    return [line for line in result.output.splitlines() if line.strip() and not line.startswith("[")]


@mark_cli
def test_routes_lists_demo_table(isolation: Path) -> None:
    """Routes are listed in resolution order with helper, method, path, target."""
    result: Result = run_cli(["routes"])

    assert_SUCCESS(result)
    lines = _route_lines(result)
    assert lines[0].split() == ["page_path", "GET", "/", "PageController", ":index"]
    assert any(line.split()[-3:] == ["/jobs/*path_info", "->", "jobs_plug"] for line in lines)
    assert any("/users/:user_id/posts/:id/edit" in line for line in lines)


@mark_cli
def test_routes_warns_about_duplicates(isolation: Path) -> None:
    """Shadowed routes are reported as warnings."""
    result: Result = run_cli(["routes"])

    assert_SUCCESS(result)
    assert "[warning] GET / (RootController :index) is unreachable: shadowed by PageController :index" in (
        result.output
    )
    assert result.output.count("is unreachable") == 3


@mark_cli
def test_routes_quiet_hides_warnings(isolation: Path) -> None:
    """``-q`` keeps the listing but drops warnings."""
    result: Result = run_cli(["-q", "routes"])

    assert_SUCCESS(result)
    assert "unreachable" not in result.output


@mark_cli
def test_routes_method_filter(isolation: Path) -> None:
    """``--method`` keeps routes serving that method (forwards serve any)."""
    result: Result = run_cli(["-q", "routes", "--method", "delete"])

    assert_SUCCESS(result)
    methods = {line.split()[1] for line in _route_lines(result)}
    assert methods == {"DELETE", "*"}


@mark_cli
def test_routes_method_filter_rejects_unknown_method(isolation: Path) -> None:
    """An unknown method is a usage error."""
    result: Result = run_cli(["routes", "--method", "FETCH"])
    assert_USAGE_ERROR(result)


@mark_cli
def test_routes_check_fails_on_duplicates(isolation: Path) -> None:
    """``--check`` turns duplicate warnings into exit status 65."""
    result: Result = run_cli(["routes", "--check"])

    assert_EXIT(result, ExitCode.ROUTE_CONFLICT)
    assert "3 unreachable duplicate route(s)" in result.output


@mark_cli
def test_strict_router_from_config(tmp_path: Path) -> None:
    """``[router] strict = true`` makes the demo factory fail."""
    (tmp_path / "plugline.toml").write_text("root = true\n\n[router]\nstrict = true\n", encoding="utf-8")
    result: Result = run_cli_in(tmp_path, ["routes"])

    assert_EXIT(result, ExitCode.ROUTE_CONFLICT)


@mark_cli
def test_strict_flag_overrides_config(tmp_path: Path) -> None:
    """``--no-strict`` wins over the config file, ``--strict`` over the defaults."""
    (tmp_path / "plugline.toml").write_text("root = true\n\n[router]\nstrict = true\n", encoding="utf-8")

    assert_SUCCESS(run_cli_in(tmp_path, ["--no-strict", "routes"]))
    assert_EXIT(run_cli_in(tmp_path, ["--no-config", "--strict", "routes"]), ExitCode.ROUTE_CONFLICT)


def test_format_routes_aligns_columns() -> None:
    """Columns are padded to the widest entry."""

    def show(conn, _params):  # type: ignore[no-untyped-def]
        return conn

    router = Router()
    router.get("/", show, "index", as_="home")
    router.delete("/things/:id", show, "delete", as_="thing")

    lines = format_routes(list(router.build()))
    assert lines == [
        " home_path  GET     /            show :index",
        "thing_path  DELETE  /things/:id  show :delete",
    ]
    assert format_routes([]) == []
