# topmark:header:start
#
#   project      : Plugline
#   file         : test_request_cmd.py
#   file_relpath : tests/cli/test_request_cmd.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `plugline request` command (one in-process exchange)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from plugline.cli.commands.request import parse_pairs
from plugline.cli.errors import PluglineUsageError
from tests.cli.conftest import assert_SUCCESS, assert_USAGE_ERROR, run_cli
from tests.conftest import mark_cli

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


@mark_cli
def test_request_prints_status_headers_and_body(isolation: Path) -> None:
    """The default output has a status line, headers, flash, then the body."""
    result: Result = run_cli(["request", "GET", "/hello?_format=text"])

    assert_SUCCESS(result)
    lines = result.output.splitlines()
    assert lines[0] == "HTTP 200 OK"
    assert "content-type: text/plain; charset=utf-8" in lines
    assert "x-frame-options: SAMEORIGIN" in lines
    assert "flash[info]: Welcome to Plugline, from flash info!" in lines
    assert lines[-1] == "Welcome Back"


@mark_cli
def test_request_quiet_prints_body_only(isolation: Path) -> None:
    """``-q`` prints the response body alone."""
    result: Result = run_cli(["-q", "request", "get", "/hello/world?_format=text"])

    assert_SUCCESS(result)
    assert result.output == "Hello world\n"


@mark_cli
def test_request_verbose_prints_assigns(isolation: Path) -> None:
    """``-v`` adds the assigns computed by the steps."""
    result: Result = run_cli(["-v", "request", "GET", "/?locale=de"])

    assert_SUCCESS(result)
    assert "assign[locale]: 'de'" in result.output


@mark_cli
def test_request_headers_reach_the_application(isolation: Path) -> None:
    """``-H`` headers authenticate the demo user."""
    anonymous: Result = run_cli(["request", "GET", "/messages/1"])
    assert_SUCCESS(anonymous)
    assert anonymous.output.splitlines()[0] == "HTTP 302 Found"
    assert "location: /" in anonymous.output
    assert "flash[info]: You must be logged in" in anonymous.output

    owner: Result = run_cli(["request", "-H", "x-user-id: 1", "GET", "/messages/1"])
    assert_SUCCESS(owner)
    assert "<p>Welcome aboard</p>" in owner.output


@mark_cli
def test_request_data_becomes_params(isolation: Path) -> None:
    """``-d`` body params are merged into the params."""
    result: Result = run_cli(["request", "-d", "name=cat.png", "POST", "/api/v1/images"])

    assert_SUCCESS(result)
    assert result.output.splitlines()[0] == "HTTP 201 Created"
    assert '{"created": "image"}' in result.output


@mark_cli
def test_request_error_statuses_still_succeed(isolation: Path) -> None:
    """A 404 is a valid outcome of the exchange, not a CLI failure."""
    result: Result = run_cli(["request", "GET", "/nope"])

    assert_SUCCESS(result)
    assert result.output.splitlines()[0] == "HTTP 404 Not Found"


@mark_cli
@pytest.mark.parametrize(
    "argv",
    [
        ["request", "GET", "hello"],
        ["request", "-H", "no-colon", "GET", "/"],
        ["request", "-d", "=value", "POST", "/api/v1/images"],
        ["request", "FETCH", "/"],
    ],
)
def test_request_usage_errors(isolation: Path, argv: list[str]) -> None:
    """Malformed targets, headers, data and methods are usage errors."""
    assert_USAGE_ERROR(run_cli(argv))


def test_parse_pairs() -> None:
    """Header values are stripped; data values are kept verbatim."""
    assert parse_pairs(["X-User-Id:  1 "], ":", "--header") == {"X-User-Id": "1"}
    assert parse_pairs(["q= a b"], "=", "--data") == {"q": " a b"}
    with pytest.raises(PluglineUsageError):
        parse_pairs(["novalue"], "=", "--data")
