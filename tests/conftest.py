# topmark:header:start
#
#   project      : Plugline
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the Plugline test suite.

This file sets up global fixtures, typed mark helpers and the logging
configuration for test runs.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `plugline.config.MutableConfig` (mutable), then
      `freeze()` into a `plugline.config.Config`.
    - Do **not** mutate a frozen `Config`. If you need to tweak one, call
      `Config.thaw()`, edit the returned `MutableConfig`, then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from plugline.config import MutableConfig, logging
from plugline.demo.app import build_endpoint
from plugline.http.request import Request
from plugline.pipeline.context import Conn

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from plugline.config import Config
    from plugline.endpoint import Endpoint

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.pipeline`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_routing: DecoratorType[Any] = as_typed_mark(pytest.mark.routing)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_plugline_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Plugline's runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    PLUGLINE_LOG_LEVEL in their shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture used to manipulate environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Route TRACE-level logging to stdout so pytest captures it per test.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an isolated working directory with ``root = true`` config.

    The ``plugline.toml`` stops upward config discovery, so files above the
    temporary directory never leak into the test.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "plugline.toml").write_text("root = true\n", encoding="utf-8")
    monkeypatch.chdir(cwd)
    return cwd


def make_mutable_config(**overrides: Any) -> MutableConfig:
    """Return a mutable builder from the bundled defaults with ``overrides`` applied.

    Args:
        **overrides (Any): Attribute overrides, e.g. ``strict_routes=True``.

    Returns:
        MutableConfig: A builder ready to be frozen or further edited.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and ``overrides``."""
    return make_mutable_config(**overrides).freeze()


def make_conn(
    path: str = "/",
    *,
    method: str = "GET",
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    view: str | None = "TestView",
) -> Conn:
    """Return a fresh conn for unit tests, with a view selected unless ``view`` is None."""
    conn = Conn(method=method, path=path, params=dict(params or {}), req_headers=dict(headers or {}))
    return conn.put_view(view) if view else conn


@pytest.fixture(scope="session")
def demo_endpoint() -> Endpoint:
    """The demo application built from the bundled defaults."""
    return build_endpoint(make_config())


def send(
    endpoint: Endpoint,
    method: str,
    target: str,
    *,
    headers: Mapping[str, str] | None = None,
    data: Mapping[str, Any] | None = None,
) -> Conn:
    """Run one exchange through ``endpoint`` and return the final conn."""
    return endpoint.call(Request.from_target(method, target, headers=headers, body_params=data))
