# topmark:header:start
#
#   project      : Plugline
#   file         : test_locale_step.py
#   file_relpath : tests/pipeline/steps/test_locale_step.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `LocaleStep` reference step."""

from __future__ import annotations

from typing import Any

import pytest

from plugline.pipeline.steps.locale import LocaleOptions, LocaleStep
from tests.conftest import make_conn, mark_pipeline, parametrize

STEP = LocaleStep()


@mark_pipeline
@parametrize(
    "options, expected",
    [
        (None, LocaleOptions("en", ("en", "fr", "de"))),
        ("fr", LocaleOptions("fr", ("en", "fr", "de"))),
        ({"default": "de", "locales": ["de", "nl"]}, LocaleOptions("de", ("de", "nl"))),
    ],
)
def test_init_normalizes_options(options: Any, expected: LocaleOptions) -> None:
    """None, a locale string and a mapping are all accepted."""
    assert STEP.init(options) == expected


@mark_pipeline
@parametrize(
    "options, error",
    [
        ("xx", ValueError),
        ({"default": "en", "locales": []}, ValueError),
        (42, TypeError),
        ({"default": "en", "locales": ["en", 3]}, TypeError),
    ],
)
def test_init_rejects_invalid_options(options: Any, error: type[Exception]) -> None:
    """The default must be an allowed locale; locales must be strings."""
    with pytest.raises(error):
        STEP.init(options)


@mark_pipeline
@parametrize(
    "params, expected",
    [
        ({}, "en"),
        ({"locale": "fr"}, "fr"),
        ({"locale": "xx"}, "en"),
        ({"locale": {"nested": "fr"}}, "en"),
    ],
)
def test_call_assigns_requested_or_default_locale(params: dict[str, Any], expected: str) -> None:
    """An allowed requested locale wins; anything else selects the default."""
    opts = STEP.init(None)
    out = STEP(make_conn(params=params), opts)
    assert out.assigns["locale"] == expected
    assert not out.halted
