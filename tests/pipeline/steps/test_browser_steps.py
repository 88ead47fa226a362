# topmark:header:start
#
#   project      : Plugline
#   file         : test_browser_steps.py
#   file_relpath : tests/pipeline/steps/test_browser_steps.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `SecureBrowserHeadersStep` and `AssignStep`."""

from __future__ import annotations

import pytest

from plugline.pipeline.steps.browser import (
    SECURE_BROWSER_HEADERS,
    AssignStep,
    SecureBrowserHeadersStep,
)
from tests.conftest import make_conn, mark_pipeline


@mark_pipeline
def test_secure_headers_defaults() -> None:
    """All default security headers are set, in order."""
    step = SecureBrowserHeadersStep()
    out = step(make_conn(), step.init(None))
    assert out.resp_headers == SECURE_BROWSER_HEADERS


@mark_pipeline
def test_secure_headers_overrides_and_removal() -> None:
    """Extra headers override defaults; ``None`` removes a header."""
    step = SecureBrowserHeadersStep()
    opts = step.init({"X-Frame-Options": "DENY", "x-download-options": None, "x-extra": "1"})
    out = step(make_conn(), opts)

    assert out.resp_header("x-frame-options") == "DENY"
    assert out.resp_header("x-download-options") is None
    assert out.resp_header("x-extra") == "1"


@mark_pipeline
def test_secure_headers_rejects_non_mapping() -> None:
    """Options other than a mapping are rejected at build time."""
    with pytest.raises(TypeError):
        SecureBrowserHeadersStep().init(["x-frame-options"])


@mark_pipeline
def test_assign_step() -> None:
    """`AssignStep` assigns a fixed ``(key, value)`` pair."""
    step = AssignStep()
    out = step(make_conn(), step.init(("section", "admin")))
    assert out.assigns["section"] == "admin"
    with pytest.raises(TypeError):
        step.init({"section": "admin"})
