# topmark:header:start
#
#   project      : Plugline
#   file         : test_resource_step.py
#   file_relpath : tests/pipeline/steps/test_resource_step.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `FetchResourceStep`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from plugline.core.errors import StepContractError
from plugline.dispatch.results import Err, Ok
from plugline.pipeline.steps.resource import FetchResourceStep
from tests.conftest import make_conn, mark_pipeline

if TYPE_CHECKING:
    from plugline.pipeline.context import Conn

STORE: dict[str, str] = {"1": "first post"}


def fetch(resource_id: str) -> Ok | Err:
    value = STORE.get(resource_id)
    return Ok(value) if value is not None else Err("not_found")


STEP = FetchResourceStep()


@mark_pipeline
def test_found_resource_is_assigned() -> None:
    """``Ok(resource)`` is assigned under ``assign_as``."""
    opts = STEP.init({"fetch": fetch, "assign_as": "post"})
    out: Conn = STEP(make_conn(params={"id": "1"}), opts)
    assert out.assigns["post"] == "first post"
    assert not out.halted


@mark_pipeline
def test_custom_param() -> None:
    """The id may come from another param."""
    opts = STEP.init({"fetch": fetch, "param": "post_id"})
    out: Conn = STEP(make_conn(params={"post_id": "1"}), opts)
    assert out.assigns["post"] == "first post"


@mark_pipeline
def test_missing_resource_answers_404() -> None:
    """``Err("not_found")`` answers 404 and halts."""
    opts = STEP.init({"fetch": fetch})
    out: Conn = STEP(make_conn(params={"id": "99"}), opts)

    assert out.halted
    assert out.response is not None
    assert (out.response.status, out.response.body) == (404, "Not found")


@mark_pipeline
def test_missing_param_answers_404() -> None:
    """A request without the id param is treated as not found."""
    out: Conn = STEP(make_conn(), STEP.init({"fetch": fetch}))
    assert out.halted
    assert out.response is not None
    assert out.response.status == 404


@mark_pipeline
def test_missing_resource_with_redirect() -> None:
    """With ``redirect_to`` a missing resource flashes and redirects."""
    opts = STEP.init({"fetch": fetch, "assign_as": "message", "redirect_to": "/"})
    out: Conn = STEP(make_conn(params={"id": "99"}), opts)

    assert out.halted
    assert out.get_flash("info") == "That message wasn't found"
    assert out.response is not None
    assert out.response.location == "/"


@mark_pipeline
def test_unexpected_result_is_a_contract_violation() -> None:
    """Any result other than Ok or Err("not_found") is an error."""

    def broken(_resource_id: str) -> Any:
        return Err("timeout")

    with pytest.raises(StepContractError):
        STEP(make_conn(params={"id": "1"}), STEP.init({"fetch": broken}))


@mark_pipeline
def test_init_validates_options() -> None:
    """``fetch`` must be callable and ``redirect_to`` a local path."""
    with pytest.raises(TypeError):
        STEP.init({"fetch": "not callable"})
    with pytest.raises(TypeError):
        STEP.init(["fetch"])
    with pytest.raises(ValueError):
        STEP.init({"fetch": fetch, "redirect_to": "//elsewhere"})
