# topmark:header:start
#
#   project      : Plugline
#   file         : test_conn.py
#   file_relpath : tests/pipeline/test_conn.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `Conn` connection model and its update helpers.

Every helper returns a new conn; the original is never modified. Sending a
response (or attaching a template) finalizes the conn, after which a second
send is a contract violation.
"""

from __future__ import annotations

import json

import pytest

from plugline.core.errors import InvalidStatusError, StepContractError
from plugline.http.methods import HttpMethod
from plugline.http.request import Request
from plugline.pipeline.context import Conn
from tests.conftest import make_conn, mark_pipeline, parametrize


@mark_pipeline
def test_helpers_return_new_conn_and_leave_original_untouched() -> None:
    """`assign` must not mutate the conn it is called on."""
    conn: Conn = make_conn()
    updated: Conn = conn.assign("user", "moon")

    assert updated.assigns["user"] == "moon"
    assert "user" not in conn.assigns
    assert updated is not conn


@mark_pipeline
def test_mappings_are_read_only() -> None:
    """Params and assigns are frozen mappings; item assignment fails."""
    conn: Conn = make_conn(params={"id": "1"}).assign("k", "v")
    with pytest.raises(TypeError):
        conn.params["id"] = "2"  # type: ignore[index]
    with pytest.raises(TypeError):
        conn.assigns["k"] = "w"  # type: ignore[index]


@mark_pipeline
def test_request_headers_are_lower_cased() -> None:
    """Header names are normalized so lookups are case-insensitive."""
    conn: Conn = make_conn(headers={"X-User-Id": "1"})
    assert dict(conn.req_headers) == {"x-user-id": "1"}
    assert conn.req_header("X-USER-ID") == "1"


@mark_pipeline
def test_method_strings_are_parsed() -> None:
    """A plain method string is coerced to `HttpMethod`."""
    assert make_conn(method="post").method is HttpMethod.POST


@mark_pipeline
def test_from_request_decodes_query_and_body() -> None:
    """Body params override query params with the same name."""
    request = Request.from_target("get", "/hello?name=a&page=2", body_params={"name": "b"})
    conn: Conn = Conn.from_request(request)

    assert conn.method is HttpMethod.GET
    assert conn.path == "/hello"
    assert dict(conn.params) == {"name": "b", "page": "2"}
    assert not conn.halted
    assert not conn.finalized


@mark_pipeline
def test_merge_assigns_and_flash() -> None:
    """Several assigns merge at once; flash messages are kept per kind."""
    conn: Conn = (
        make_conn()
        .merge_assigns(a=1, b=2)
        .put_flash("info", "hello")
        .put_flash("error", "oops")
        .put_flash("info", "again")
    )
    assert dict(conn.assigns) == {"a": 1, "b": 2}
    assert conn.get_flash("info") == "again"
    assert conn.get_flash() == {"info": "again", "error": "oops"}
    assert conn.clear_flash().get_flash() == {}


@mark_pipeline
@parametrize(
    "code, expected",
    [
        (404, 404),
        ("not_found", 404),
        ("created", 201),
        ("unprocessable_entity", 422),
        ("im_a_teapot", 418),
    ],
)
def test_put_status_accepts_numbers_and_names(code: int | str, expected: int) -> None:
    """Friendly status names resolve to their numeric code."""
    assert make_conn().put_status(code).status == expected


@mark_pipeline
def test_put_status_rejects_unknown_names() -> None:
    """An unknown status name is an error, not a silent default."""
    with pytest.raises(InvalidStatusError):
        make_conn().put_status("not_a_status")


@mark_pipeline
def test_put_resp_header_replaces_previous_value() -> None:
    """Response header names are case-insensitive and set at most once."""
    conn: Conn = make_conn().put_resp_header("X-Thing", "a").put_resp_header("x-thing", "b")
    assert conn.resp_headers == (("x-thing", "b"),)
    assert conn.resp_header("X-Thing") == "b"


@mark_pipeline
def test_text_sets_content_type_and_finalizes() -> None:
    """`text` sends a text/plain response with the status set earlier."""
    conn: Conn = make_conn().put_status(202).text("queued")

    assert conn.finalized
    assert conn.response is not None
    assert conn.response.status == 202
    assert conn.response.body == "queued"
    assert conn.response.content_type == "text/plain; charset=utf-8"


@mark_pipeline
def test_json_encodes_data() -> None:
    """`json` encodes its argument and sets application/json."""
    conn: Conn = make_conn().json({"id": 7})
    assert conn.response is not None
    assert json.loads(conn.response.body) == {"id": 7}
    assert conn.response.content_type == "application/json; charset=utf-8"


@mark_pipeline
def test_explicit_content_type_wins_over_helper_default() -> None:
    """A content type set before `text` is kept."""
    conn: Conn = make_conn().put_resp_content_type("text/csv").text("a,b")
    assert conn.response is not None
    assert conn.response.content_type == "text/csv; charset=utf-8"


@mark_pipeline
def test_sending_twice_is_a_contract_violation() -> None:
    """Once finalized, a conn cannot send another response."""
    conn: Conn = make_conn().text("first")
    with pytest.raises(StepContractError):
        conn.text("second")
    with pytest.raises(StepContractError):
        conn.render("index")


@mark_pipeline
def test_redirect_to_local_path() -> None:
    """`redirect(to=...)` sends a 302 with a location header."""
    conn: Conn = make_conn().redirect(to="/redirect_test")
    assert conn.response is not None
    assert conn.response.status == 302
    assert conn.response.location == "/redirect_test"
    assert conn.response.is_redirect
    assert "/redirect_test" in conn.response.body


@mark_pipeline
def test_redirect_to_external_url() -> None:
    """`redirect(external=...)` accepts fully-qualified URLs."""
    conn: Conn = make_conn().redirect(external="https://elixir-lang.org/")
    assert conn.response is not None
    assert conn.response.location == "https://elixir-lang.org/"


@mark_pipeline
@parametrize(
    "kwargs",
    [
        {},
        {"to": "/a", "external": "https://b.example/"},
        {"to": "relative"},
        {"to": "//evil.example/"},
        {"external": "/not-a-url"},
    ],
)
def test_redirect_rejects_invalid_targets(kwargs: dict[str, str]) -> None:
    """Exactly one valid target is required."""
    with pytest.raises(ValueError):
        make_conn().redirect(**kwargs)


@mark_pipeline
def test_render_uses_negotiated_format_and_merges_variables() -> None:
    """A bare template name takes the negotiated format; variables win over assigns."""
    conn: Conn = (
        make_conn()
        .assign("message", "from assigns")
        .put_flash("info", "hi")
        .put_format("text")
        .render("index", message="from render")
    )
    template = conn.template
    assert template is not None
    assert conn.finalized
    assert (template.view, template.key) == ("TestView", "index.text")
    assert template.variables["message"] == "from render"
    assert template.variables["flash"] == {"info": "hi"}
    assert template.layout == "app.html"


@mark_pipeline
def test_render_with_extension_fixes_format() -> None:
    """``show.json`` renders the json variant whatever was negotiated."""
    conn: Conn = make_conn().put_format("html").render("show.json")
    assert conn.template is not None
    assert conn.template.format == "json"


@mark_pipeline
def test_render_without_layout() -> None:
    """`put_layout(False)` renders without a layout; `True` is rejected."""
    conn: Conn = make_conn().put_layout(False).render("index")
    assert conn.template is not None
    assert conn.template.layout is None
    with pytest.raises(ValueError):
        make_conn().put_layout(True)


@mark_pipeline
def test_render_requires_a_view() -> None:
    """Rendering without a selected view is a contract violation."""
    with pytest.raises(StepContractError):
        make_conn(view=None).render("index")


@mark_pipeline
def test_halt_sets_flag_only() -> None:
    """`halt` marks the conn halted without finalizing it."""
    conn: Conn = make_conn().halt()
    assert conn.halted
    assert not conn.finalized
