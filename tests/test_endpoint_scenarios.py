# topmark:header:start
#
#   project      : Plugline
#   file         : test_endpoint_scenarios.py
#   file_relpath : tests/test_endpoint_scenarios.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""End-to-end exchanges through the demo endpoint.

Every test sends one request through `Endpoint.call` and inspects the final
conn: status, headers, body, flash and assigns.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from plugline.dispatch.controller import Controller
from plugline.endpoint import Endpoint
from plugline.http.request import Request
from plugline.routing.router import Router
from plugline.views.renderer import TemplateRenderer
from tests.conftest import parametrize, send

if TYPE_CHECKING:
    from plugline.pipeline.context import Conn

USER_1 = {"x-user-id": "1"}
USER_2 = {"x-user-id": "2"}


def _body(conn: Conn) -> str:
    assert conn.response is not None
    return conn.response.body


# --- Pages ---


def test_hello_index_renders_flash_and_layout(demo_endpoint: Endpoint) -> None:
    """The index action flashes twice and renders inside the app layout."""
    out = send(demo_endpoint, "GET", "/hello")
    assert out.response is not None
    body = out.response.body

    assert out.response.status == 200
    assert out.response.content_type == "text/html; charset=utf-8"
    assert body.startswith("<!DOCTYPE html>")
    assert "<title>Hello Plugline</title>" in body
    assert "<h2>Welcome Back</h2>" in body
    assert '<p class="alert alert-info">Welcome to Plugline, from flash info!</p>' in body
    assert "pretend we have an error." in body
    assert out.response.header("x-frame-options") == "SAMEORIGIN"


def test_hello_text_format(demo_endpoint: Endpoint) -> None:
    """``_format=text`` selects the text template, without a layout."""
    out = send(demo_endpoint, "GET", "/hello?_format=text")
    assert out.response is not None
    assert out.response.body == "Welcome Back"
    assert out.response.content_type == "text/plain; charset=utf-8"


def test_hello_show_uses_path_param(demo_endpoint: Endpoint) -> None:
    """The ``:message`` segment reaches the action params."""
    out = send(demo_endpoint, "GET", "/hello/world")
    assert out.params["message"] == "world"
    assert "<h2>Hello world</h2>" in _body(out)


def test_root_is_served_by_first_declared_route(demo_endpoint: Endpoint) -> None:
    """The shadowed ``GET /`` route never answers."""
    body = _body(send(demo_endpoint, "GET", "/"))
    assert "Welcome to Plugline!" in body
    assert "You should never see this" not in body


def test_locale_param_sets_the_page_language(demo_endpoint: Endpoint) -> None:
    """The locale step assigns the requested locale."""
    assert 'lang="en"' in _body(send(demo_endpoint, "GET", "/"))
    out = send(demo_endpoint, "GET", "/?locale=fr")
    assert out.assigns["locale"] == "fr"
    assert 'lang="fr"' in _body(out)


def test_head_is_served_by_get_routes(demo_endpoint: Endpoint) -> None:
    """HEAD requests match GET routes."""
    out = send(demo_endpoint, "HEAD", "/hello")
    assert out.response is not None
    assert out.response.status == 200


# --- Messages: authenticate, fetch, authorize ---


def test_message_requires_login(demo_endpoint: Endpoint) -> None:
    """Anonymous requests are redirected home with a flash message."""
    out = send(demo_endpoint, "GET", "/messages/1")
    assert out.response is not None

    assert out.halted
    assert out.response.status == 302
    assert out.response.location == "/"
    assert out.flash == {"info": "You must be logged in"}


def test_message_owner_reads_message(demo_endpoint: Endpoint) -> None:
    """The owner passes the whole plug chain."""
    out = send(demo_endpoint, "GET", "/messages/1", headers=USER_1)
    assert out.response is not None
    assert out.response.status == 200
    assert out.assigns["user"].name == "Dweezil"
    assert "<p>Welcome aboard</p>" in out.response.body


@parametrize(
    "target, message",
    [
        ("/messages/2", "You can't access that page"),
        ("/messages/9", "That message wasn't found"),
    ],
)
def test_message_denied_or_missing(demo_endpoint: Endpoint, target: str, message: str) -> None:
    """Other users' and unknown messages redirect with a flash message."""
    out = send(demo_endpoint, "GET", target, headers=USER_1)
    assert out.response is not None
    assert out.response.status == 302
    assert out.flash["info"] == message


# --- Posts: 3-arity actions and the action fallback ---


def test_public_post_as_json(demo_endpoint: Endpoint) -> None:
    """``show.json`` fixes the format whatever was negotiated."""
    out = send(demo_endpoint, "GET", "/posts/1")
    assert out.response is not None

    assert out.response.status == 200
    assert out.response.content_type == "application/json; charset=utf-8"
    assert json.loads(out.response.body)["id"] == "1"


def test_private_post_is_forbidden_to_others(demo_endpoint: Endpoint) -> None:
    """``Err("unauthorized")`` becomes a 403 error page."""
    out = send(demo_endpoint, "GET", "/posts/2")
    assert out.response is not None
    assert out.response.status == 403
    assert out.response.body == "Forbidden"

    owner = send(demo_endpoint, "GET", "/posts/2", headers=USER_2)
    assert owner.response is not None
    assert owner.response.status == 200
    assert json.loads(owner.response.body)["title"] == "Drafts"


def test_unknown_post_is_not_found(demo_endpoint: Endpoint) -> None:
    """``Err("not_found")`` becomes a 404 error page."""
    out = send(demo_endpoint, "GET", "/posts/99")
    assert out.response is not None
    assert (out.response.status, out.response.body) == (404, "Not Found")


def test_nested_posts_are_filtered_by_user(demo_endpoint: Endpoint) -> None:
    """Nested resources capture the parent id as ``user_id``."""
    out = send(demo_endpoint, "GET", "/users/1/posts")
    body = _body(out)

    assert out.params["user_id"] == "1"
    assert "<li>Hello Plugline</li>" in body
    assert "Drafts" not in body


def test_fetch_resource_plug_halts_with_404(demo_endpoint: Endpoint) -> None:
    """The guarded fetch plug answers before ``edit`` runs."""
    out = send(demo_endpoint, "GET", "/users/1/posts/99/edit")
    assert out.response is not None
    assert (out.response.status, out.response.body) == (404, "Not found")

    found = send(demo_endpoint, "GET", "/users/1/posts/1/edit")
    assert _body(found) == "Editing post 1"


def test_delete_reaches_later_resource(demo_endpoint: Endpoint) -> None:
    """Only index and show of the second posts resource are shadowed."""
    out = send(demo_endpoint, "DELETE", "/posts/1")
    assert out.response is not None
    assert out.response.status == 204
    assert out.private["controller"] == "AnotherPostController"


# --- Examples ---


@parametrize(
    "demo, status, content_type, body",
    [
        ("json&id=7", 200, "application/json; charset=utf-8", '{"id": "7"}'),
        ("text&id=3", 200, "text/plain; charset=utf-8", "Showing id 3"),
        ("created", 201, None, ""),
        ("xml", 200, "text/xml; charset=utf-8", "<examples><greeting>hi</greeting></examples>"),
        ("no_layout", 200, "text/html; charset=utf-8", "<h2>Examples</h2>"),
        ("text_format&message=hi", 200, "text/plain; charset=utf-8", "Examples hi"),
    ],
)
def test_example_responses(
    demo_endpoint: Endpoint, demo: str, status: int, content_type: str | None, body: str
) -> None:
    """The response helpers produce the expected status, type and body."""
    out = send(demo_endpoint, "GET", f"/examples?demo={demo}")
    assert out.response is not None
    assert out.response.status == status
    if content_type is not None:
        assert out.response.content_type == content_type
    assert out.response.body == body


def test_example_layouts_and_statuses(demo_endpoint: Endpoint) -> None:
    """Alternative layouts and explicit statuses survive rendering."""
    admin = send(demo_endpoint, "GET", "/examples?demo=admin_layout")
    assert "<title>Plugline Admin</title>" in _body(admin)

    accepted = send(demo_endpoint, "GET", "/examples?demo=accepted")
    assert accepted.response is not None
    assert accepted.response.status == 202

    error_page = send(demo_endpoint, "GET", "/examples?demo=error_page")
    assert error_page.response is not None
    assert error_page.response.status == 404
    assert "<main>Not Found</main>" in error_page.response.body


def test_example_redirects(demo_endpoint: Endpoint) -> None:
    """Local and external redirects set the location header."""
    local = send(demo_endpoint, "GET", "/examples?demo=redirect")
    assert local.response is not None
    assert local.response.is_redirect
    assert local.response.location == "/redirect_test"

    external = send(demo_endpoint, "GET", "/examples?demo=external")
    assert external.response is not None
    assert external.response.location == "https://elixir-lang.org/"


def test_unknown_example_goes_through_fallback(demo_endpoint: Endpoint) -> None:
    """An unknown demo name is ``Err("not_found")``."""
    out = send(demo_endpoint, "GET", "/examples?demo=bogus")
    assert out.response is not None
    assert out.response.status == 404


# --- Scopes, forwards and the API pipeline ---


@parametrize(
    "method, target, body",
    [
        ("GET", "/admin/reviews", "Listing reviews"),
        ("GET", "/api/v1/users/1", "Showing user 1"),
        ("GET", "/jobs/run/now", "Background jobs: /run/now"),
        ("GET", "/comments/3/edit", "Editing comment 3"),
    ],
)
def test_scoped_routes(demo_endpoint: Endpoint, method: str, target: str, body: str) -> None:
    """Scopes prefix paths; forwards see the remaining path."""
    out = send(demo_endpoint, method, target)
    assert _body(out) == body


def test_forward_restores_the_path(demo_endpoint: Endpoint) -> None:
    """The final conn carries the original request path."""
    out = send(demo_endpoint, "GET", "/jobs/run/now")
    assert out.path == "/jobs/run/now"


def test_api_create(demo_endpoint: Endpoint) -> None:
    """POST to a resource collection runs ``create``."""
    out = send(demo_endpoint, "POST", "/api/v1/images", data={"name": "cat.png"})
    assert out.response is not None
    assert out.response.status == 201
    assert out.params["name"] == "cat.png"
    assert json.loads(out.response.body) == {"created": "image"}


def test_api_rejects_unacceptable_format(demo_endpoint: Endpoint) -> None:
    """The api pipeline only accepts json."""
    out = send(demo_endpoint, "GET", "/api/v1/users?_format=html")
    assert out.response is not None
    assert out.halted
    assert out.response.status == 406


@parametrize("method, target", [("GET", "/nope"), ("DELETE", "/comments/1"), ("GET", "/api/v2/users")])
def test_unmatched_routes_are_404(demo_endpoint: Endpoint, method: str, target: str) -> None:
    """No route means a 404 error page."""
    out = send(demo_endpoint, method, target)
    assert out.response is not None
    assert (out.response.status, out.response.body) == (404, "Not Found")


@parametrize("method", ["PROPFIND", "TRACE", "CONNECT", "*"])
def test_unknown_methods_are_501(demo_endpoint: Endpoint, method: str) -> None:
    """Methods the router does not know still produce a response."""
    response = demo_endpoint.handle(Request.from_target(method, "/hello"))
    assert (response.status, response.body) == (501, "Not Implemented")

    assert demo_endpoint.handle(Request.from_target("GET", "/hello")).status == 200


# --- Failures ---


class BoomController(Controller):
    def index(self, _conn: Conn, _params: Mapping[str, Any]) -> Conn:
        raise RuntimeError("boom")

    def ok(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text("still fine")


def _boom_endpoint() -> Endpoint:
    router = Router()
    router.get("/boom", BoomController, "index")
    router.get("/ok", BoomController, "ok")
    return Endpoint(router.build(), TemplateRenderer({}))


def test_failing_action_answers_500() -> None:
    """A raising action is turned into a 500 for that exchange alone."""
    endpoint = _boom_endpoint()

    failed = endpoint.handle(Request.from_target("GET", "/boom"))
    assert (failed.status, failed.body) == (500, "Internal Server Error")

    assert endpoint.handle(Request.from_target("GET", "/ok")).body == "still fine"


def test_endpoint_plugs_run_before_routing() -> None:
    """An endpoint plug that halts short-circuits routing."""

    def maintenance(conn: Conn, _opts: Any) -> Conn:
        return conn.put_status(503).text("Down for maintenance").halt()

    router = Router()
    router.get("/ok", BoomController, "ok")
    endpoint = Endpoint(router.build(), TemplateRenderer({}), plugs=[maintenance])

    response = endpoint.handle(Request.from_target("GET", "/anything"))
    assert (response.status, response.body) == (503, "Down for maintenance")


def test_endpoint_can_be_forwarded_to() -> None:
    """A nested endpoint mounted with ``forward`` routes the remaining path."""
    inner = _boom_endpoint()
    router = Router()
    router.forward("/inner", inner, as_="inner")
    outer = Endpoint(router.build(), TemplateRenderer({}))

    assert outer.handle(Request.from_target("GET", "/inner/ok")).body == "still fine"
    assert outer.handle(Request.from_target("GET", "/inner/missing")).status == 404
