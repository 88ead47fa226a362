# topmark:header:start
#
#   project      : Plugline
#   file         : controllers.py
#   file_relpath : src/plugline/demo/controllers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Controllers of the demo "hello" application.

Each controller shows one part of the programming model:

- `HelloController`: flash messages, assigns, a guarded controller plug.
- `ExamplesController`: the response helpers (text/json/html, status,
  layouts, formats, redirects), selected with ``?demo=<name>``.
- `PostController`: a 3-arity action returning tagged results handled by
  the action fallback, plus a resource-fetching plug.
- `MessageController`: the authenticate → fetch → authorize plug chain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from plugline.constants import ERROR_VIEW
from plugline.demo.store import AUTHENTICATOR, AUTHORIZER, BLOG, MESSAGES
from plugline.dispatch.controller import Controller
from plugline.dispatch.fallback import error_fallback
from plugline.dispatch.results import Err, Ok
from plugline.pipeline.steps.auth import AuthenticateStep, AuthorizeStep
from plugline.pipeline.steps.base import plug
from plugline.pipeline.steps.resource import FetchResourceStep

if TYPE_CHECKING:
    from collections.abc import Mapping

    from plugline.demo.store import User
    from plugline.pipeline.context import Conn


def assign_welcome_message(conn: Conn, message: str) -> Conn:
    """Function plug: assign a default ``message`` some actions override."""
    return conn.assign("message", message)


def jobs_plug(conn: Conn) -> Conn:
    """Forward target for ``/jobs``: answers for any path below it."""
    return conn.text(f"Background jobs: {conn.path}")


class PageController(Controller):
    def index(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.render("index")


class RootController(Controller):
    """Declared on ``GET /`` after `PageController`, so never reached."""

    def index(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text("You should never see this")


class HelloController(Controller):
    plugs = [plug(assign_welcome_message, "Welcome Back", actions=["index", "show"])]

    def index(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return (
            conn.put_flash("info", "Welcome to Plugline, from flash info!")
            .put_flash("error", "Let's pretend we have an error.")
            .render("index")
        )

    def show(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.render("show", message=params["message"])


class ExamplesController(Controller):
    """Response helper showcase; ``GET /examples?demo=json&id=7``."""

    action_fallback = error_fallback()

    DEMOS: ClassVar[tuple[str, ...]] = (
        "text",
        "json",
        "html",
        "created",
        "no_layout",
        "admin_layout",
        "text_format",
        "xml",
        "accepted",
        "not_found_status",
        "error_page",
        "redirect",
        "external",
    )

    def index(self, conn: Conn, params: Mapping[str, Any]) -> Conn | Err:
        demo = params.get("demo")
        if demo is None:
            return conn.text("Available demos: " + ", ".join(self.DEMOS))
        if demo not in self.DEMOS:
            return Err("not_found")
        return getattr(self, f"_{demo}")(conn, params)

    def redirect_test(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text("Redirected!")

    # --- demos ---

    def _text(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.text(f"Showing id {params.get('id', '')}")

    def _json(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.json({"id": params.get("id")})

    def _html(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.html(
            "<html><head><title>Passing an Id</title></head>"
            f"<body><p>You sent in id {params.get('id', '')}</p></body></html>"
        )

    def _created(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.send_resp(201, "")

    def _no_layout(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_layout(False).render("index")

    def _admin_layout(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_layout("admin.html").render("index")

    def _text_format(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.render("index.text", message=params.get("message", ""))

    def _xml(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_resp_content_type("text/xml").render("index.xml", content="<greeting>hi</greeting>")

    def _accepted(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_status(202).render("index")

    def _not_found_status(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_status("not_found").render("index")

    def _error_page(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_status("not_found").put_view(ERROR_VIEW).render("404")

    def _redirect(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.redirect(to="/redirect_test")

    def _external(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.redirect(external="https://elixir-lang.org/")


class ResourceController(Controller):
    """Conventional resource actions answering with plain text or JSON."""

    resource: ClassVar[str] = "resource"

    def index(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text(f"Listing {self.resource}s")

    def edit(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.text(f"Editing {self.resource} {params['id']}")

    def new(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text(f"New {self.resource} form")

    def show(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.text(f"Showing {self.resource} {params['id']}")

    def create(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_status("created").json({"created": self.resource})

    def update(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        return conn.json({"updated": self.resource, "id": params["id"]})

    def delete(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.send_resp("no_content", "")


class UserController(ResourceController):
    resource = "user"


class CommentController(ResourceController):
    resource = "comment"


class AdminReviewController(ResourceController):
    resource = "review"


class V1ImageController(ResourceController):
    resource = "image"


class V1ReviewController(ResourceController):
    resource = "review"


class V1UserController(ResourceController):
    resource = "user"


class AnotherPostController(ResourceController):
    """Posts of the second ``/`` scope; its index and show are shadowed."""

    resource = "post"


class PostController(Controller):
    plugs = [
        plug(FetchResourceStep(), {"fetch": BLOG.get_post}, actions=["edit", "update", "delete"]),
    ]
    action_fallback = error_fallback()

    def index(self, conn: Conn, params: Mapping[str, Any]) -> Conn:
        posts = BLOG.all_posts()
        if "user_id" in params:
            posts = [p for p in posts if p.owner_id == params["user_id"]]
        return conn.render("index", posts=posts)

    def show(self, conn: Conn, params: Mapping[str, Any], current_user: User | None) -> Conn | Err:
        fetched = BLOG.fetch_post(params["id"])
        if not isinstance(fetched, Ok):
            return fetched
        allowed = AUTHORIZER.authorize(current_user, "view", fetched.value)
        if not isinstance(allowed, Ok):
            return allowed
        return conn.render("show.json", post=fetched.value)

    def edit(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text(f"Editing post {conn.assigns['post'].id}")

    def new(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.text("New post form")

    def create(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.put_status("created").json({"created": "post"})

    def update(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.json({"updated": "post", "id": conn.assigns["post"].id})

    def delete(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.send_resp("no_content", "")


class MessageController(Controller):
    plugs = [
        plug(AuthenticateStep(), {"authenticator": AUTHENTICATOR}),
        plug(
            FetchResourceStep(),
            {
                "fetch": MESSAGES.find_message,
                "assign_as": "message",
                "redirect_to": "/",
                "message": "That message wasn't found",
            },
        ),
        plug(AuthorizeStep(), {"authorizer": AUTHORIZER, "resource_key": "message"}),
    ]

    def show(self, conn: Conn, _params: Mapping[str, Any]) -> Conn:
        return conn.render("show", page=conn.assigns["message"])
