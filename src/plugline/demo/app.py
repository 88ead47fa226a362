# topmark:header:start
#
#   project      : Plugline
#   file         : app.py
#   file_relpath : src/plugline/demo/app.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Router and endpoint of the demo application.

`build_endpoint` is the default application factory (``app.factory`` in the
configuration); the CLI calls it with the resolved `Config`.

The router deliberately declares two unreachable routes: ``GET /`` for
`RootController` (after `PageController`) and the index/show routes of the
second ``/posts`` resource. They show up as warnings in ``plugline routes``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plugline.config.logging import get_logger
from plugline.config.model import Config, MutableConfig
from plugline.demo import controllers as c
from plugline.demo.store import AUTHENTICATOR
from plugline.demo.views import VIEWS
from plugline.dispatch.results import Ok
from plugline.endpoint import Endpoint
from plugline.pipeline.steps.base import plug
from plugline.pipeline.steps.browser import SecureBrowserHeadersStep
from plugline.pipeline.steps.locale import LocaleStep
from plugline.pipeline.steps.negotiation import AcceptsStep
from plugline.routing.router import Router
from plugline.views.renderer import TemplateRenderer

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn
    from plugline.routing.table import RouteTable

logger: PluglineLogger = get_logger(__name__)


def fetch_current_user(conn: Conn, _opts: object) -> Conn:
    """Function plug: assign ``current_user`` when the request is authenticated."""
    result = AUTHENTICATOR.find_user(conn)
    if isinstance(result, Ok):
        return conn.assign("current_user", result.value)
    return conn


def build_router(config: Config) -> Router:
    """Declare the demo pipelines and routes.

    Args:
        config (Config): Runtime configuration (locales).

    Returns:
        Router: The populated, not yet built, router.
    """
    router = Router()
    router.pipeline(
        "browser",
        [
            plug(AcceptsStep(), ["html", "text"]),
            plug(fetch_current_user),
            plug(SecureBrowserHeadersStep()),
            plug(LocaleStep(), {"default": config.default_locale, "locales": config.locales}),
        ],
    )
    router.pipeline("api", [plug(AcceptsStep(), ["json"])])
    router.pipeline("review_checks", [])

    with router.scope("/", pipe_through=["browser"]):
        router.get("/", c.PageController, "index")
        router.get("/", c.RootController, "index")
        router.get("/hello", c.HelloController, "index")
        router.get("/hello/:message", c.HelloController, "show")
        router.get("/examples", c.ExamplesController, "index")
        router.get("/redirect_test", c.ExamplesController, "redirect_test", as_="redirect_test")
        router.get("/messages/:id", c.MessageController, "show")
        with router.resources("/users", c.UserController):
            router.resources("/posts", c.PostController)
        router.resources("/posts", c.PostController, only=["index", "show"])
        router.resources("/comments", c.CommentController, except_=["delete"])
        router.forward("/jobs", c.jobs_plug, as_="jobs")

    with router.scope("/admin", pipe_through=["browser"], alias="admin"):
        router.resources("/reviews", c.AdminReviewController)

    with router.scope("/api", pipe_through=["api"], alias="api"):
        with router.scope("/v1", alias="v1"):
            router.resources("/images", c.V1ImageController)
            router.resources("/reviews", c.V1ReviewController)
            router.resources("/users", c.V1UserController)

    with router.scope("/", pipe_through=["browser"]):
        router.pipe_through("review_checks")
        router.resources("/posts", c.AnotherPostController)

    return router


def build_table(config: Config) -> RouteTable:
    """Build the demo route table, strict when ``router.strict`` is set."""
    return build_router(config).build(strict=config.strict_routes)


def build_endpoint(config: Config | None = None) -> Endpoint:
    """Application factory: the demo endpoint for ``config`` (defaults when None)."""
    if config is None:
        config = MutableConfig.from_defaults().freeze()
    table = build_table(config)
    logger.debug("Demo application: %d route(s)", len(table))
    return Endpoint(table, TemplateRenderer(VIEWS), layout=config.layout)
