# topmark:header:start
#
#   project      : Plugline
#   file         : endpoint.py
#   file_relpath : src/plugline/endpoint.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Endpoint: the entry point of one request/response exchange.

For each request the endpoint:

1. creates the initial conn (unknown methods → 501) and runs the endpoint plugs;
2. resolves the route (no route → 404);
3. merges the captured path params into ``params``;
4. runs the route's pipelines, stopping at the first halt;
5. invokes the controller (plugs, action, fallback) or the forward target;
6. renders an attached template through the render collaborator.

This is the only place that catches broad exceptions. A failing step, an
unhandled action result or a contract violation is logged with its traceback
and answered with a 500 for that exchange alone; other exchanges are not
affected. There is no engine-level timeout: a blocking collaborator blocks its
own exchange.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.constants import ERROR_VIEW
from plugline.core.errors import StepContractError, UnmatchedRouteError
from plugline.http.methods import HttpMethod
from plugline.http.response import Response
from plugline.pipeline.context import PRIVATE_LAYOUT, PRIVATE_PIPELINES, Conn
from plugline.pipeline.pipelines import build
from plugline.pipeline.runner import run
from plugline.routing.route import RouteKind
from plugline.routing.router import FORWARD_GLOB
from plugline.views.renderer import error_view_body

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.http.request import Request
    from plugline.routing.route import Route
    from plugline.routing.table import RouteTable
    from plugline.views.renderer import TemplateRenderer

logger: PluglineLogger = get_logger(__name__)

PRIVATE_SCRIPT_NAME = "script_name"


class Endpoint:
    """Entry point binding a route table to a render collaborator.

    Args:
        table (RouteTable): The immutable route table.
        renderer (TemplateRenderer): Render collaborator for templates.
        plugs (Iterable[Any]): Plugs run for every request before routing.
        layout (str | bool | None): Initial layout for every conn (None keeps
            the default layout, False disables layouts).
    """

    def __init__(
        self,
        table: RouteTable,
        renderer: TemplateRenderer,
        plugs: Iterable[Any] = (),
        *,
        layout: str | bool | None = None,
    ) -> None:
        self.table = table
        self.renderer = renderer
        self.pipeline = build("endpoint", plugs)
        self.layout = layout

    # --- Public API ---

    def call(self, request: Request) -> Conn:
        """Process ``request`` and return the final conn (always carrying a response).

        Methods the router does not know (``PROPFIND``, ``TRACE``, ...) are
        answered with ``501 Not Implemented`` without running any plug.
        """
        method = HttpMethod.lookup(request.method)
        if method is None or method is HttpMethod.ANY:
            logger.info("Unsupported request method %r for %s -> 501", request.method, request.path)
            return self._error(Conn.from_request(request, method=HttpMethod.ANY), 501)

        conn = Conn.from_request(request, method=method)
        if self.layout is not None:
            conn = conn.put_private(PRIVATE_LAYOUT, self.layout)

        try:
            out = self(conn)
        except UnmatchedRouteError as exc:
            logger.info("%s", exc)
            out = self._error(conn, 404)
        except Exception:
            logger.exception("Request %s %s failed", conn.method.value, conn.path)
            out = self._error(conn, 500)

        assert out.response is not None
        logger.info("%s %s -> %d", conn.method.value, conn.path, out.response.status)
        return out

    def handle(self, request: Request) -> Response:
        """Process ``request`` and return its response."""
        response = self.call(request).response
        assert response is not None
        return response

    def __call__(self, conn: Conn) -> Conn:
        """Process a conn without error conversion (used when forwarded to).

        Raises:
            UnmatchedRouteError: If no route matches.
            StepContractError: If nothing finalized the conn.
        """
        conn = run(self.pipeline, conn)
        if not conn.halted:
            conn = self._route(conn)
        return self._finish(conn)

    # --- Internals ---

    def _route(self, conn: Conn) -> Conn:
        match = self.table.resolve(conn.method, conn.path)
        route = match.route
        conn = conn.replace(
            params={**conn.params, **route.defaults, **match.path_params},
        ).put_private(PRIVATE_PIPELINES, route.pipelines)

        assert match.pipeline is not None
        conn = run(match.pipeline, conn)
        if conn.halted:
            return conn

        if route.kind is RouteKind.FORWARD:
            return self._forward(conn, route)
        return route.controller.call(conn, route.action)

    def _forward(self, conn: Conn, route: Route) -> Conn:
        target = route.controller
        rest = str(conn.params.get(FORWARD_GLOB, ""))
        prefix = route.path.rsplit("/", 1)[0] or "/"
        forwarded = conn.replace(path="/" + rest).put_private(PRIVATE_SCRIPT_NAME, prefix)
        out = target(forwarded)
        if not isinstance(out, Conn):
            raise StepContractError(f"Forward target {target!r} returned {type(out).__name__}, expected Conn")
        return out.replace(path=conn.path)

    def _finish(self, conn: Conn) -> Conn:
        if conn.response is not None:
            return conn
        if conn.template is None:
            raise StepContractError(f"No response was sent or rendered for {conn.path}")
        return conn.replace(response=self.renderer.render(conn))

    def _error(self, conn: Conn, status: int) -> Conn:
        failed = conn.put_status(status).put_view(ERROR_VIEW).put_layout(False).render(str(status))
        try:
            response = self.renderer.render(failed)
        except Exception:
            logger.exception("Rendering the %d error page failed", status)
            response = Response(
                status=status,
                headers=(("content-type", "text/plain; charset=utf-8"),),
                body=error_view_body(str(status)),
            )
        return failed.replace(response=response)
