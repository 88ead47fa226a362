# topmark:header:start
#
#   project      : Plugline
#   file         : table.py
#   file_relpath : src/plugline/routing/table.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable route table and request resolution.

A `RouteTable` is produced by `Router.build()` and never changes afterwards.
Resolution walks the routes in registration order and returns the *first*
route whose method and pattern match; a later route with the same method and
pattern can therefore never be selected. Such shadowed routes are reported
by `find_duplicates`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from plugline.config.logging import get_logger
from plugline.core.errors import RouteConfigError, UnmatchedRouteError
from plugline.http.methods import HttpMethod
from plugline.routing.route import RouteKind

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.core.diagnostics import Diagnostic
    from plugline.pipeline.pipelines import Pipeline, PipelineRegistry
    from plugline.routing.route import Route

logger: PluglineLogger = get_logger(__name__)


@dataclass(frozen=True)
class RouteMatch:
    """Result of resolving a request against the table.

    Attributes:
        route (Route): The selected route.
        path_params (Mapping[str, str]): Params captured from the path.
        pipeline (Pipeline): The composition of the route's pipelines.
    """

    route: Route
    path_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    pipeline: Pipeline | None = None


def find_duplicates(routes: Sequence[Route]) -> list[tuple[Route, Route]]:
    """Return ``(earlier, later)`` pairs of routes with the same method and pattern shape.

    Each shadowed route is reported once, paired with the first route that
    shadows it.
    """
    first_seen: dict[tuple[HttpMethod, tuple[str, ...]], Route] = {}
    duplicates: list[tuple[Route, Route]] = []
    for route in routes:
        key = (route.method, route.pattern.shape)
        earlier = first_seen.get(key)
        if earlier is None:
            first_seen[key] = route
        else:
            duplicates.append((earlier, route))
    return duplicates


class RouteTable:
    """Ordered, immutable set of routes plus the pipelines they pipe through.

    Args:
        routes (Sequence[Route]): Routes in registration order.
        pipelines (PipelineRegistry): Named pipelines available to the routes.
        diagnostics (Sequence[Diagnostic]): Findings recorded while building.

    Raises:
        UnknownPipelineError: If a route pipes through an undefined pipeline.
    """

    def __init__(
        self,
        routes: Sequence[Route],
        pipelines: PipelineRegistry,
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        self._routes: tuple[Route, ...] = tuple(routes)
        self._registry = pipelines
        self._diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)
        # Compose once per distinct pipeline list; unknown names fail here
        self._composed: dict[tuple[str, ...], Pipeline] = {}
        for route in self._routes:
            if route.pipelines not in self._composed:
                self._composed[route.pipelines] = pipelines.compose(route.pipelines)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Return the routes in registration order."""
        return self._routes

    @property
    def pipelines(self) -> PipelineRegistry:
        """Return the pipeline registry."""
        return self._registry

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Return the diagnostics recorded while building the table."""
        return self._diagnostics

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def pipeline_for(self, route: Route) -> Pipeline:
        """Return the composed pipeline of ``route``."""
        return self._composed[route.pipelines]

    def find_duplicates(self) -> list[tuple[Route, Route]]:
        """Return the ``(earlier, later)`` pairs of shadowed routes."""
        return find_duplicates(self._routes)

    def resolve(self, method: str | HttpMethod, path: str) -> RouteMatch:
        """Return the first route matching ``method`` and ``path``.

        Args:
            method (str | HttpMethod): Request method; HEAD is served by GET routes.
            path (str): Request path.

        Returns:
            RouteMatch: The selected route, its captured params and pipeline.

        Raises:
            UnmatchedRouteError: If no route matches.
        """
        wanted = HttpMethod.parse(method)
        for route in self._routes:
            if not route.method.accepts(wanted):
                continue
            captured = route.pattern.match(path)
            if captured is None:
                continue
            logger.debug("Resolved %s %s to %s", wanted.value, path, route.describe_target())
            return RouteMatch(
                route=route,
                path_params=MappingProxyType(captured),
                pipeline=self._composed[route.pipelines],
            )
        raise UnmatchedRouteError(wanted.value, path)

    def path_for(self, helper: str, action: str, *args: Any, **query: Any) -> str:
        """Generate the path of the route named by ``helper`` and ``action``.

        Positional ``args`` fill the path params in order; remaining keyword
        arguments become the query string.

        Example:
            ``path_for("user_post", "show", 1, 2)`` → ``/users/1/posts/2``.

        Raises:
            RouteConfigError: If no such route exists or params are missing.
        """
        for route in self._routes:
            if route.kind is RouteKind.MATCH and route.helper == helper and route.action == action:
                params = route.pattern.params
                named = {k: query.pop(k) for k in list(query) if k in params}
                path = route.pattern.build(*args, **named)
                return f"{path}?{urlencode(query, doseq=True)}" if query else path
        raise RouteConfigError(f"No route for helper {helper!r} with action {action!r}")
