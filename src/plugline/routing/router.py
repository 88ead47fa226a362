# topmark:header:start
#
#   project      : Plugline
#   file         : router.py
#   file_relpath : src/plugline/routing/router.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Router builder: named pipelines, nested scopes and route declarations.

The builder is mutable while the application is being assembled and produces
an immutable [`RouteTable`][plugline.routing.table.RouteTable]:

    router = Router()
    router.pipeline("browser", [plug(AcceptsStep(), ["html"]), plug(LocaleStep(), "en")])

    with router.scope("/", pipe_through=["browser"]):
        router.get("/", PageController, "index")
        router.resources("/posts", PostController, only=["index", "show"])
        with router.resources("/users", UserController):
            router.resources("/posts", PostController)   # /users/:user_id/posts

    table = router.build()

Scopes nest: path prefixes, pipeline lists and helper aliases concatenate from
the outermost scope inwards. Routes are kept in declaration order, which is
also the resolution order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.core.diagnostics import DiagnosticLog
from plugline.core.errors import DuplicateRouteError, RouteConfigError
from plugline.http.methods import HttpMethod
from plugline.pipeline.pipelines import PipelineRegistry, build
from plugline.routing.resources import expand_resources, resource_name, singularize
from plugline.routing.route import PathPattern, Route, RouteKind, join_paths
from plugline.routing.table import RouteTable, find_duplicates

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.pipelines import Pipeline

logger: PluglineLogger = get_logger(__name__)

FORWARD_GLOB = "path_info"

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def helper_from_controller(controller: Any) -> str:
    """Derive a helper name from a controller (``PageController`` → ``page``)."""
    name = getattr(controller, "__name__", type(controller).__name__)
    if name.endswith("Controller") and name != "Controller":
        name = name[: -len("Controller")]
    return _CAMEL_RE.sub("_", name).lower()


@dataclass
class _Scope:
    prefix: str
    pipelines: tuple[str, ...]
    aliases: tuple[str, ...]


class _NestedResources:
    """Returned by `Router.resources`; entering it nests routes under the member path."""

    def __init__(self, router: Router, scope: _Scope) -> None:
        self._router = router
        self._scope = scope

    def __enter__(self) -> Router:
        self._router._stack.append(self._scope)
        return self._router

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._router._stack.pop()


class Router:
    """Mutable builder for a route table."""

    def __init__(self) -> None:
        self._registry = PipelineRegistry()
        self._routes: list[Route] = []
        self._stack: list[_Scope] = [_Scope(prefix="/", pipelines=(), aliases=())]

    # --- Pipelines ---

    def pipeline(self, name: str, plugs: Iterable[Any]) -> Pipeline:
        """Build and register a named pipeline.

        Raises:
            StepOptionsError: If a step rejects its options.
            PipelineConfigError: If the name is already registered.
        """
        return self._registry.register(build(name, plugs))

    @property
    def pipelines(self) -> PipelineRegistry:
        """Return the pipelines registered so far."""
        return self._registry

    # --- Scopes ---

    @property
    def _current(self) -> _Scope:
        return self._stack[-1]

    @contextmanager
    def scope(
        self,
        path: str = "/",
        *,
        pipe_through: Iterable[str] = (),
        alias: str | None = None,
    ) -> Iterator[Router]:
        """Open a nested scope.

        Args:
            path (str): Path prefix, appended to the enclosing prefix.
            pipe_through (Iterable[str]): Pipelines for every route in the scope,
                appended to the enclosing scope's pipelines.
            alias (str | None): Helper prefix (``alias="api"`` → ``api_user``).

        Yields:
            Router: This router.
        """
        outer = self._current
        self._stack.append(
            _Scope(
                prefix=join_paths(outer.prefix, path),
                pipelines=outer.pipelines + tuple(pipe_through),
                aliases=outer.aliases + ((alias,) if alias else ()),
            )
        )
        try:
            yield self
        finally:
            self._stack.pop()

    def pipe_through(self, *names: str) -> None:
        """Add pipelines to the current scope for the routes declared after this call."""
        self._current.pipelines = self._current.pipelines + names

    def _helper(self, name: str) -> str:
        return "_".join((*self._current.aliases, name))

    # --- Routes ---

    def _add(self, route: Route) -> Route:
        self._routes.append(route)
        logger.trace("Declared %s %s -> %s", route.method.value, route.path, route.describe_target())
        return route

    def match(
        self,
        methods: Iterable[str | HttpMethod],
        path: str,
        controller: Any,
        action: str,
        *,
        as_: str | None = None,
    ) -> list[Route]:
        """Declare a route for several methods at once."""
        scope = self._current
        pattern = PathPattern.compile(join_paths(scope.prefix, path))
        helper = self._helper(as_ or helper_from_controller(controller))
        return [
            self._add(
                Route(
                    method=HttpMethod.parse(m),
                    pattern=pattern,
                    pipelines=scope.pipelines,
                    controller=controller,
                    action=action,
                    helper=helper,
                )
            )
            for m in methods
        ]

    def get(self, path: str, controller: Any, action: str, *, as_: str | None = None) -> Route:
        """Declare a GET route."""
        return self.match([HttpMethod.GET], path, controller, action, as_=as_)[0]

    def post(self, path: str, controller: Any, action: str, *, as_: str | None = None) -> Route:
        """Declare a POST route."""
        return self.match([HttpMethod.POST], path, controller, action, as_=as_)[0]

    def put(self, path: str, controller: Any, action: str, *, as_: str | None = None) -> Route:
        """Declare a PUT route."""
        return self.match([HttpMethod.PUT], path, controller, action, as_=as_)[0]

    def patch(self, path: str, controller: Any, action: str, *, as_: str | None = None) -> Route:
        """Declare a PATCH route."""
        return self.match([HttpMethod.PATCH], path, controller, action, as_=as_)[0]

    def delete(self, path: str, controller: Any, action: str, *, as_: str | None = None) -> Route:
        """Declare a DELETE route."""
        return self.match([HttpMethod.DELETE], path, controller, action, as_=as_)[0]

    def resources(
        self,
        path: str,
        controller: Any,
        *,
        only: Iterable[str] | None = None,
        except_: Iterable[str] | None = None,
        param: str = "id",
        as_: str | None = None,
    ) -> _NestedResources:
        """Declare the conventional routes of a resource.

        The routes are registered immediately. Using the return value as a
        context manager nests further declarations under the member path
        (``/users/:user_id``) and helper (``user_``).

        Args:
            path (str): Collection path relative to the current scope.
            controller (Any): Controller handling the actions.
            only (Iterable[str] | None): Keep only these actions.
            except_ (Iterable[str] | None): Drop these actions.
            param (str): Member id param name.
            as_ (str | None): Singular helper name override.

        Returns:
            _NestedResources: Context manager for nested declarations.

        Raises:
            RouteConfigError: On unknown action names.
        """
        scope = self._current
        full_path = join_paths(scope.prefix, path)
        singular = as_ or singularize(resource_name(path))
        for route in expand_resources(
            full_path,
            controller,
            only=only,
            except_=except_,
            param=param,
            helper=self._helper(singular),
            pipelines=scope.pipelines,
        ):
            self._add(route)
        nested = _Scope(
            prefix=join_paths(full_path, f":{singular}_id"),
            pipelines=scope.pipelines,
            aliases=(*scope.aliases, singular),
        )
        return _NestedResources(self, nested)

    def forward(self, path: str, target: Any, *, as_: str | None = None) -> Route:
        """Forward every request under ``path`` (any method) to ``target``.

        ``target`` is a callable ``target(conn) -> Conn`` (for example another
        `Endpoint`); the remaining path is available as
        ``params["path_info"]``.
        """
        if not callable(target):
            raise RouteConfigError(f"forward target for {path!r} is not callable: {target!r}")
        scope = self._current
        pattern = PathPattern.compile(join_paths(scope.prefix, path, f"*{FORWARD_GLOB}"))
        return self._add(
            Route(
                method=HttpMethod.ANY,
                pattern=pattern,
                pipelines=scope.pipelines,
                controller=target,
                action="call",
                helper=self._helper(as_) if as_ else None,
                kind=RouteKind.FORWARD,
            )
        )

    # --- Build ---

    def build(self, *, strict: bool = False) -> RouteTable:
        """Freeze the declarations into a route table.

        Args:
            strict (bool): Raise on unreachable duplicate routes instead of
                recording warnings.

        Returns:
            RouteTable: The immutable table.

        Raises:
            DuplicateRouteError: If ``strict`` and duplicates exist.
            UnknownPipelineError: If a scope pipes through an undefined pipeline.
        """
        if len(self._stack) != 1:
            raise RouteConfigError("Router.build() called inside an open scope")

        diagnostics = DiagnosticLog()
        duplicates = find_duplicates(self._routes)
        if duplicates and strict:
            raise DuplicateRouteError(duplicates)
        for earlier, later in duplicates:
            message = (
                f"{later.method.value} {later.path} ({later.describe_target()}) is unreachable: "
                f"shadowed by {earlier.describe_target()}"
            )
            logger.warning("%s", message)
            diagnostics.add_warning(message)

        table = RouteTable(self._routes, self._registry, diagnostics.freeze())
        logger.debug("Built route table: %d route(s), %d pipeline(s)", len(table), len(self._registry))
        return table
