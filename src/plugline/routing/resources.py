# topmark:header:start
#
#   project      : Plugline
#   file         : resources.py
#   file_relpath : src/plugline/routing/resources.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Expansion of ``resources`` declarations into conventional routes.

``resources("/users", UserController)`` stands for the seven conventional
actions, in this listing order:

| method      | path              | action  |
|-------------|-------------------|---------|
| GET         | /users            | index   |
| GET         | /users/:id/edit   | edit    |
| GET         | /users/new        | new     |
| GET         | /users/:id        | show    |
| POST        | /users            | create  |
| PATCH, PUT  | /users/:id        | update  |
| DELETE      | /users/:id        | delete  |

``new`` is declared before ``show`` so that ``/users/new`` is not captured
as an id.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

from plugline.core.errors import RouteConfigError
from plugline.http.methods import HttpMethod
from plugline.routing.route import PathPattern, Route, join_paths

RESOURCE_ACTIONS: Final[tuple[str, ...]] = (
    "index",
    "edit",
    "new",
    "show",
    "create",
    "update",
    "delete",
)

# (method, member?, suffix, action) in listing order; update appears twice
_RESOURCE_ROUTES: Final[tuple[tuple[HttpMethod, bool, str, str], ...]] = (
    (HttpMethod.GET, False, "", "index"),
    (HttpMethod.GET, True, "edit", "edit"),
    (HttpMethod.GET, False, "new", "new"),
    (HttpMethod.GET, True, "", "show"),
    (HttpMethod.POST, False, "", "create"),
    (HttpMethod.PATCH, True, "", "update"),
    (HttpMethod.PUT, True, "", "update"),
    (HttpMethod.DELETE, True, "", "delete"),
)


def singularize(name: str) -> str:
    """Return a naive singular form of a resource name (``posts`` → ``post``)."""
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if name.endswith(("ses", "xes")):
        return name[:-2]
    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name


def resource_name(path: str) -> str:
    """Return the last static segment of ``path`` (``/api/users`` → ``users``)."""
    segments = [s for s in path.split("/") if s and s[0] not in ":*"]
    if not segments:
        raise RouteConfigError(f"Cannot derive a resource name from {path!r}")
    return segments[-1]


def select_actions(
    only: Iterable[str] | None = None,
    except_: Iterable[str] | None = None,
) -> tuple[str, ...]:
    """Return the conventional actions kept by ``only`` / ``except_``.

    Raises:
        RouteConfigError: If both filters are given or a name is not a
            conventional action.
    """
    if only is not None and except_ is not None:
        raise RouteConfigError("resources accepts either 'only' or 'except_', not both")
    chosen = only if only is not None else except_
    names = tuple(chosen) if chosen is not None else ()
    unknown = [n for n in names if n not in RESOURCE_ACTIONS]
    if unknown:
        raise RouteConfigError(
            f"Unknown resource action(s) {unknown}; expected a subset of {list(RESOURCE_ACTIONS)}"
        )
    if only is not None:
        return tuple(a for a in RESOURCE_ACTIONS if a in names)
    return tuple(a for a in RESOURCE_ACTIONS if a not in names)


def expand_resources(
    path: str,
    controller: Any,
    *,
    only: Iterable[str] | None = None,
    except_: Iterable[str] | None = None,
    param: str = "id",
    helper: str | None = None,
    pipelines: tuple[str, ...] = (),
) -> list[Route]:
    """Generate the conventional routes of a resource.

    Args:
        path (str): Full collection path, scope prefix included (``/users``).
        controller (Any): Controller class handling the actions.
        only (Iterable[str] | None): Keep only these actions.
        except_ (Iterable[str] | None): Drop these actions.
        param (str): Name of the member id param.
        helper (str | None): Path helper name; defaults to the singular resource name.
        pipelines (tuple[str, ...]): Pipelines of the enclosing scope.

    Returns:
        list[Route]: Routes in listing order; ``update`` yields both PATCH and PUT.

    Raises:
        RouteConfigError: On an unknown action name or conflicting filters.
    """
    actions = select_actions(only, except_)
    helper_name = helper or singularize(resource_name(path))
    routes: list[Route] = []
    for method, member, suffix, action in _RESOURCE_ROUTES:
        if action not in actions:
            continue
        parts = [path]
        if member:
            parts.append(f":{param}")
        if suffix:
            parts.append(suffix)
        routes.append(
            Route(
                method=method,
                pattern=PathPattern.compile(join_paths(*parts)),
                pipelines=pipelines,
                controller=controller,
                action=action,
                helper=helper_name,
            )
        )
    return routes
