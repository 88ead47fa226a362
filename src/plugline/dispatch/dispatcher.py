# topmark:header:start
#
#   project      : Plugline
#   file         : dispatcher.py
#   file_relpath : src/plugline/dispatch/dispatcher.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Invoke a controller action with the arguments it declares.

Actions come in two shapes:

- ``action(conn, params)``
- ``action(conn, params, actor)``: the actor is ``conn.assigns[actor_key]``
  (``"current_user"`` by default), typically assigned by an authentication step.

The arity is read from the action's signature; any other arity is a
programming error and raises `ActionArityError`.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_ACTOR_KEY
from plugline.core.errors import ActionArityError

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def action_arity(action: Callable[..., Any]) -> int:
    """Return the number of positional parameters ``action`` declares.

    Raises:
        ActionArityError: If the signature cannot be inspected.
    """
    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError) as exc:
        raise ActionArityError(f"Cannot inspect action {action!r}: {exc}") from exc
    return sum(1 for p in signature.parameters.values() if p.kind in _POSITIONAL)


def dispatch(
    action: Callable[..., Any],
    conn: Conn,
    *,
    actor_key: str = DEFAULT_ACTOR_KEY,
) -> Any:
    """Call ``action`` with ``(conn, params)`` or ``(conn, params, actor)``.

    Args:
        action (Callable[..., Any]): The action (bound method or function).
        conn (Conn): The connection after all pipelines ran.
        actor_key (str): Assign key of the actor for 3-arity actions.

    Returns:
        Any: Whatever the action returned, unchanged: a `Conn` or a result
        value for the fallback table. A halted ``conn`` is returned as is and
        the action is not invoked.

    Raises:
        ActionArityError: If the action takes neither 2 nor 3 positional parameters.
    """
    if conn.halted:
        logger.debug("dispatch: conn halted, action %s not invoked", getattr(action, "__name__", action))
        return conn

    arity = action_arity(action)
    name = getattr(action, "__qualname__", repr(action))
    if arity == 2:
        logger.trace("dispatch: %s(conn, params)", name)
        return action(conn, conn.params)
    if arity == 3:
        actor = conn.assigns.get(actor_key)
        logger.trace("dispatch: %s(conn, params, %s=%r)", name, actor_key, actor)
        return action(conn, conn.params, actor)
    raise ActionArityError(
        f"Action {name} takes {arity} positional parameter(s); expected (conn, params) "
        f"or (conn, params, actor)"
    )
