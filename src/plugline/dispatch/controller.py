# topmark:header:start
#
#   project      : Plugline
#   file         : controller.py
#   file_relpath : src/plugline/dispatch/controller.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Controllers: groups of actions sharing plugs, a view and a fallback table.

    class PostController(Controller):
        plugs = [plug(FetchResourceStep(), {"fetch": blog.fetch_post}, actions=["show"])]
        action_fallback = error_fallback()

        def index(self, conn, params):
            return conn.render("index")

        def show(self, conn, params, current_user):
            return Err("unauthorized") if current_user is None else conn.render("show")

The controller-level pipeline is built once, when the class is created, so
invalid plug options fail at import time.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_ACTOR_KEY
from plugline.core.errors import StepContractError, UnhandledResultError
from plugline.dispatch.dispatcher import dispatch
from plugline.pipeline.context import PRIVATE_ACTION, PRIVATE_CONTROLLER, Conn
from plugline.pipeline.pipelines import EMPTY_PIPELINE, Pipeline, build
from plugline.pipeline.runner import run

if TYPE_CHECKING:
    from collections.abc import Sequence

    from plugline.config.logging import PluglineLogger
    from plugline.dispatch.fallback import FallbackTable

logger: PluglineLogger = get_logger(__name__)

_SUFFIX_RE = re.compile(r"Controller$")


def view_name_for(controller_name: str) -> str:
    """Return the default view of a controller (``HelloController`` → ``HelloView``)."""
    return _SUFFIX_RE.sub("", controller_name) + "View"


class Controller:
    """Base class for controllers.

    Class attributes:
        plugs (Sequence[Any]): Controller-level plugs, run before every action
            (honoring their ``actions`` guard).
        action_fallback (FallbackTable | None): Table converting non-conn action
            results; None means such results are unhandled.
        view (str): View used by ``render``; derived from the class name.
        actor_key (str): Assign key passed as third argument to 3-arity actions.
    """

    plugs: ClassVar[Sequence[Any]] = ()
    action_fallback: ClassVar[FallbackTable | None] = None
    view: ClassVar[str] = ""
    actor_key: ClassVar[str] = DEFAULT_ACTOR_KEY
    pipeline: ClassVar[Pipeline] = EMPTY_PIPELINE

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "view" not in cls.__dict__:
            cls.view = view_name_for(cls.__name__)
        cls.pipeline = build(cls.__name__, cls.plugs)

    @classmethod
    def actions(cls) -> tuple[str, ...]:
        """Return the public action names of this controller, inherited ones included."""
        names: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            if not issubclass(klass, Controller) or klass is Controller:
                continue
            for name, value in vars(klass).items():
                if callable(value) and not name.startswith("_") and name not in _RESERVED:
                    names[name] = None
        return tuple(names)

    @classmethod
    def call(cls, conn: Conn, action: str) -> Conn:
        """Run the controller plugs and the action, then apply the fallback.

        Args:
            conn (Conn): The connection after the route pipelines ran.
            action (str): Action name.

        Returns:
            Conn: A finalized connection.

        Raises:
            StepContractError: If the action does not exist or returns an
                unfinalized conn.
            UnhandledResultError: If a non-conn result matches no fallback clause.
        """
        handler = getattr(cls(), action, None) if not action.startswith("_") else None
        if handler is None or action in _RESERVED or not callable(handler):
            raise StepContractError(f"{cls.__name__} has no action {action!r}")

        conn = (
            conn.put_private(PRIVATE_CONTROLLER, cls.__name__)
            .put_private(PRIVATE_ACTION, action)
            .put_view(cls.view)
        )
        conn = run(cls.pipeline, conn, action=action)
        if conn.halted:
            return conn

        result = dispatch(handler, conn, actor_key=cls.actor_key)
        if isinstance(result, Conn):
            if not result.finalized:
                raise StepContractError(
                    f"{cls.__name__}.{action} returned a conn without sending or rendering a response"
                )
            return result

        if cls.action_fallback is None:
            raise UnhandledResultError(result, action=action)
        logger.debug("%s.%s returned %r; applying fallback", cls.__name__, action, result)
        return cls.action_fallback.resolve(conn, result)


_RESERVED = frozenset({"call", "actions"})
