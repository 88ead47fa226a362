# topmark:header:start
#
#   project      : Plugline
#   file         : resource.py
#   file_relpath : src/plugline/pipeline/steps/resource.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resource loading step.

Looks up the resource named by a request param (``params["id"]`` by default)
through a fetch function and assigns it for later steps and the action.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.core.errors import StepContractError
from plugline.dispatch.results import Err, Ok
from plugline.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

NOT_FOUND_REASON = "not_found"


@dataclass(frozen=True)
class FetchResourceOptions:
    """Initialized options of `FetchResourceStep`."""

    fetch: Callable[[str], Any]
    param: str
    assign_as: str
    redirect_to: str | None
    message: str


class FetchResourceStep(BaseStep):
    """Fetch a resource by id, or answer "not found" and halt.

    Options:
        fetch (Callable[[str], Ok | Err]): Lookup function, e.g. ``blog.fetch_post``.
        param (str): Request param holding the id (default ``"id"``).
        assign_as (str): Assign key receiving the resource (default ``"post"``).
        redirect_to (str | None): When set, a missing resource flashes
            ``message`` and redirects there instead of answering 404.
        message (str): ``info`` flash message used with ``redirect_to``.

    Outcomes:
        - ``Ok(resource)``: ``assigns[assign_as] = resource``.
        - ``Err("not_found")`` or a missing param: ``404 "Not found"`` (or the
          redirect), halted.
        - any other result: `StepContractError`, turned into a 500 by the endpoint.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> FetchResourceOptions:
        """Validate the options.

        Raises:
            TypeError: If options are not a mapping or ``fetch`` is not callable.
            ValueError: If ``redirect_to`` is not a local path.
        """
        if not isinstance(options, Mapping):
            raise TypeError(f"{self.name} expects a mapping of options")
        fetch = options.get("fetch")
        if not callable(fetch):
            raise TypeError(f"{self.name} needs a callable 'fetch'")
        redirect_to = options.get("redirect_to")
        if redirect_to is not None and (
            not isinstance(redirect_to, str) or not redirect_to.startswith("/") or redirect_to.startswith("//")
        ):
            raise ValueError(f"{self.name} 'redirect_to' must be a local path, got {redirect_to!r}")
        assign_as = str(options.get("assign_as", "post"))
        return FetchResourceOptions(
            fetch=fetch,
            param=str(options.get("param", "id")),
            assign_as=assign_as,
            redirect_to=redirect_to,
            message=str(options.get("message", f"That {assign_as} wasn't found")),
        )

    def call(self, conn: Conn, opts: FetchResourceOptions) -> Conn:
        """Assign the fetched resource or answer "not found" and halt."""
        resource_id = conn.params.get(opts.param)
        if resource_id is None:
            logger.debug("FetchResourceStep: no %r param on %s", opts.param, conn.path)
            return self._not_found(conn, opts)

        result = opts.fetch(resource_id)
        match result:
            case Ok(value):
                return conn.assign(opts.assign_as, value)
            case Err(reason) if reason == NOT_FOUND_REASON:
                logger.debug("FetchResourceStep: %s %r not found", opts.assign_as, resource_id)
                return self._not_found(conn, opts)
            case _:
                raise StepContractError(
                    f"{self.name}: unexpected result {result!r} fetching {opts.assign_as} {resource_id!r}"
                )

    @staticmethod
    def _not_found(conn: Conn, opts: FetchResourceOptions) -> Conn:
        if opts.redirect_to is not None:
            return conn.put_flash("info", opts.message).redirect(to=opts.redirect_to).halt()
        return conn.put_status(404).text("Not found").halt()
