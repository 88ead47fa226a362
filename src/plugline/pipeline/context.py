# topmark:header:start
#
#   project      : Plugline
#   file         : context.py
#   file_relpath : src/plugline/pipeline/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Connection context model for the Plugline pipeline.

This module defines the value that represents one in-flight request/response
exchange as it flows through pipelines, controller plugs and the action. The
central type is [`Conn`][plugline.pipeline.context.Conn].

Sections:
    Conn:
        Frozen dataclass holding the request data, accumulated assigns, flash
        messages, response state and the halt flag. Steps never mutate the
        incoming conn; every helper returns a new instance.

    Template:
        The "template selector + variables" pair attached by `Conn.render`.
        Producing a body from it is the job of the render collaborator
        (see `plugline.views`).

Lifecycle:
    The endpoint creates a Conn per request (`Conn.from_request`), threads it
    through the endpoint plugs, the route pipelines, the controller plugs and
    the action, then renders and writes out the final response.

Invariant:
    Once ``halted`` is True the conn must be *finalized* (a response was sent
    or a template was attached) before the pipeline returns. The runner
    enforces this.
"""

from __future__ import annotations

import dataclasses
import json as jsonlib
from dataclasses import dataclass, field
from html import escape
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_LAYOUT
from plugline.core.errors import StepContractError
from plugline.http.methods import HttpMethod
from plugline.http.params import decode_params
from plugline.http.response import Response
from plugline.http.status import resolve_status

if TYPE_CHECKING:
    from collections.abc import Mapping

    from plugline.config.logging import PluglineLogger
    from plugline.http.request import Request

logger: PluglineLogger = get_logger(__name__)

__all__: list[str] = [
    "Conn",
    "Template",
]

# Content types used by the send helpers and by format negotiation
CONTENT_TYPES: dict[str, str] = {
    "html": "text/html",
    "json": "application/json",
    "text": "text/plain",
    "xml": "text/xml",
}

# Keys used in ``Conn.private``
PRIVATE_CONTROLLER = "controller"
PRIVATE_ACTION = "action"
PRIVATE_VIEW = "view"
PRIVATE_LAYOUT = "layout"
PRIVATE_FORMAT = "format"
PRIVATE_PIPELINES = "pipelines"


def _frozen(mapping: Mapping[str, Any] | None = None) -> MappingProxyType[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Template:
    """Template selector and variables handed to the render collaborator.

    Attributes:
        view (str): View name, e.g. ``"HelloView"``.
        name (str): Template base name without format, e.g. ``"index"``.
        format (str): Format of the template variant, e.g. ``"html"``.
        layout (str | None): Layout template (in the layout view), or None to
            render without a layout.
        variables (Mapping[str, Any]): Template variables: ``flash``, then the
            assigns, then the variables passed to `Conn.render`.
    """

    view: str
    name: str
    format: str
    layout: str | None
    variables: Mapping[str, Any] = field(default_factory=_frozen)

    @property
    def key(self) -> str:
        """Return the template key, e.g. ``"index.html"``."""
        return f"{self.name}.{self.format}"


@dataclass(frozen=True)
class Conn:
    """Frozen per-request connection threaded through every step.

    Attributes:
        method (HttpMethod): Request method.
        path (str): Request path.
        params (Mapping[str, Any]): Read-only request params (path, query and body).
        req_headers (Mapping[str, str]): Read-only request headers, lower-cased names.
        assigns (Mapping[str, Any]): Values computed by steps (current user, fetched
            resource, locale) and passed on to later steps, the action and templates.
        flash (Mapping[str, str]): Flash messages by kind (``"info"``, ``"error"``).
        private (Mapping[str, Any]): Framework-private values (controller, action,
            view, layout, negotiated format).
        status (int | None): Response status set ahead of sending/rendering.
        resp_headers (tuple[tuple[str, str], ...]): Response headers set so far.
        halted (bool): True once a step stopped the pipeline.
        response (Response | None): The finalized response, once sent.
        template (Template | None): Template attached by `render`, rendered by
            the endpoint through the render collaborator.
    """

    method: HttpMethod = HttpMethod.GET
    path: str = "/"
    params: Mapping[str, Any] = field(default_factory=_frozen)
    req_headers: Mapping[str, str] = field(default_factory=_frozen)
    assigns: Mapping[str, Any] = field(default_factory=_frozen)
    flash: Mapping[str, str] = field(default_factory=_frozen)
    private: Mapping[str, Any] = field(default_factory=_frozen)
    status: int | None = None
    resp_headers: tuple[tuple[str, str], ...] = ()
    halted: bool = False
    response: Response | None = None
    template: Template | None = None

    def __post_init__(self) -> None:
        # Coerce plain dicts so mutation is a hard runtime error
        for name in ("params", "assigns", "flash", "private"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _frozen(value))
        if not isinstance(self.req_headers, MappingProxyType):
            headers = {k.lower(): v for k, v in self.req_headers.items()}
            object.__setattr__(self, "req_headers", MappingProxyType(headers))
        if not isinstance(self.method, HttpMethod):
            object.__setattr__(self, "method", HttpMethod.parse(self.method))

    @classmethod
    def from_request(cls, request: Request, *, method: HttpMethod | None = None) -> Conn:
        """Create the initial conn for an inbound request.

        Args:
            request (Request): The inbound request.
            method (HttpMethod | None): Method to record instead of parsing
                ``request.method``.

        Returns:
            Conn: A fresh, un-halted conn with decoded params and headers.

        Raises:
            RouteConfigError: If ``method`` is None and ``request.method`` is
                not a known method.
        """
        return cls(
            method=method or HttpMethod.parse(request.method),
            path=request.path,
            params=decode_params(request.query_string, request.body_params),
            req_headers=request.headers,
        )

    def replace(self, **changes: Any) -> Self:
        """Return a new conn with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    # --- State predicates ---

    @property
    def finalized(self) -> bool:
        """Return True once a response was sent or a template attached."""
        return self.response is not None or self.template is not None

    def req_header(self, name: str) -> str | None:
        """Return request header ``name`` (case-insensitive), or None."""
        return self.req_headers.get(name.lower())

    def resp_header(self, name: str) -> str | None:
        """Return response header ``name`` set so far, or None."""
        wanted = name.lower()
        for key, value in self.resp_headers:
            if key == wanted:
                return value
        return None

    # --- Assigns, flash, private ---

    def assign(self, key: str, value: Any) -> Conn:
        """Return a conn with ``assigns[key] = value``."""
        return self.replace(assigns={**self.assigns, key: value})

    def merge_assigns(self, **values: Any) -> Conn:
        """Return a conn with all ``values`` merged into the assigns."""
        return self.replace(assigns={**self.assigns, **values})

    def put_flash(self, kind: str, message: str) -> Conn:
        """Return a conn with a flash message of the given kind."""
        return self.replace(flash={**self.flash, kind: message})

    def get_flash(self, kind: str | None = None) -> Any:
        """Return the flash message for ``kind``, or the whole flash mapping."""
        if kind is None:
            return dict(self.flash)
        return self.flash.get(kind)

    def clear_flash(self) -> Conn:
        """Return a conn with no flash messages."""
        return self.replace(flash={})

    def put_private(self, key: str, value: Any) -> Conn:
        """Return a conn with ``private[key] = value``."""
        return self.replace(private={**self.private, key: value})

    def put_view(self, view: str) -> Conn:
        """Select the view used by `render`."""
        return self.put_private(PRIVATE_VIEW, view)

    def put_layout(self, layout: str | bool) -> Conn:
        """Select the layout template; ``False`` renders without a layout."""
        if layout is True:
            raise ValueError("put_layout expects a layout name or False")
        return self.put_private(PRIVATE_LAYOUT, layout)

    def put_format(self, fmt: str) -> Conn:
        """Store the negotiated response format (``"html"``, ``"json"``, ...)."""
        return self.put_private(PRIVATE_FORMAT, fmt)

    def get_format(self) -> str | None:
        """Return the negotiated response format, if any."""
        return self.private.get(PRIVATE_FORMAT)

    # --- Response state ---

    def put_status(self, code: int | str) -> Conn:
        """Set the response status from an integer or a friendly name."""
        return self.replace(status=resolve_status(code))

    def put_resp_header(self, name: str, value: str) -> Conn:
        """Set response header ``name``, replacing any previous value."""
        key = name.lower()
        headers = tuple((k, v) for k, v in self.resp_headers if k != key)
        return self.replace(resp_headers=headers + ((key, value),))

    def put_resp_content_type(self, content_type: str, charset: str | None = "utf-8") -> Conn:
        """Set the ``content-type`` response header."""
        value = f"{content_type}; charset={charset}" if charset else content_type
        return self.put_resp_header("content-type", value)

    def halt(self) -> Conn:
        """Return a halted conn; no later step of the running pipeline executes."""
        return self.replace(halted=True)

    def _ensure_unsent(self, what: str) -> None:
        if self.finalized:
            raise StepContractError(f"Cannot {what}: a response was already sent for {self.path}")

    def send_resp(self, status: int | str | None = None, body: str = "") -> Conn:
        """Attach the final response.

        Args:
            status (int | str | None): Status code or name; defaults to the status
                set earlier, or 200.
            body (str): Response body.

        Returns:
            Conn: The conn with ``response`` set.

        Raises:
            StepContractError: If the conn was already finalized.
        """
        self._ensure_unsent("send response")
        code = resolve_status(status) if status is not None else (self.status or 200)
        response = Response(status=code, headers=self.resp_headers, body=body)
        logger.debug("send_resp %s %s -> %d", self.method.value, self.path, code)
        return self.replace(status=code, response=response)

    def _send_typed(self, fmt: str, body: str) -> Conn:
        conn = self
        if conn.resp_header("content-type") is None:
            conn = conn.put_resp_content_type(CONTENT_TYPES[fmt])
        return conn.send_resp(body=body)

    def text(self, body: str) -> Conn:
        """Send a ``text/plain`` response."""
        return self._send_typed("text", body)

    def html(self, body: str) -> Conn:
        """Send a ``text/html`` response without a template."""
        return self._send_typed("html", body)

    def json(self, data: Any) -> Conn:
        """Send ``data`` encoded as JSON."""
        return self._send_typed("json", jsonlib.dumps(data))

    def redirect(self, *, to: str | None = None, external: str | None = None) -> Conn:
        """Send a 302 redirect.

        Args:
            to (str | None): A path within the application (must start with ``/``).
            external (str | None): A fully-qualified URL.

        Returns:
            Conn: The conn with a redirect response attached.

        Raises:
            ValueError: If neither or both targets are given, or ``to`` is not a
                local path.
        """
        if (to is None) == (external is None):
            raise ValueError("redirect expects exactly one of 'to' or 'external'")
        if to is not None:
            if not to.startswith("/") or to.startswith("//"):
                raise ValueError(f"redirect 'to' expects a local path, got {to!r}")
            target = to
        else:
            assert external is not None
            if "://" not in external:
                raise ValueError(f"redirect 'external' expects a full URL, got {external!r}")
            target = external
        body = f'<html><body>You are being <a href="{escape(target)}">redirected</a>.</body></html>'
        conn = self.put_resp_header("location", target).put_resp_content_type("text/html")
        return conn.send_resp(302 if self.status is None else self.status, body)

    def render(self, template: str, **variables: Any) -> Conn:
        """Attach a template selector and its variables.

        A template name with an extension (``"show.json"``) fixes the format; a
        bare name (``"index"``) uses the negotiated format, defaulting to html.

        Args:
            template (str): Template name.
            **variables (Any): Template variables, merged over the assigns.

        Returns:
            Conn: The finalized conn carrying a `Template`.

        Raises:
            StepContractError: If no view was selected or the conn was finalized.
        """
        self._ensure_unsent("render")
        view = self.private.get(PRIVATE_VIEW)
        if not view:
            raise StepContractError(f"Cannot render {template!r}: no view selected for {self.path}")
        if "." in template:
            name, fmt = template.rsplit(".", 1)
        else:
            name, fmt = template, self.get_format() or "html"
        layout_setting = self.private.get(PRIVATE_LAYOUT, DEFAULT_LAYOUT)
        selected = Template(
            view=view,
            name=name,
            format=fmt,
            layout=None if layout_setting is False else layout_setting,
            variables=_frozen({"flash": dict(self.flash), **self.assigns, **variables}),
        )
        logger.debug("render %s/%s for %s", view, selected.key, self.path)
        return self.replace(template=selected)
