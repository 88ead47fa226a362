# topmark:header:start
#
#   project      : Plugline
#   file         : renderer.py
#   file_relpath : src/plugline/views/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render collaborator: turns a conn's `Template` selector into a `Response`.

Views are plain mappings from template keys to template functions:

    views = {
        "HelloView": {
            "index.html": lambda a: f"<p>{a['message']}</p>",
            "show.json": lambda a: json.dumps({"id": a["id"]}),
        },
        "LayoutView": {
            "app.html": lambda a: f"<main>{a['inner_content']}</main>",
        },
    }

A template may also be a ``str`` formatted with the variables
(``"Hello {name}"``). HTML output is wrapped in the conn's layout, whose
template receives the rendered page as ``inner_content``; other formats are
never wrapped.

`ErrorView` templates fall back to the standard reason phrase, so
``render("404")`` on the error view always succeeds.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_LAYOUT_VIEW, ERROR_VIEW
from plugline.core.errors import StepContractError, TemplateNotFoundError
from plugline.http.response import Response
from plugline.http.status import reason_phrase
from plugline.pipeline.context import CONTENT_TYPES

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn, Template

logger: PluglineLogger = get_logger(__name__)

TemplateFn = Callable[[Mapping[str, Any]], str]
ViewTemplates = Mapping[str, "TemplateFn | str"]

INNER_CONTENT = "inner_content"


def error_view_body(name: str) -> str:
    """Return the default error page text for template ``name`` (``"404"`` → ``"Not Found"``)."""
    if name.isdigit():
        phrase = reason_phrase(int(name))
        if phrase:
            return phrase
    return "Internal Server Error"


class TemplateRenderer:
    """Render templates attached by `Conn.render`.

    Args:
        views (Mapping[str, ViewTemplates]): View name → template key → template.
        layouts (bool): Set False to never wrap html output in a layout.
        layout_view (str): View holding the layout templates.
    """

    def __init__(
        self,
        views: Mapping[str, ViewTemplates],
        *,
        layouts: bool = True,
        layout_view: str = DEFAULT_LAYOUT_VIEW,
    ) -> None:
        self._views = {name: dict(templates) for name, templates in views.items()}
        self.layouts = layouts
        self.layout_view = layout_view

    @property
    def views(self) -> tuple[str, ...]:
        """Return the known view names."""
        return tuple(self._views)

    def has_template(self, view: str, key: str) -> bool:
        """Return True if ``view`` defines the template ``key``."""
        return key in self._views.get(view, {})

    def _lookup(self, view: str, key: str) -> TemplateFn | str:
        try:
            return self._views[view][key]
        except KeyError:
            raise TemplateNotFoundError(view, key) from None

    @staticmethod
    def _apply(template: TemplateFn | str, variables: Mapping[str, Any]) -> str:
        if isinstance(template, str):
            return template.format_map(dict(variables))
        return template(variables)

    def render_template(self, template: Template) -> str:
        """Return the body for ``template``, layout included.

        Raises:
            TemplateNotFoundError: If the template (or its layout) does not exist.
        """
        if template.view == ERROR_VIEW and not self.has_template(ERROR_VIEW, template.key):
            body = error_view_body(template.name)
        else:
            body = self._apply(self._lookup(template.view, template.key), template.variables)

        if self.layouts and template.format == "html" and template.layout:
            layout = self._lookup(self.layout_view, template.layout)
            body = self._apply(layout, {**template.variables, INNER_CONTENT: body})
        return body

    def render(self, conn: Conn) -> Response:
        """Produce the final response for a conn carrying a template.

        Args:
            conn (Conn): A conn finalized by `Conn.render`.

        Returns:
            Response: Status from the conn (200 by default), its response
            headers, and a content type derived from the template format
            unless one was set explicitly.

        Raises:
            StepContractError: If the conn carries no template.
            TemplateNotFoundError: If the template does not exist.
        """
        template = conn.template
        if template is None:
            raise StepContractError(f"Nothing to render for {conn.path}")
        body = self.render_template(template)
        if conn.resp_header("content-type") is None:
            media = CONTENT_TYPES.get(template.format, "text/plain")
            conn = conn.put_resp_content_type(media)
        logger.debug("Rendered %s/%s (%d bytes)", template.view, template.key, len(body))
        return Response(status=conn.status or 200, headers=conn.resp_headers, body=body)
