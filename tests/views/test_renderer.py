# topmark:header:start
#
#   project      : Plugline
#   file         : test_renderer.py
#   file_relpath : tests/views/test_renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `TemplateRenderer` render collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from plugline.core.errors import StepContractError, TemplateNotFoundError
from plugline.views.renderer import TemplateRenderer, error_view_body
from tests.conftest import make_conn, parametrize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from plugline.views.renderer import ViewTemplates


def _layout(a: Mapping[str, Any]) -> str:
    return f"<main>{a['inner_content']}</main>"


VIEWS: dict[str, ViewTemplates] = {
    "TestView": {
        "index.html": lambda a: f"<p>{a['name']}</p>",
        "index.text": "Hello {name}",
        "show.json": lambda a: f'{{"name": "{a["name"]}"}}',
    },
    "LayoutView": {"app.html": _layout},
    "ErrorView": {"404.html": "Custom not found"},
}

RENDERER = TemplateRenderer(VIEWS)


def test_html_is_wrapped_in_layout() -> None:
    """HTML templates are wrapped in the conn's layout."""
    conn = make_conn().render("index", name="Moon")
    response = RENDERER.render(conn)

    assert response.status == 200
    assert response.body == "<main><p>Moon</p></main>"
    assert response.content_type == "text/html; charset=utf-8"


def test_other_formats_are_never_wrapped() -> None:
    """Text and json output ignore the layout."""
    text = RENDERER.render(make_conn().put_format("text").render("index", name="Moon"))
    data = RENDERER.render(make_conn().render("show.json", name="Moon"))

    assert text.body == "Hello Moon"
    assert text.content_type == "text/plain; charset=utf-8"
    assert data.body == '{"name": "Moon"}'
    assert data.content_type == "application/json; charset=utf-8"


def test_layout_can_be_disabled() -> None:
    """Per conn with ``put_layout(False)``, or for the whole renderer."""
    conn = make_conn().put_layout(False).render("index", name="Moon")
    assert RENDERER.render(conn).body == "<p>Moon</p>"

    no_layouts = TemplateRenderer(VIEWS, layouts=False)
    assert no_layouts.render(make_conn().render("index", name="Moon")).body == "<p>Moon</p>"


def test_status_and_headers_are_kept() -> None:
    """The response carries the conn status and its response headers."""
    conn = make_conn().put_status(201).put_resp_header("x-id", "9").render("index", name="Moon")
    response = RENDERER.render(conn)

    assert response.status == 201
    assert response.header("x-id") == "9"


def test_explicit_content_type_wins() -> None:
    """A content type set on the conn is not replaced."""
    conn = make_conn().put_resp_content_type("text/xml").render("index.text", name="Moon")
    assert RENDERER.render(conn).content_type == "text/xml; charset=utf-8"


def test_missing_template_or_layout() -> None:
    """Unknown templates and layouts raise `TemplateNotFoundError`."""
    with pytest.raises(TemplateNotFoundError) as exc_info:
        RENDERER.render(make_conn().render("edit"))
    assert (exc_info.value.view, exc_info.value.template) == ("TestView", "edit.html")

    with pytest.raises(TemplateNotFoundError):
        RENDERER.render(make_conn().put_layout("admin.html").render("index", name="x"))


def test_error_view_falls_back_to_reason_phrase() -> None:
    """Error templates that are not defined render the standard reason phrase."""
    custom = make_conn(view="ErrorView").put_layout(False).render("404")
    fallback = make_conn(view="ErrorView").put_layout(False).render("403")

    assert RENDERER.render(custom).body == "Custom not found"
    assert RENDERER.render(fallback).body == "Forbidden"


@parametrize("name, body", [("404", "Not Found"), ("500", "Internal Server Error"), ("oops", "Internal Server Error")])
def test_error_view_body(name: str, body: str) -> None:
    """Numeric names map to reason phrases; anything else is a server error."""
    assert error_view_body(name) == body


def test_render_requires_template() -> None:
    """Rendering a conn without a template is a contract violation."""
    with pytest.raises(StepContractError):
        RENDERER.render(make_conn())


def test_known_views() -> None:
    """Introspection helpers list views and templates."""
    assert RENDERER.views == ("TestView", "LayoutView", "ErrorView")
    assert RENDERER.has_template("TestView", "show.json")
    assert not RENDERER.has_template("TestView", "show.html")
