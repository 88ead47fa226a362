# topmark:header:start
#
#   project      : Plugline
#   file         : views.py
#   file_relpath : src/plugline/demo/views.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Templates of the demo application, keyed by view and ``<name>.<format>``."""

from __future__ import annotations

import json
from html import escape
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from plugline.views.renderer import ViewTemplates


def _flash_html(a: Mapping[str, Any]) -> str:
    flash: Mapping[str, str] = a.get("flash") or {}
    return "".join(
        f'<p class="alert alert-{escape(kind)}">{escape(message)}</p>'
        for kind, message in sorted(flash.items())
    )


def _layout(title: str) -> Any:
    def render(a: Mapping[str, Any]) -> str:
        return (
            f'<!DOCTYPE html><html lang="{escape(str(a.get("locale", "en")))}">'
            f"<head><title>{escape(title)}</title></head><body>"
            f"{_flash_html(a)}<main>{a['inner_content']}</main>"
            "</body></html>"
        )

    return render


def _post_html(a: Mapping[str, Any]) -> str:
    items = "".join(f"<li>{escape(p.title)}</li>" for p in a.get("posts", ()))
    return f"<h2>Posts</h2><ul>{items}</ul>"


def _post_json(a: Mapping[str, Any]) -> str:
    post = a["post"]
    return json.dumps({"id": post.id, "title": post.title, "body": post.body})


VIEWS: dict[str, ViewTemplates] = {
    "LayoutView": {
        "app.html": _layout("Hello Plugline"),
        "admin.html": _layout("Plugline Admin"),
    },
    "PageView": {
        "index.html": "<h2>Welcome to Plugline!</h2>",
        "index.text": "Welcome to Plugline!",
    },
    "HelloView": {
        "index.html": lambda a: f"<h2>{escape(a['message'])}</h2>",
        "index.text": lambda a: a["message"],
        "show.html": lambda a: f"<h2>Hello {escape(a['message'])}</h2>",
        "show.text": lambda a: f"Hello {a['message']}",
    },
    "ExamplesView": {
        "index.html": "<h2>Examples</h2>",
        "index.text": lambda a: f"Examples {a.get('message', '')}".rstrip(),
        "index.xml": lambda a: f"<examples>{a.get('content', '')}</examples>",
    },
    "PostView": {
        "index.html": _post_html,
        "index.text": lambda a: "\n".join(p.title for p in a.get("posts", ())),
        "show.json": _post_json,
    },
    "MessageView": {
        "show.html": lambda a: f"<p>{escape(a['page'].text)}</p>",
        "show.text": lambda a: a["page"].text,
    },
}
