# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/views/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""View rendering for conns finalized with `Conn.render`."""

from __future__ import annotations

from plugline.views.renderer import TemplateRenderer, error_view_body

__all__: list[str] = [
    "TemplateRenderer",
    "error_view_body",
]
