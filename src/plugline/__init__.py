# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline package.

Plugline is a small request-pipeline engine for HTTP-facing applications. A
connection value is threaded through named pipelines of steps ("plugs"), routed
to a controller action, and any tagged result the action returns is turned into
a response by an ordered fallback table.
"""

from __future__ import annotations
