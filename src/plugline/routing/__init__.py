# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/routing/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Routing: path patterns, scopes, resources and the immutable route table."""

from __future__ import annotations

from plugline.routing.resources import RESOURCE_ACTIONS, expand_resources
from plugline.routing.route import PathPattern, Route, RouteKind
from plugline.routing.router import Router
from plugline.routing.table import RouteMatch, RouteTable, find_duplicates

__all__: list[str] = [
    "RESOURCE_ACTIONS",
    "PathPattern",
    "Route",
    "RouteKind",
    "RouteMatch",
    "RouteTable",
    "Router",
    "expand_resources",
    "find_duplicates",
]
