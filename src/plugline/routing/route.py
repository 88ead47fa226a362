# topmark:header:start
#
#   project      : Plugline
#   file         : route.py
#   file_relpath : src/plugline/routing/route.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Route values: compiled path patterns and immutable route entries.

Path patterns use the familiar segment syntax:

- static segments: ``/users``
- named params: ``/users/:user_id/posts/:id``
- a trailing glob capturing the rest of the path: ``/jobs/*path``

Trailing slashes are ignored on both patterns and request paths, so
``/hello/`` matches ``/hello``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote

from plugline.core.errors import RouteConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from plugline.http.methods import HttpMethod

_PARAM_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def normalize_path(path: str) -> str:
    """Return ``path`` with a single leading slash and no trailing slash."""
    segments = [s for s in path.split("/") if s]
    return "/" + "/".join(segments)


def join_paths(*parts: str) -> str:
    """Join path fragments, normalizing slashes (``join_paths("/api", "v1")`` → ``/api/v1``)."""
    return normalize_path("/".join(parts))


class RouteKind(str, Enum):
    """Kind of a route entry."""

    MATCH = "match"
    FORWARD = "forward"


@dataclass(frozen=True)
class PathPattern:
    """Compiled path pattern.

    Attributes:
        source (str): Normalized pattern text, e.g. ``/users/:user_id/posts``.
        segments (tuple[str, ...]): Pattern segments.
        params (tuple[str, ...]): Names of the captured params, in order.
        glob (str | None): Name of the trailing glob param, if any.
    """

    source: str
    segments: tuple[str, ...] = field(default=(), compare=False)
    params: tuple[str, ...] = field(default=(), compare=False)
    glob: str | None = field(default=None, compare=False)

    @classmethod
    def compile(cls, pattern: str) -> PathPattern:
        """Compile ``pattern``.

        Raises:
            RouteConfigError: On an invalid or repeated param name, or a glob
                that is not the last segment.
        """
        source = normalize_path(pattern)
        segments = tuple(s for s in source.split("/") if s)
        params: list[str] = []
        glob: str | None = None
        for index, segment in enumerate(segments):
            if segment[0] not in ":*":
                continue
            name = segment[1:]
            if not _PARAM_RE.match(name):
                raise RouteConfigError(f"Invalid path param {segment!r} in {pattern!r}")
            if name in params:
                raise RouteConfigError(f"Path param {name!r} appears twice in {pattern!r}")
            if segment[0] == "*":
                if index != len(segments) - 1:
                    raise RouteConfigError(f"Glob {segment!r} must be the last segment of {pattern!r}")
                glob = name
            params.append(name)
        return cls(source=source, segments=segments, params=tuple(params), glob=glob)

    @property
    def shape(self) -> tuple[str, ...]:
        """Return the segments with param names erased (``:id`` → ``:``, ``*rest`` → ``*``).

        Two patterns with the same shape match exactly the same paths.
        """
        return tuple(s[0] if s[0] in ":*" else s for s in self.segments)

    def match(self, path: str) -> dict[str, str] | None:
        """Match a request path.

        Args:
            path (str): The request path (without query string).

        Returns:
            dict[str, str] | None: Captured params (URL-decoded), or None when
            the path does not match. A glob captures the remaining segments
            joined with ``/`` (possibly empty).
        """
        parts = [p for p in path.split("/") if p]
        fixed = self.segments[:-1] if self.glob else self.segments
        if self.glob:
            if len(parts) < len(fixed):
                return None
        elif len(parts) != len(fixed):
            return None

        captured: dict[str, str] = {}
        for segment, part in zip(fixed, parts, strict=False):
            if segment.startswith(":"):
                captured[segment[1:]] = unquote(part)
            elif segment != part:
                return None
        if self.glob:
            captured[self.glob] = "/".join(unquote(p) for p in parts[len(fixed) :])
        return captured

    def build(self, *args: Any, **kwargs: Any) -> str:
        """Generate a path, filling params positionally then by name.

        Raises:
            RouteConfigError: On a missing or surplus param value.
        """
        if len(args) > len(self.params):
            raise RouteConfigError(f"Too many params for {self.source}: {args!r}")
        values = dict(zip(self.params, args, strict=False))
        for name in self.params[len(args) :]:
            if name not in kwargs:
                raise RouteConfigError(f"Missing param {name!r} for {self.source}")
            values[name] = kwargs[name]

        out: list[str] = []
        for segment in self.segments:
            if segment[0] == ":":
                out.append(quote(str(_param_value(values[segment[1:]])), safe=""))
            elif segment[0] == "*":
                out.append(quote(str(values[segment[1:]]), safe="/"))
            else:
                out.append(segment)
        return normalize_path("/".join(out))


def _param_value(value: Any) -> Any:
    # Resources may be passed instead of ids
    return getattr(value, "id", value)


@dataclass(frozen=True)
class Route:
    """One route-table entry.

    Attributes:
        method (HttpMethod): Request method (``ANY`` for forwards).
        pattern (PathPattern): Full path pattern, scope prefixes included.
        pipelines (tuple[str, ...]): Pipeline names to run, in order.
        controller (Any): Controller class (or forward target).
        action (str): Action name (``"call"`` for forwards).
        helper (str | None): Path helper name, e.g. ``"user_post"``.
        kind (RouteKind): ``MATCH`` or ``FORWARD``.
        defaults (Mapping[str, Any]): Extra params merged into the conn.
    """

    method: HttpMethod
    pattern: PathPattern
    pipelines: tuple[str, ...]
    controller: Any
    action: str
    helper: str | None = None
    kind: RouteKind = RouteKind.MATCH
    defaults: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def path(self) -> str:
        """Return the pattern source."""
        return self.pattern.source

    @property
    def controller_name(self) -> str:
        """Return a display name for the controller or forward target."""
        target = self.controller
        return getattr(target, "__name__", None) or type(target).__name__

    def describe_target(self) -> str:
        """Return ``Controller :action`` (or ``-> Target`` for forwards)."""
        if self.kind is RouteKind.FORWARD:
            return f"-> {self.controller_name}"
        return f"{self.controller_name} :{self.action}"
