# topmark:header:start
#
#   project      : Plugline
#   file         : methods.py
#   file_relpath : src/plugline/http/methods.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""HTTP request methods understood by the router."""

from __future__ import annotations

from yachalk import chalk

from plugline.core.colored_enum import ColoredStrEnum
from plugline.core.errors import RouteConfigError


class HttpMethod(ColoredStrEnum):
    """Request methods, colored for route listings.

    ``ANY`` (``"*"``) is only used by `forward` routes, which accept every method.
    """

    GET = ("GET", chalk.green)
    HEAD = ("HEAD", chalk.green)
    POST = ("POST", chalk.yellow)
    PUT = ("PUT", chalk.blue)
    PATCH = ("PATCH", chalk.blue)
    DELETE = ("DELETE", chalk.red)
    OPTIONS = ("OPTIONS", chalk.gray)
    ANY = ("*", chalk.magenta)

    @classmethod
    def parse(cls, value: str | HttpMethod) -> HttpMethod:
        """Return the member for ``value`` (case-insensitive).

        Raises:
            RouteConfigError: If ``value`` is not a known method.
        """
        member = cls.lookup(value)
        if member is None:
            raise RouteConfigError(f"Unknown HTTP method: {value!r}")
        return member

    @classmethod
    def lookup(cls, value: str | HttpMethod) -> HttpMethod | None:
        """Return the member for ``value`` (case-insensitive), or None if unknown."""
        if isinstance(value, HttpMethod):
            return value
        text = value.strip().upper()
        for member in cls:
            if member.value == text:
                return member
        return None

    def accepts(self, method: HttpMethod) -> bool:
        """Return True if a route declared with this method serves ``method``.

        HEAD requests are served by GET routes.
        """
        if self is HttpMethod.ANY or self is method:
            return True
        return self is HttpMethod.GET and method is HttpMethod.HEAD
