# topmark:header:start
#
#   project      : Plugline
#   file         : request.py
#   file_relpath : src/plugline/http/request.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Inbound request value handed to the endpoint by a transport adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class Request:
    """Transport-neutral description of one inbound request.

    Attributes:
        method (str): Request method, e.g. ``"GET"``.
        path (str): Request path. A query string appended with ``?`` is split off
            into ``query_string`` by `from_target`.
        query_string (str): Raw query string without the leading ``?``.
        headers (Mapping[str, str]): Request headers (any case).
        body_params (Mapping[str, Any]): Already-decoded body params.
    """

    method: str
    path: str
    query_string: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: {})
    body_params: Mapping[str, Any] = field(default_factory=lambda: {})

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body_params: Mapping[str, Any] | None = None,
    ) -> Request:
        """Build a request from a request-target such as ``/hello?_format=text``."""
        parts = urlsplit(target)
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query_string=parts.query,
            headers=dict(headers or {}),
            body_params=dict(body_params or {}),
        )
