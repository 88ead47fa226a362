# topmark:header:start
#
#   project      : Plugline
#   file         : response.py
#   file_relpath : src/plugline/http/response.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Finalized HTTP response value.

A `Response` is what the engine hands back to the transport. Once attached to
a Conn the exchange is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass

from plugline.http.status import reason_phrase


@dataclass(frozen=True)
class Response:
    """Immutable response: status, ordered headers and a text body.

    Attributes:
        status (int): HTTP status code.
        headers (tuple[tuple[str, str], ...]): Response headers in insertion order;
            names are lower-cased.
        body (str): Response body.
    """

    status: int
    headers: tuple[tuple[str, str], ...] = ()
    body: str = ""

    def header(self, name: str) -> str | None:
        """Return the last value of header ``name`` (case-insensitive), or None."""
        wanted = name.lower()
        found: str | None = None
        for key, value in self.headers:
            if key == wanted:
                found = value
        return found

    @property
    def content_type(self) -> str | None:
        """Return the ``content-type`` header, if any."""
        return self.header("content-type")

    @property
    def location(self) -> str | None:
        """Return the ``location`` header of a redirect, if any."""
        return self.header("location")

    @property
    def reason(self) -> str:
        """Return the reason phrase for the status code."""
        return reason_phrase(self.status)

    @property
    def is_redirect(self) -> bool:
        """Return True for 3xx responses carrying a location."""
        return 300 <= self.status < 400 and self.location is not None
