# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/http/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""HTTP primitives: requests, responses, methods, status codes and params.

These are plain values with no transport attached; a server adapter converts
its own request objects into `Request` and writes `Response` back out.
"""

from __future__ import annotations

from plugline.http.methods import HttpMethod
from plugline.http.params import decode_params
from plugline.http.request import Request
from plugline.http.response import Response
from plugline.http.status import reason_phrase, resolve_status

__all__: list[str] = [
    "HttpMethod",
    "Request",
    "Response",
    "decode_params",
    "reason_phrase",
    "resolve_status",
]
