# topmark:header:start
#
#   project      : Plugline
#   file         : status.py
#   file_relpath : src/plugline/http/status.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""HTTP status codes and friendly status names.

Steps and actions may set a status either numerically (``404``) or by a
friendly, snake_case name derived from `http.HTTPStatus` (``"not_found"``,
``"unprocessable_entity"``, ``"im_a_teapot"``). Both spellings resolve to the
same integer through `resolve_status`.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Final

from plugline.core.errors import InvalidStatusError

STATUS_NAMES: Final[dict[str, int]] = {s.name.lower(): s.value for s in HTTPStatus}

# Historical aliases that are still commonly used in controllers
STATUS_NAMES.setdefault("unprocessable_entity", 422)
STATUS_NAMES.setdefault("request_entity_too_large", 413)
STATUS_NAMES.setdefault("im_a_teapot", 418)


def resolve_status(code: int | str) -> int:
    """Return the integer status code for ``code``.

    Args:
        code (int | str): An integer in ``100..599`` or a friendly status name.

    Returns:
        int: The integer status code.

    Raises:
        InvalidStatusError: If the name is unknown or the number out of range.
    """
    if isinstance(code, bool):
        raise InvalidStatusError(f"Invalid status: {code!r}")
    if isinstance(code, int):
        if 100 <= code <= 599:
            return code
        raise InvalidStatusError(f"Status code out of range: {code}")
    key = code.strip().lower().replace(" ", "_").replace("-", "_")
    if key.isdigit():
        return resolve_status(int(key))
    try:
        return STATUS_NAMES[key]
    except KeyError:
        raise InvalidStatusError(f"Unknown status name: {code!r}") from None


def reason_phrase(code: int) -> str:
    """Return the standard reason phrase for ``code`` (empty if non-standard)."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""
