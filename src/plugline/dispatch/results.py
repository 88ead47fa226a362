# topmark:header:start
#
#   project      : Plugline
#   file         : results.py
#   file_relpath : src/plugline/dispatch/results.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tagged result values returned by collaborators and actions.

Collaborators (`Blog`, `Authenticator`, `Authorizer`) and controller actions
express success and failure with a small closed sum type:

- `Ok(value)` for success, optionally carrying a value;
- `Err(reason, payload)` for an expected failure with a reason code
  (``"not_found"``, ``"unauthorized"``) and optional payload.

An action that returns one of these instead of a finalized conn hands the
value to its controller's fallback table.

Example:
    ```python
    match blog.fetch_post(id):
        case Ok(post):
            ...
        case Err("not_found"):
            ...
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

OK_TAG: Literal["ok"] = "ok"
ERROR_TAG: Literal["error"] = "error"


@dataclass(frozen=True)
class Ok:
    """Successful result, optionally carrying a value."""

    value: Any = None

    __match_args__ = ("value",)

    @property
    def tag(self) -> str:
        """Return ``"ok"``."""
        return OK_TAG

    @property
    def is_ok(self) -> bool:
        """Return True."""
        return True


@dataclass(frozen=True)
class Err:
    """Expected failure with a reason code and an optional payload."""

    reason: str
    payload: Any = None

    __match_args__ = ("reason", "payload")

    @property
    def tag(self) -> str:
        """Return ``"error"``."""
        return ERROR_TAG

    @property
    def is_ok(self) -> bool:
        """Return False."""
        return False


Result: TypeAlias = Ok | Err


def coerce_result(value: object) -> object:
    """Normalize tuple-style results into `Ok` / `Err`.

    ``("ok", v)`` → ``Ok(v)``, ``("error", reason)`` → ``Err(reason)``,
    ``("error", reason, payload)`` → ``Err(reason, payload)``, and the bare
    strings ``"ok"`` / ``"error"`` likewise. Anything else is returned unchanged
    so the fallback table can still match it structurally.

    Args:
        value (object): The raw value returned by an action.

    Returns:
        object: An `Ok` / `Err` where the shape is recognized, else ``value``.
    """
    if isinstance(value, (Ok, Err)):
        return value
    if value == OK_TAG:
        return Ok()
    if value == ERROR_TAG:
        return Err("error")
    if isinstance(value, tuple) and value and isinstance(value[0], str):
        tag, rest = value[0], value[1:]
        if tag == OK_TAG and len(rest) <= 1:
            return Ok(rest[0] if rest else None)
        if tag == ERROR_TAG and 1 <= len(rest) <= 2 and isinstance(rest[0], str):
            return Err(rest[0], rest[1] if len(rest) == 2 else None)
    return value
