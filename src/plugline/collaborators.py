# topmark:header:start
#
#   project      : Plugline
#   file         : collaborators.py
#   file_relpath : src/plugline/collaborators.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Contracts for the external collaborators used by reference steps and actions.

Plugline does not manage users, permissions or storage. Applications provide
objects satisfying these protocols; their own concurrency and consistency
guarantees are theirs to provide. The bundled demo application ships simple
in-memory implementations (`plugline.demo.store`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from plugline.dispatch.results import Err, Ok
    from plugline.pipeline.context import Conn


class Authenticator(Protocol):
    """Finds the user making the request."""

    def find_user(self, conn: Conn) -> Ok | Err:
        """Return ``Ok(user)`` for an authenticated request, else an `Err`."""
        ...


class Authorizer(Protocol):
    """Decides whether an actor may access a resource."""

    def can_access(self, user: Any, resource: Any) -> bool:
        """Return True if ``user`` may access ``resource``."""
        ...

    def authorize(self, actor: Any, action: str, resource: Any) -> Ok | Err:
        """Return ``Ok()`` or ``Err("unauthorized")`` for ``action`` on ``resource``."""
        ...


class Blog(Protocol):
    """Resource store for posts."""

    def fetch_post(self, post_id: str) -> Ok | Err:
        """Return ``Ok(post)`` or ``Err("not_found")``."""
        ...

    def get_post(self, post_id: str) -> Ok | Err:
        """Return ``Ok(post)`` or ``Err("not_found")``."""
        ...
