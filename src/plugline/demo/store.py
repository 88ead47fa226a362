# topmark:header:start
#
#   project      : Plugline
#   file         : store.py
#   file_relpath : src/plugline/demo/store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""In-memory collaborators backing the demo application.

Users identify themselves with an ``x-user-id`` request header. Data is
seeded at import time and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.dispatch.results import Err, Ok

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

USER_HEADER = "x-user-id"


@dataclass(frozen=True)
class User:
    """Demo user."""

    id: str
    name: str


@dataclass(frozen=True)
class Post:
    """Demo blog post; private posts are only visible to their owner."""

    id: str
    title: str
    body: str
    owner_id: str
    public: bool = True


@dataclass(frozen=True)
class Message:
    """Demo private message, visible to its owner only."""

    id: str
    owner_id: str
    text: str


class InMemoryAuthenticator:
    """Authenticates requests by the ``x-user-id`` header."""

    def __init__(self, users: dict[str, User]) -> None:
        self._users = dict(users)

    def find_user(self, conn: Conn) -> Ok | Err:
        """Return ``Ok(user)`` for a known user id, else ``Err("unauthenticated")``."""
        user_id = conn.req_header(USER_HEADER)
        user = self._users.get(user_id) if user_id else None
        if user is None:
            return Err("unauthenticated")
        return Ok(user)


class OwnerAuthorizer:
    """Grants access to public resources and to resources the user owns."""

    def can_access(self, user: Any, resource: Any) -> bool:
        """Return True if ``resource`` is public or owned by ``user``."""
        if resource is None:
            return False
        if getattr(resource, "public", False):
            return True
        return user is not None and getattr(resource, "owner_id", None) == user.id

    def authorize(self, actor: Any, action: str, resource: Any) -> Ok | Err:
        """Return ``Ok()`` or ``Err("unauthorized")``."""
        if self.can_access(actor, resource):
            return Ok()
        logger.debug("OwnerAuthorizer: %r may not %s %r", actor, action, resource)
        return Err("unauthorized")


class InMemoryBlog:
    """Post store keyed by id."""

    def __init__(self, posts: dict[str, Post]) -> None:
        self._posts = dict(posts)

    def all_posts(self) -> list[Post]:
        """Return the posts ordered by id."""
        return [self._posts[k] for k in sorted(self._posts)]

    def fetch_post(self, post_id: str) -> Ok | Err:
        """Return ``Ok(post)`` or ``Err("not_found")``."""
        post = self._posts.get(str(post_id))
        return Ok(post) if post is not None else Err("not_found")

    get_post = fetch_post


class InMemoryMessages:
    """Message store keyed by id."""

    def __init__(self, messages: dict[str, Message]) -> None:
        self._messages = dict(messages)

    def find_message(self, message_id: str) -> Ok | Err:
        """Return ``Ok(message)`` or ``Err("not_found")``."""
        message = self._messages.get(str(message_id))
        return Ok(message) if message is not None else Err("not_found")


USERS: dict[str, User] = {
    "1": User(id="1", name="Dweezil"),
    "2": User(id="2", name="Moon"),
}

AUTHENTICATOR = InMemoryAuthenticator(USERS)
AUTHORIZER = OwnerAuthorizer()
BLOG = InMemoryBlog(
    {
        "1": Post(id="1", title="Hello Plugline", body="Pipelines all the way down.", owner_id="1"),
        "2": Post(id="2", title="Drafts", body="Not ready yet.", owner_id="2", public=False),
    }
)
MESSAGES = InMemoryMessages(
    {
        "1": Message(id="1", owner_id="1", text="Welcome aboard"),
        "2": Message(id="2", owner_id="2", text="For Moon only"),
    }
)
