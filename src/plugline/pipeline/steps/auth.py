# topmark:header:start
#
#   project      : Plugline
#   file         : auth.py
#   file_relpath : src/plugline/pipeline/steps/auth.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Authentication and authorization steps.

Both steps delegate the actual decision to an external collaborator
(`Authenticator`, `Authorizer`) and only translate the outcome into conn
updates: assign on success, or flash + redirect + halt on failure.

Typical controller use:

    plugs = [
        plug(AuthenticateStep(), {"authenticator": auth}),
        plug(FetchResourceStep(), {"fetch": store.fetch_message, "assign_as": "message"}),
        plug(AuthorizeStep(), {"authorizer": acl, "resource_key": "message"}),
    ]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_LOGIN_PATH, ERROR_VIEW
from plugline.dispatch.results import Ok
from plugline.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from plugline.collaborators import Authenticator, Authorizer
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

LOGIN_REQUIRED_MESSAGE = "You must be logged in"
ACCESS_DENIED_MESSAGE = "You can't access that page"


def _require_mapping(step: str, options: Any) -> Mapping[str, Any]:
    if not isinstance(options, Mapping):
        raise TypeError(f"{step} expects a mapping of options, got {type(options).__name__}")
    return options


def _check_redirect(step: str, value: Any, *, allow_none: bool) -> str | None:
    if value is None and allow_none:
        return None
    if not isinstance(value, str) or not value.startswith("/") or value.startswith("//"):
        raise ValueError(f"{step} 'redirect_to' must be a local path, got {value!r}")
    return value


@dataclass(frozen=True)
class AuthenticateOptions:
    """Initialized options of `AuthenticateStep`."""

    authenticator: Authenticator
    redirect_to: str
    message: str
    assign_as: str


class AuthenticateStep(BaseStep):
    """Require an authenticated user.

    Options:
        authenticator (Authenticator): Collaborator finding the user (required).
        redirect_to (str): Local path to redirect to on failure (default ``"/"``).
        message (str): ``info`` flash message on failure.
        assign_as (str): Assign key receiving the user (default ``"user"``).

    Mutations:
        - success: ``assigns[assign_as] = user``.
        - failure: ``flash["info"]``, 302 redirect, halted.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> AuthenticateOptions:
        """Validate the options.

        Raises:
            TypeError: If options are not a mapping or the authenticator is unusable.
            ValueError: If ``redirect_to`` is not a local path.
        """
        opts = _require_mapping(self.name, options)
        authenticator = opts.get("authenticator")
        if not callable(getattr(authenticator, "find_user", None)):
            raise TypeError(f"{self.name} needs an 'authenticator' with a find_user(conn) method")
        redirect_to = _check_redirect(
            self.name, opts.get("redirect_to", DEFAULT_LOGIN_PATH), allow_none=False
        )
        assert redirect_to is not None
        return AuthenticateOptions(
            authenticator=authenticator,  # type: ignore[arg-type]
            redirect_to=redirect_to,
            message=str(opts.get("message", LOGIN_REQUIRED_MESSAGE)),
            assign_as=str(opts.get("assign_as", "user")),
        )

    def call(self, conn: Conn, opts: AuthenticateOptions) -> Conn:
        """Assign the authenticated user or redirect and halt."""
        result = opts.authenticator.find_user(conn)
        if isinstance(result, Ok):
            return conn.assign(opts.assign_as, result.value)

        logger.info("AuthenticateStep: unauthenticated request to %s", conn.path)
        return conn.put_flash("info", opts.message).redirect(to=opts.redirect_to).halt()


@dataclass(frozen=True)
class AuthorizeOptions:
    """Initialized options of `AuthorizeStep`."""

    authorizer: Authorizer
    resource_key: str
    user_key: str
    redirect_to: str | None
    message: str


class AuthorizeStep(BaseStep):
    """Require the current user to be allowed to access a fetched resource.

    Options:
        authorizer (Authorizer): Collaborator deciding access (required).
        resource_key (str): Assign key of the resource (required).
        user_key (str): Assign key of the user (default ``"user"``).
        redirect_to (str | None): Local path to redirect to on denial (default
            ``"/"``); ``None`` renders a 403 through the error view instead.
        message (str): ``info`` flash message on denial.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> AuthorizeOptions:
        """Validate the options.

        Raises:
            TypeError: If options are not a mapping or the authorizer is unusable.
            ValueError: If a required key is missing or ``redirect_to`` is invalid.
        """
        opts = _require_mapping(self.name, options)
        authorizer = opts.get("authorizer")
        if not callable(getattr(authorizer, "can_access", None)):
            raise TypeError(f"{self.name} needs an 'authorizer' with a can_access(user, resource) method")
        resource_key = opts.get("resource_key")
        if not isinstance(resource_key, str) or not resource_key:
            raise ValueError(f"{self.name} needs a 'resource_key'")
        return AuthorizeOptions(
            authorizer=authorizer,  # type: ignore[arg-type]
            resource_key=resource_key,
            user_key=str(opts.get("user_key", "user")),
            redirect_to=_check_redirect(
                self.name, opts.get("redirect_to", DEFAULT_LOGIN_PATH), allow_none=True
            ),
            message=str(opts.get("message", ACCESS_DENIED_MESSAGE)),
        )

    def call(self, conn: Conn, opts: AuthorizeOptions) -> Conn:
        """Pass the conn through unchanged, or deny access and halt."""
        user = conn.assigns.get(opts.user_key)
        resource = conn.assigns.get(opts.resource_key)
        if opts.authorizer.can_access(user, resource):
            return conn

        logger.info("AuthorizeStep: access to %s denied", conn.path)
        if opts.redirect_to is None:
            denied = conn.put_status(403).put_view(ERROR_VIEW).put_layout(False).render("403")
        else:
            denied = conn.put_flash("info", opts.message).redirect(to=opts.redirect_to)
        return denied.halt()
