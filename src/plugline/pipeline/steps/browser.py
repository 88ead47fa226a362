# topmark:header:start
#
#   project      : Plugline
#   file         : browser.py
#   file_relpath : src/plugline/pipeline/steps/browser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Small general-purpose steps used by browser pipelines and controllers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from plugline.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from plugline.pipeline.context import Conn

SECURE_BROWSER_HEADERS: Final[tuple[tuple[str, str], ...]] = (
    ("x-frame-options", "SAMEORIGIN"),
    ("x-xss-protection", "1; mode=block"),
    ("x-content-type-options", "nosniff"),
    ("x-download-options", "noopen"),
    ("x-permitted-cross-domain-policies", "none"),
    ("cross-origin-window-policy", "deny"),
)


class SecureBrowserHeadersStep(BaseStep):
    """Set the standard browser security response headers.

    Options (optional) are extra headers merged over the defaults; a header
    mapped to ``None`` is removed from the set.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> tuple[tuple[str, str], ...]:
        """Merge the extra headers over the defaults.

        Raises:
            TypeError: If options are neither None nor a mapping of strings.
        """
        headers = dict(SECURE_BROWSER_HEADERS)
        if options is None:
            return tuple(headers.items())
        if not isinstance(options, Mapping):
            raise TypeError(f"{self.name} expects a mapping of headers")
        for name, value in options.items():
            if not isinstance(name, str) or not (value is None or isinstance(value, str)):
                raise TypeError(f"{self.name}: invalid header {name!r}: {value!r}")
            if value is None:
                headers.pop(name.lower(), None)
            else:
                headers[name.lower()] = value
        return tuple(headers.items())

    def call(self, conn: Conn, opts: tuple[tuple[str, str], ...]) -> Conn:
        for name, value in opts:
            conn = conn.put_resp_header(name, value)
        return conn


class AssignStep(BaseStep):
    """Assign a fixed value; options are ``(key, value)``."""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> tuple[str, Any]:
        if not isinstance(options, tuple) or len(options) != 2 or not isinstance(options[0], str):
            raise TypeError(f"{self.name} expects a (key, value) pair, got {options!r}")
        return options

    def call(self, conn: Conn, opts: tuple[str, Any]) -> Conn:
        key, value = opts
        return conn.assign(key, value)
