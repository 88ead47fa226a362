# topmark:header:start
#
#   project      : Plugline
#   file         : locale.py
#   file_relpath : src/plugline/pipeline/steps/locale.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Locale selection step.

Reads the ``locale`` request param and stores the selected locale in
``assigns["locale"]``. A requested locale outside the allow-list, or no
request at all, selects the configured default.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.constants import DEFAULT_LOCALE, DEFAULT_LOCALES
from plugline.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

LOCALE_PARAM = "locale"
LOCALE_ASSIGN = "locale"


@dataclass(frozen=True)
class LocaleOptions:
    """Initialized options of `LocaleStep`.

    Attributes:
        default (str): Locale used when the request does not select an allowed one.
        locales (tuple[str, ...]): Allowed locales.
    """

    default: str
    locales: tuple[str, ...]


class LocaleStep(BaseStep):
    """Select the request locale from an allow-list.

    Options are either the default locale (``"en"``) or a mapping
    ``{"default": "en", "locales": ["en", "fr", "de"]}``. ``None`` selects the
    package defaults.

    Mutations:
        - ``assigns["locale"]``: the requested locale when allowed, else the default.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> LocaleOptions:
        """Normalize the options and check the default is allowed.

        Args:
            options (Any): ``None``, a locale string or a mapping.

        Returns:
            LocaleOptions: The normalized options.

        Raises:
            TypeError: If the options have an unsupported shape.
            ValueError: If the default is not in the allow-list.
        """
        if options is None:
            default, locales = DEFAULT_LOCALE, DEFAULT_LOCALES
        elif isinstance(options, str):
            default, locales = options, DEFAULT_LOCALES
        elif isinstance(options, Mapping):
            default = options.get("default", DEFAULT_LOCALE)
            locales = tuple(options.get("locales", DEFAULT_LOCALES))
        else:
            raise TypeError(f"LocaleStep expects a locale or a mapping, got {type(options).__name__}")

        if not isinstance(default, str) or not all(isinstance(loc, str) for loc in locales):
            raise TypeError("LocaleStep locales must be strings")
        if not locales:
            raise ValueError("LocaleStep needs at least one allowed locale")
        if default not in locales:
            raise ValueError(f"default locale {default!r} is not one of {list(locales)}")
        return LocaleOptions(default=default, locales=tuple(locales))

    def call(self, conn: Conn, opts: LocaleOptions) -> Conn:
        """Assign the selected locale.

        Args:
            conn (Conn): The current connection.
            opts (LocaleOptions): Initialized options.

        Returns:
            Conn: The connection with ``assigns["locale"]`` set.
        """
        requested = conn.params.get(LOCALE_PARAM)
        if isinstance(requested, str) and requested in opts.locales:
            selected = requested
        else:
            if requested is not None:
                logger.debug("LocaleStep: unsupported locale %r, using %r", requested, opts.default)
            selected = opts.default
        return conn.assign(LOCALE_ASSIGN, selected)
