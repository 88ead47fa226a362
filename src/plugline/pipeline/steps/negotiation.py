# topmark:header:start
#
#   project      : Plugline
#   file         : negotiation.py
#   file_relpath : src/plugline/pipeline/steps/negotiation.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Content negotiation step (``accepts``).

Picks the response format for bare template names passed to `Conn.render`:

1. an explicit ``_format`` param (``/hello?_format=text``);
2. otherwise the first acceptable media type of the ``Accept`` header;
3. otherwise the first accepted format.

An explicit ``_format`` that is not accepted halts with ``406``. An ``Accept``
header listing nothing acceptable falls back to the first accepted format.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger
from plugline.pipeline.context import CONTENT_TYPES
from plugline.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn

logger: PluglineLogger = get_logger(__name__)

FORMAT_PARAM = "_format"

_MEDIA_TO_FORMAT: dict[str, str] = {media: fmt for fmt, media in CONTENT_TYPES.items()}


def parse_accept(header: str) -> list[str]:
    """Return the media types of an ``Accept`` header, highest quality first.

    Args:
        header (str): Raw header value, e.g. ``"text/html,application/json;q=0.9"``.

    Returns:
        list[str]: Media types ordered by decreasing ``q`` (stable for ties).
    """
    ranked: list[tuple[float, int, str]] = []
    for index, part in enumerate(header.split(",")):
        fields = [f.strip() for f in part.split(";")]
        media = fields[0].lower()
        if not media:
            continue
        quality = 1.0
        for param in fields[1:]:
            key, _, value = param.partition("=")
            if key.strip() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality > 0:
            ranked.append((-quality, index, media))
    return [media for _q, _i, media in sorted(ranked)]


class AcceptsStep(BaseStep):
    """Negotiate the response format against a list of accepted formats.

    Options are the accepted formats, e.g. ``["html"]`` or ``["json"]``.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def init(self, options: Any) -> tuple[str, ...]:
        """Validate the accepted formats.

        Raises:
            TypeError: If options are not a list of strings.
            ValueError: If the list is empty or names an unknown format.
        """
        if isinstance(options, str) or not isinstance(options, Iterable):
            raise TypeError(f"{self.name} expects a list of formats, got {options!r}")
        formats = tuple(options)
        if not formats:
            raise ValueError(f"{self.name} needs at least one accepted format")
        for fmt in formats:
            if fmt not in CONTENT_TYPES:
                raise ValueError(f"unknown format {fmt!r}, expected one of {sorted(CONTENT_TYPES)}")
        return formats

    def call(self, conn: Conn, opts: tuple[str, ...]) -> Conn:
        """Store the negotiated format, or answer 406 and halt."""
        explicit = conn.params.get(FORMAT_PARAM)
        if explicit is not None:
            if explicit in opts:
                return conn.put_format(explicit)
            logger.info("AcceptsStep: format %r not acceptable for %s", explicit, conn.path)
            return conn.put_status(406).text("Not Acceptable").halt()

        accept = conn.req_header("accept")
        if accept:
            for media in parse_accept(accept):
                if media in ("*/*", "*"):
                    break
                fmt = _MEDIA_TO_FORMAT.get(media)
                if fmt in opts:
                    return conn.put_format(fmt)
        return conn.put_format(opts[0])
