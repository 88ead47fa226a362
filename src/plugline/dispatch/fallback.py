# topmark:header:start
#
#   project      : Plugline
#   file         : fallback.py
#   file_relpath : src/plugline/dispatch/fallback.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Ordered fallback tables turning action results into responses.

When an action returns something other than a conn (``Err("not_found")``,
``("error", "unauthorized")``, ...) its controller hands the value to a
`FallbackTable`. Entries are tried in declaration order and the first one
whose pattern matches handles the result; later entries are never consulted.
A result no entry matches raises `UnhandledResultError`; there is no
implicit default response.

    fallback = FallbackTable()

    @fallback.on("error", "not_found")
    def not_found(conn, result):
        return conn.put_status(404).put_view("ErrorView").render("404")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from plugline.config.logging import get_logger
from plugline.constants import ERROR_VIEW
from plugline.core.errors import StepContractError, UnhandledResultError
from plugline.dispatch.results import ERROR_TAG, OK_TAG, Err, Ok, coerce_result
from plugline.pipeline.context import Conn

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger

logger: PluglineLogger = get_logger(__name__)

FallbackHandler = Callable[[Conn, Any], Conn]


class _AnyReason:
    def __repr__(self) -> str:
        return "ANY"


ANY: Final[Any] = _AnyReason()


@dataclass(frozen=True)
class ResultPattern:
    """Structural pattern over action results.

    Attributes:
        kind (str | type): ``"ok"``, ``"error"``, or a type matched with ``isinstance``.
        reason (Any): Required `Err` reason, or `ANY`.
        where (Callable[[Any], bool] | None): Extra guard on the (coerced) result.
    """

    kind: str | type
    reason: Any = ANY
    where: Callable[[Any], bool] | None = None

    def __post_init__(self) -> None:
        """Reject patterns that could never match.

        Raises:
            ValueError: On a kind other than ``"ok"``, ``"error"`` or a type, or a
                reason given for a non-``"error"`` kind.
        """
        if not isinstance(self.kind, type) and self.kind not in (OK_TAG, ERROR_TAG):
            raise ValueError(f"Fallback kind must be {OK_TAG!r}, {ERROR_TAG!r} or a type, got {self.kind!r}")
        if self.reason is not ANY and self.kind != ERROR_TAG:
            raise ValueError(f"A reason only applies to {ERROR_TAG!r} patterns, got kind {self.kind!r}")

    def matches(self, result: Any) -> bool:
        """Return True if ``result`` (already coerced) matches this pattern."""
        if isinstance(self.kind, type):
            ok = isinstance(result, self.kind)
        elif self.kind == OK_TAG:
            ok = isinstance(result, Ok)
        else:
            ok = isinstance(result, Err) and (self.reason is ANY or result.reason == self.reason)
        return ok and (self.where is None or bool(self.where(result)))

    def __str__(self) -> str:
        kind = self.kind.__name__ if isinstance(self.kind, type) else self.kind
        parts = [kind] if self.reason is ANY else [kind, repr(self.reason)]
        if self.where is not None:
            parts.append("where ...")
        return " ".join(parts)


@dataclass(frozen=True)
class FallbackEntry:
    """One ``(pattern, handler)`` clause."""

    pattern: ResultPattern
    handler: FallbackHandler


class FallbackTable:
    """Ordered list of fallback clauses.

    Args:
        entries (Iterable[FallbackEntry]): Initial clauses, in priority order.
    """

    def __init__(self, entries: Iterable[FallbackEntry] = ()) -> None:
        self._entries: list[FallbackEntry] = list(entries)

    @property
    def entries(self) -> tuple[FallbackEntry, ...]:
        """Return the clauses in priority order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, pattern: ResultPattern, handler: FallbackHandler) -> FallbackTable:
        """Append a clause; returns ``self`` for chaining."""
        self._entries.append(FallbackEntry(pattern=pattern, handler=handler))
        return self

    def on(
        self,
        kind: str | type,
        reason: Any = ANY,
        where: Callable[[Any], bool] | None = None,
    ) -> Callable[[FallbackHandler], FallbackHandler]:
        """Decorator appending ``handler`` for results matching the pattern.

        Raises:
            ValueError: If the pattern is invalid (see `ResultPattern`).
        """
        pattern = ResultPattern(kind=kind, reason=reason, where=where)

        def decorator(handler: FallbackHandler) -> FallbackHandler:
            self.add(pattern, handler)
            return handler

        return decorator

    def resolve(self, conn: Conn, result: Any) -> Conn:
        """Convert ``result`` with the first matching clause.

        Args:
            conn (Conn): The connection the action received.
            result (Any): The action's non-conn return value.

        Returns:
            Conn: The finalized connection produced by the handler.

        Raises:
            UnhandledResultError: If no clause matches.
            StepContractError: If the handler does not return a finalized conn.
        """
        value = coerce_result(result)
        for entry in self._entries:
            if not entry.pattern.matches(value):
                continue
            logger.debug("Fallback clause %s handles %r", entry.pattern, value)
            out = entry.handler(conn, value)
            if not isinstance(out, Conn) or not out.finalized:
                raise StepContractError(
                    f"Fallback handler {getattr(entry.handler, '__name__', entry.handler)!r} "
                    f"did not return a finalized conn for {value!r}"
                )
            return out
        raise UnhandledResultError(result, action=conn.private.get("action"))


def resolve(table: FallbackTable, conn: Conn, result: Any) -> Conn:
    """Module-level form of `FallbackTable.resolve`."""
    return table.resolve(conn, result)


def render_error(status: int, template: str) -> FallbackHandler:
    """Return a handler rendering ``template`` of the error view with ``status``."""

    def handler(conn: Conn, _result: Any) -> Conn:
        return conn.put_status(status).put_view(ERROR_VIEW).put_layout(False).render(template)

    handler.__name__ = f"render_{template}"
    return handler


def error_fallback() -> FallbackTable:
    """Return the stock table: ``Err("not_found")`` → 404, ``Err("unauthorized")`` → 403."""
    table = FallbackTable()
    table.add(ResultPattern(ERROR_TAG, "not_found"), render_error(404, "404"))
    table.add(ResultPattern(ERROR_TAG, "unauthorized"), render_error(403, "403"))
    return table
