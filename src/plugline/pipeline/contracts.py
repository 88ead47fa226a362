# topmark:header:start
#
#   project      : Plugline
#   file         : contracts.py
#   file_relpath : src/plugline/pipeline/contracts.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type contracts for pipeline steps (engine-facing).

This module defines the minimal protocol that all pipeline steps must implement.
Steps are instantiated objects; the engine invokes them as `step(conn, opts)`
where `conn` is a [`Conn`][plugline.pipeline.context.Conn] and `opts` are the
options returned by the step's `init` when the pipeline was built.

Lifecycle
---------
1) At pipeline-build time, ``step.init(options)`` validates and normalizes the
   options exactly once. Invalid options raise `ValueError` or `TypeError`.
2) Per request, the runner calls ``step(conn, opts)`` which returns the next
   conn. A step may halt (``conn.halt()``) after sending or rendering a response.
3) Steps are stateless across invocations; per-request state lives in
   ``conn.assigns`` only. A step must not assume its position in a pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .context import Conn


class Step(Protocol):
    """Protocol for a single pipeline step ("plug").

    Implementations typically subclass
    [`plugline.pipeline.steps.base.BaseStep`][] or wrap a plain function with
    [`plugline.pipeline.steps.base.FunctionStep`][].
    """

    name: str

    def init(self, options: Any) -> Any:
        """Validate and normalize the step options once, at build time.

        Args:
            options (Any): Step-specific options as declared in the pipeline.

        Returns:
            Any: The initialized options passed to every call.
        """
        ...

    def call(self, conn: Conn, opts: Any) -> Conn:
        """Transform the conn.

        Args:
            conn (Conn): The current connection.
            opts (Any): Initialized options.

        Returns:
            Conn: The next connection.
        """
        ...

    def __call__(self, conn: Conn, opts: Any) -> Conn:
        """Run the step lifecycle (bookkeeping + `call`)."""
        ...
