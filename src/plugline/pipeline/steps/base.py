# topmark:header:start
#
#   project      : Plugline
#   file         : base.py
#   file_relpath : src/plugline/pipeline/steps/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Base classes for pipeline steps.

The runner invokes steps as *callables*. `BaseStep` implements the common
lifecycle:

    conn = step(conn, opts)  # internally: call() → halt bookkeeping

Two flavors exist, mirroring Plug's "module plugs" and "function plugs":

- Subclass `BaseStep` and override ``init()`` and ``call()`` for reusable,
  configurable steps.
- Wrap any ``fn(conn, opts) -> Conn`` with `FunctionStep` (or simply pass the
  function to `plug()`), for one-off transformations.

Design goals
------------
- Single place for per-step bookkeeping (tracing, halt logging).
- Steps never check ``conn.halted`` themselves; the runner enforces the
  short-circuit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from plugline.config.logging import get_logger

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.context import Conn
    from plugline.pipeline.contracts import Step

logger: PluglineLogger = get_logger(__name__)

StepFunction = Callable[["Conn", Any], "Conn"]


@dataclass
class BaseStep:
    """Reusable foundation for pipeline steps.

    Subclass this to implement a concrete step by overriding ``call()`` and,
    when the step takes options, ``init()``. Do not override ``__call__``
    unless you need custom lifecycle behavior.

    Attributes:
        name (str): Stable step identifier for logs/tracing.
    """

    name: str

    def __call__(self, conn: Conn, opts: Any) -> Conn:
        """Invoke the step and log a halt it requested.

        Args:
            conn (Conn): The current connection.
            opts (Any): Options returned by ``init()`` at build time.

        Returns:
            Conn: The connection returned by ``call()``.
        """
        logger.trace("BaseStep: step %s - running", self.name)
        out = self.call(conn, opts)
        if getattr(out, "halted", False) and not conn.halted:
            logger.info("BaseStep: pipeline halted by %s on %s", self.name, conn.path)
        return out

    def init(self, options: Any) -> Any:
        """Validate and normalize options (default: returned unchanged).

        Args:
            options (Any): Options declared with the plug.

        Returns:
            Any: The options passed to every ``call()``.
        """
        return options

    def call(self, conn: Conn, opts: Any) -> Conn:
        """Perform the step's work and return the next conn.

        Args:
            conn (Conn): The current connection.
            opts (Any): Initialized options.

        Returns:
            Conn: The next connection.
        """
        raise NotImplementedError


@dataclass
class FunctionStep(BaseStep):
    """Adapter turning a plain ``fn(conn, opts)`` into a step (a "function plug")."""

    fn: StepFunction = field(default=lambda conn, _opts: conn)

    @classmethod
    def wrap(cls, fn: StepFunction, name: str | None = None) -> FunctionStep:
        """Wrap ``fn``, naming the step after the function unless ``name`` is given."""
        return cls(name=name or getattr(fn, "__name__", repr(fn)), fn=fn)

    def call(self, conn: Conn, opts: Any) -> Conn:
        """Delegate to the wrapped function."""
        return self.fn(conn, opts)


@dataclass(frozen=True)
class Plug:
    """A step declaration inside a pipeline or controller.

    Attributes:
        step (Step): The step instance.
        options (Any): Raw options, initialized once when the pipeline is built.
        actions (frozenset[str] | None): When set, the step only runs for these
            controller actions (``plug :x when action in [:index, :show]``).
    """

    step: Step
    options: Any = None
    actions: frozenset[str] | None = None


def as_step(target: Step | StepFunction) -> Step:
    """Return ``target`` as a step, wrapping plain functions."""
    if isinstance(target, BaseStep):
        return target
    if hasattr(target, "init") and hasattr(target, "call"):
        return target  # type: ignore[return-value]
    if callable(target):
        return FunctionStep.wrap(target)
    raise TypeError(f"Not a step or function plug: {target!r}")


def plug(
    target: Step | StepFunction,
    options: Any = None,
    *,
    actions: Iterable[str] | None = None,
) -> Plug:
    """Declare a plug for a pipeline or a controller.

    Args:
        target (Step | StepFunction): A step instance or a ``fn(conn, opts)`` function.
        options (Any): Step options, validated by the step's ``init`` at build time.
        actions (Iterable[str] | None): Restrict a controller plug to these actions.

    Returns:
        Plug: The plug declaration.
    """
    return Plug(
        step=as_step(target),
        options=options,
        actions=frozenset(actions) if actions is not None else None,
    )
