# topmark:header:start
#
#   project      : Plugline
#   file         : pipelines.py
#   file_relpath : src/plugline/pipeline/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Named pipelines: immutable, ordered sequences of initialized steps.

A pipeline is built once, when the application is assembled:

    browser = build("browser", [
        plug(AcceptsStep(), ["html"]),
        plug(SecureBrowserHeadersStep()),
        plug(LocaleStep(), "en"),
    ])

`build` runs every step's ``init`` over its declared options, so option errors
surface at startup instead of on the first request. The result is a frozen
`Pipeline` whose entries carry the *initialized* options.

Composition
-----------
``a + b`` concatenates the entries of two pipelines in order. Routes that pipe
through several pipelines (``pipe_through=["browser", "review_checks"]``) get
the composition from [`PipelineRegistry.compose`][].
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from plugline.config.logging import get_logger
from plugline.core.errors import PipelineConfigError, StepOptionsError, UnknownPipelineError
from plugline.pipeline.steps.base import Plug, plug

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger
    from plugline.pipeline.contracts import Step
    from plugline.pipeline.steps.base import StepFunction

logger: PluglineLogger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineEntry:
    """One step of a built pipeline with its initialized options."""

    step: Step
    opts: Any
    actions: frozenset[str] | None = None

    def applies_to(self, action: str | None) -> bool:
        """Return True if this entry runs for ``action``."""
        return self.actions is None or action is None or action in self.actions


@dataclass(frozen=True)
class Pipeline:
    """Immutable, named sequence of initialized steps.

    Attributes:
        name (str): Pipeline name (composed pipelines are named ``"a+b"``).
        entries (tuple[PipelineEntry, ...]): Steps in execution order.
    """

    name: str
    entries: tuple[PipelineEntry, ...] = ()

    def __add__(self, other: Pipeline) -> Pipeline:
        """Concatenate two pipelines, preserving the order of both.

        A pipeline with neither name nor steps (`EMPTY_PIPELINE`) is the identity.
        """
        if not isinstance(other, Pipeline):
            return NotImplemented
        if not self.name and not self.entries:
            return other
        if not other.name and not other.entries:
            return self
        name = "+".join(n for n in (self.name, other.name) if n)
        return Pipeline(name=name, entries=self.entries + other.entries)

    def __iter__(self) -> Iterator[PipelineEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def step_names(self) -> tuple[str, ...]:
        """Return the names of the steps in order."""
        return tuple(e.step.name for e in self.entries)


EMPTY_PIPELINE: Final[Pipeline] = Pipeline(name="")


def _as_plug(item: Any) -> Plug:
    if isinstance(item, Plug):
        return item
    if isinstance(item, tuple) and len(item) == 2:
        target, options = item
        return plug(target, options)
    return plug(item)


def build(name: str, plugs: Iterable[Plug | Step | StepFunction | tuple[Any, Any]]) -> Pipeline:
    """Build an immutable pipeline, initializing each step's options once.

    Args:
        name (str): Pipeline name.
        plugs (Iterable[Plug | Step | StepFunction | tuple[Any, Any]]): Plug
            declarations, bare steps/functions (no options), or
            ``(step, options)`` pairs.

    Returns:
        Pipeline: The built pipeline.

    Raises:
        StepOptionsError: If a step's ``init`` rejects its options.
        PipelineConfigError: If ``name`` is blank.
    """
    if not name.strip():
        raise PipelineConfigError("Pipeline name must not be blank")
    entries: list[PipelineEntry] = []
    for item in plugs:
        declared = _as_plug(item)
        try:
            opts = declared.step.init(declared.options)
        except (TypeError, ValueError) as exc:
            raise StepOptionsError(name, declared.step.name, str(exc)) from exc
        entries.append(PipelineEntry(step=declared.step, opts=opts, actions=declared.actions))
    logger.debug("Built pipeline %r: %s", name, [e.step.name for e in entries])
    return Pipeline(name=name, entries=tuple(entries))


class PipelineRegistry(Mapping[str, Pipeline]):
    """Name → pipeline mapping used by the router."""

    def __init__(self, pipelines: Iterable[Pipeline] = ()) -> None:
        self._pipelines: dict[str, Pipeline] = {}
        for p in pipelines:
            self.register(p)

    def register(self, pipeline: Pipeline) -> Pipeline:
        """Register ``pipeline`` under its name.

        Raises:
            PipelineConfigError: If the name is blank or already taken.
        """
        if not pipeline.name.strip():
            raise PipelineConfigError("Pipeline name must not be blank")
        if pipeline.name in self._pipelines:
            raise PipelineConfigError(f"Pipeline {pipeline.name!r} is already defined")
        self._pipelines[pipeline.name] = pipeline
        return pipeline

    def __getitem__(self, name: str) -> Pipeline:
        try:
            return self._pipelines[name]
        except KeyError:
            raise UnknownPipelineError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._pipelines

    def __iter__(self) -> Iterator[str]:
        return iter(self._pipelines)

    def __len__(self) -> int:
        return len(self._pipelines)

    def compose(self, names: Iterable[str]) -> Pipeline:
        """Concatenate the named pipelines in order.

        Raises:
            UnknownPipelineError: If a name is not registered.
        """
        composed = EMPTY_PIPELINE
        for name in names:
            composed = composed + self[name]
        return composed
