# topmark:header:start
#
#   project      : Plugline
#   file         : errors.py
#   file_relpath : src/plugline/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the Plugline engine.

Build-time errors (configuration, pipelines, routes) surface when an
application is assembled and should stop it from starting. Request-time errors
(`UnmatchedRouteError`, `UnhandledResultError`, contract violations) are raised
inside a single exchange; only the endpoint catches them, turning them into a
404 or 500 response for that exchange.

Exceptions raised by steps or actions themselves (for example a datastore
failure) are never wrapped: they propagate unchanged to the endpoint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from plugline.routing.route import Route


class PluglineError(Exception):
    """Base class for all Plugline errors."""


# --- Build-time errors ---


class ConfigError(PluglineError):
    """Configuration file is missing, malformed or inconsistent."""


class StepOptionsError(PluglineError):
    """A step rejected its options while a pipeline was being built."""

    def __init__(self, pipeline: str, step: str, reason: str) -> None:
        super().__init__(f"Invalid options for step {step!r} in pipeline {pipeline!r}: {reason}")
        self.pipeline = pipeline
        self.step = step
        self.reason = reason


class PipelineConfigError(PluglineError):
    """A pipeline definition is inconsistent (e.g. registered twice)."""


class UnknownPipelineError(PipelineConfigError):
    """A scope or route refers to a pipeline name that was never defined."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown pipeline: {name!r}")
        self.name = name


class RouteConfigError(PluglineError):
    """A route declaration is invalid (bad pattern, unknown resource action, ...)."""


class DuplicateRouteError(RouteConfigError):
    """Routes share a method and pattern shape, so later ones are unreachable."""

    def __init__(self, duplicates: Sequence[tuple[Route, Route]]) -> None:
        lines = [
            f"{later.method.value} {later.pattern.source} ({later.describe_target()}) "
            f"is shadowed by {earlier.describe_target()}"
            for earlier, later in duplicates
        ]
        super().__init__("Unreachable duplicate routes:\n  " + "\n  ".join(lines))
        self.duplicates = tuple(duplicates)


class InvalidStatusError(PluglineError, ValueError):
    """An HTTP status code or friendly status name is not recognized."""


# --- Request-time errors ---


class UnmatchedRouteError(PluglineError):
    """No route matches the request method and path."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No route found for {method} {path}")
        self.method = method
        self.path = path


class StepContractError(PluglineError):
    """A step, action or fallback handler broke the Conn contract."""


class HaltContractError(StepContractError):
    """A step halted the pipeline without attaching a response."""

    def __init__(self, pipeline: str, step: str) -> None:
        super().__init__(
            f"Step {step!r} in pipeline {pipeline!r} halted without sending or rendering a response"
        )
        self.pipeline = pipeline
        self.step = step


class UnhandledResultError(PluglineError):
    """An action returned a value that no fallback entry matches."""

    def __init__(self, result: object, *, action: str | None = None) -> None:
        where = f" from action {action!r}" if action else ""
        super().__init__(f"No fallback clause matches result {result!r}{where}")
        self.result = result
        self.action = action


class ActionArityError(PluglineError, TypeError):
    """An action does not accept (conn, params) or (conn, params, actor)."""


class TemplateNotFoundError(PluglineError):
    """The render collaborator has no template for the requested selector."""

    def __init__(self, view: str, template: str) -> None:
        super().__init__(f"Could not render {template!r} for {view}: template not found")
        self.view = view
        self.template = template
