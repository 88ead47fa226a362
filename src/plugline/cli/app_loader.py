# topmark:header:start
#
#   project      : Plugline
#   file         : app_loader.py
#   file_relpath : src/plugline/cli/app_loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Import and call the application factory named by ``app.factory``.

A factory is referenced as ``"package.module:attr"`` and is called with the
resolved `Config`; it must return an `Endpoint`. Build-time failures are
translated into CLI errors with sysexits-style exit codes.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from plugline.cli.errors import (
    PluglineAppNotFoundError,
    PluglinePipelineError,
    PluglineRouteConflictError,
)
from plugline.config.logging import get_logger
from plugline.core.errors import DuplicateRouteError, PluglineError
from plugline.endpoint import Endpoint

if TYPE_CHECKING:
    from collections.abc import Callable

    from plugline.config.logging import PluglineLogger
    from plugline.config.model import Config

logger: PluglineLogger = get_logger(__name__)


def import_factory(reference: str) -> Callable[..., Any]:
    """Resolve ``"module:attr"`` to a callable.

    Raises:
        PluglineAppNotFoundError: If the module or attribute cannot be found, or
            the attribute is not callable.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise PluglineAppNotFoundError(f"Invalid application factory {reference!r}; expected 'module:attr'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise PluglineAppNotFoundError(f"Cannot import {module_name!r}: {exc}") from exc
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise PluglineAppNotFoundError(f"{reference!r} is not a callable application factory")
    return factory


def load_endpoint(config: Config) -> Endpoint:
    """Build the application endpoint for ``config``.

    Raises:
        PluglineAppNotFoundError: If the factory is unusable or returns no endpoint.
        PluglineRouteConflictError: If a strict route table has duplicates.
        PluglinePipelineError: If a pipeline, step or route is misconfigured.
    """
    factory = import_factory(config.app_factory)
    logger.debug("Loading application from %s", config.app_factory)
    try:
        endpoint = factory(config)
    except DuplicateRouteError as exc:
        raise PluglineRouteConflictError(str(exc)) from exc
    except PluglineError as exc:
        raise PluglinePipelineError(f"{type(exc).__name__}: {exc}") from exc
    if not isinstance(endpoint, Endpoint):
        raise PluglineAppNotFoundError(
            f"{config.app_factory!r} returned {type(endpoint).__name__}, expected an Endpoint"
        )
    return endpoint
