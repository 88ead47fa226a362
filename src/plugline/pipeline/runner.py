# topmark:header:start
#
#   project      : Plugline
#   file         : runner.py
#   file_relpath : src/plugline/pipeline/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run a built pipeline over a connection.

The runner is the single enforcer of the short-circuit guarantee: as soon as a
step returns a halted conn, no later step of the pipeline executes and the
halted conn is returned. Individual steps never need to check ``halted``.

Exceptions raised by a step propagate unchanged; the runner does not catch
them. Only the endpoint converts unexpected failures into a 500 response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plugline.config.logging import get_logger
from plugline.core.errors import HaltContractError, StepContractError
from plugline.pipeline.context import Conn

if TYPE_CHECKING:
    from plugline.config.logging import PluglineLogger

    from .pipelines import Pipeline

logger: PluglineLogger = get_logger(__name__)


def run(
    pipeline: Pipeline,
    conn: Conn,
    *,
    action: str | None = None,
) -> Conn:
    """Execute the pipeline sequentially until completion or halt.

    Args:
        pipeline (Pipeline): The built pipeline.
        conn (Conn): The incoming connection. An already halted conn is returned
            unchanged.
        action (str | None): Current controller action; entries guarded with
            ``actions=`` are skipped when it is not listed.

    Returns:
        Conn: The final connection after all steps ran, or the halted conn.

    Raises:
        StepContractError: If a step returns something other than a `Conn`.
        HaltContractError: If a step halts without sending or rendering a response.
    """
    if conn.halted:
        logger.debug("Pipeline %r skipped: conn already halted", pipeline.name)
        return conn

    logger.debug("Pipeline %r: running %d step(s) for %s", pipeline.name, len(pipeline), conn.path)
    for entry in pipeline.entries:
        if not entry.applies_to(action):
            logger.trace("Pipeline %r: %s skipped for action %r", pipeline.name, entry.step.name, action)
            continue

        out = entry.step(conn, entry.opts)
        if not isinstance(out, Conn):
            raise StepContractError(
                f"Step {entry.step.name!r} in pipeline {pipeline.name!r} "
                f"returned {type(out).__name__}, expected Conn"
            )
        conn = out

        if conn.halted:
            if not conn.finalized:
                raise HaltContractError(pipeline.name, entry.step.name)
            logger.debug("Pipeline %r halted at %s", pipeline.name, entry.step.name)
            return conn

    return conn
