# topmark:header:start
#
#   project      : Plugline
#   file         : test_halt_property.py
#   file_relpath : tests/pipeline/test_halt_property.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Property tests for the halt short-circuit of the pipeline runner.

For any generated sequence of steps, the steps executed are exactly the
prefix up to and including the first halting step, and the final conn is
halted if and only if such a step exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from hypothesis import HealthCheck, given, settings

from plugline.pipeline.pipelines import build
from plugline.pipeline.runner import run
from plugline.pipeline.steps.base import FunctionStep, plug
from tests.conftest import make_conn
from tests.strategies_plugline import StepPlan, s_step_plans

if TYPE_CHECKING:
    from plugline.pipeline.context import Conn

# Mark the entire test module
pytestmark: pytest.MarkDecorator = pytest.mark.hypothesis_slow


def _make_step(plan: StepPlan, executed: list[str]) -> FunctionStep:
    def fn(conn: Conn, _opts: Any) -> Conn:
        executed.append(plan.name)
        if plan.behavior == "halt":
            return conn.text(f"halted by {plan.name}").halt()
        if plan.behavior == "assign":
            return conn.assign(plan.name, True)
        return conn

    return FunctionStep.wrap(fn, name=plan.name)


@settings(suppress_health_check=[HealthCheck.too_slow], deadline=None, max_examples=100)
@given(plans=s_step_plans())
def test_runner_executes_exactly_the_prefix_up_to_first_halt(plans: list[StepPlan]) -> None:
    """Steps after the first halt never run; earlier ones all run in order."""
    executed: list[str] = []
    pipeline = build("generated", [plug(_make_step(p, executed)) for p in plans])

    out: Conn = run(pipeline, make_conn())

    first_halt = next((i for i, p in enumerate(plans) if p.behavior == "halt"), None)
    expected = plans if first_halt is None else plans[: first_halt + 1]
    assert executed == [p.name for p in expected]
    assert out.halted == (first_halt is not None)
    if first_halt is not None:
        assert out.response is not None
        assert out.response.body == f"halted by {plans[first_halt].name}"
    assigned = {p.name for p in expected if p.behavior == "assign"}
    assert set(out.assigns) == assigned
