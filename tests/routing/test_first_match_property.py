# topmark:header:start
#
#   project      : Plugline
#   file         : test_first_match_property.py
#   file_relpath : tests/routing/test_first_match_property.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Property tests for first-match route resolution.

For generated static routes (some declared twice with different targets),
resolution always selects the earliest declaration, and exactly the later
copies are reported as duplicates.
"""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from plugline.routing.router import Router
from tests.strategies_plugline import s_path

# Mark the entire test module
pytestmark: pytest.MarkDecorator = pytest.mark.hypothesis_slow


class FirstController:
    pass


class SecondController:
    pass


@settings(suppress_health_check=[HealthCheck.too_slow], deadline=None, max_examples=60)
@given(paths=st.lists(s_path(), min_size=1, max_size=8), repeat=st.data())
def test_earliest_declaration_wins(paths: list[str], repeat: st.DataObject) -> None:
    """Every path resolves to its first declaration; re-declarations are duplicates."""
    unique = list(dict.fromkeys(paths))
    repeated: list[str] = repeat.draw(st.lists(st.sampled_from(unique), unique=True))

    router = Router()
    for path in paths:
        router.get(path, FirstController, "first")
    for path in repeated:
        router.get(path, SecondController, "second")
    table = router.build()

    for path in unique:
        match = table.resolve("GET", path)
        assert match.route.controller is FirstController
    shadowed = [later for _earlier, later in table.find_duplicates()]
    expected_count = (len(paths) - len(unique)) + len(repeated)
    assert len(shadowed) == expected_count
    assert len(table.diagnostics) == expected_count
