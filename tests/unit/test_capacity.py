"""Unit tests for executor slot resolution."""

import pytest

from ecs_agents.capacity import resolve_executors


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        (0, 1),
        (4, 4),
        (-1, 1),
        (None, 1),
        (1, 1),
    ],
)
def test_resolve_executors(requested, expected):
    assert resolve_executors(requested) == expected
