"""Unit tests for the survivability evaluator."""

import pytest

from ecs_agents.models import TaskSnapshot, TaskStatus
from ecs_agents.survivability import evaluate


def snapshot(last_status: str, desired_status: str) -> TaskSnapshot:
    return TaskSnapshot(last_status=last_status, desired_status=desired_status)


@pytest.mark.parametrize(
    ("last_status", "desired_status", "expected"),
    [
        ("PROVISIONING", "RUNNING", True),
        ("RUNNING", "RUNNING", True),
        ("STOPPED", "RUNNING", False),
        ("RUNNING", "STOPPED", False),
        ("STOPPED", "STOPPED", False),
    ],
)
def test_status_matrix(last_status, desired_status, expected):
    assert evaluate(snapshot(last_status, desired_status)) is expected


def test_missing_task_is_not_survivable():
    assert evaluate(None) is False


@pytest.mark.parametrize("status", [s.value for s in TaskStatus if s != TaskStatus.STOPPED])
def test_stopped_on_either_axis_is_terminal(status):
    """A STOPPED value in either field wins over anything in the other."""
    assert evaluate(snapshot("STOPPED", status)) is False
    assert evaluate(snapshot(status, "STOPPED")) is False


@pytest.mark.parametrize("status", ["PENDING", "ACTIVATING", "DEACTIVATING", "STOPPING"])
def test_transitional_statuses_are_survivable(status):
    """Only STOPPED is terminal; a task on its way down still counts."""
    assert evaluate(snapshot(status, "RUNNING")) is True


def test_unknown_status_is_survivable():
    assert evaluate(snapshot("SOMETHING_NEW", "RUNNING")) is True

