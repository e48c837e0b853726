"""Decides whether an agent's backing task can keep serving work."""

from ecs_agents.models import TERMINAL_STATUS, TaskSnapshot


def evaluate(snapshot: TaskSnapshot | None) -> bool:
    """Return True if the task behind an agent is still usable.

    A missing task is never survivable. A found task is survivable unless it
    has stopped or ECS wants it stopped; the two statuses can disagree while a
    task transitions, so each is checked on its own.
    """
    if snapshot is None:
        return False

    if snapshot.last_status == TERMINAL_STATUS.value:
        return False
    if snapshot.desired_status == TERMINAL_STATUS.value:
        return False
    return True
