"""ECS agents - lifecycle and survivability of ECS-backed fleet agents."""

from ecs_agents.agent import EcsAgent
from ecs_agents.capacity import resolve_executors
from ecs_agents.ecs_client import EcsTaskClient, TaskClient
from ecs_agents.exceptions import (
    AgentIdentityError,
    EcsAgentError,
    TaskDescribeError,
    TaskStopError,
)
from ecs_agents.listener import BufferedTaskListener, StructlogTaskListener, TaskListener
from ecs_agents.models import AgentState, TaskSnapshot, TaskStatus, WorkerIdentity
from ecs_agents.retention import RetentionManager
from ecs_agents.survivability import evaluate

__all__ = [
    "AgentIdentityError",
    "AgentState",
    "BufferedTaskListener",
    "EcsAgent",
    "EcsAgentError",
    "EcsTaskClient",
    "RetentionManager",
    "StructlogTaskListener",
    "TaskClient",
    "TaskDescribeError",
    "TaskListener",
    "TaskSnapshot",
    "TaskStatus",
    "TaskStopError",
    "WorkerIdentity",
    "evaluate",
    "resolve_executors",
]
