"""Data models for agent identity and remote task state."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    """ECS task lifecycle statuses.

    Reported by ECS as both ``lastStatus`` and ``desiredStatus``.
    """

    PROVISIONING = "PROVISIONING"
    PENDING = "PENDING"
    ACTIVATING = "ACTIVATING"
    RUNNING = "RUNNING"
    DEACTIVATING = "DEACTIVATING"
    STOPPING = "STOPPING"
    DEPROVISIONING = "DEPROVISIONING"
    STOPPED = "STOPPED"


TERMINAL_STATUS = TaskStatus.STOPPED


class AgentState(str, Enum):
    """Local lifecycle state of a single agent."""

    PROVISIONING = "provisioning"
    RUNNING = "running"
    RETIRING = "retiring"
    TERMINATED = "terminated"


class TaskSnapshot(BaseModel):
    """State of a remote task as reported by one describe call.

    Statuses are kept as plain strings so values ECS adds later still parse.
    """

    model_config = ConfigDict(frozen=True)

    task_arn: str | None = None
    last_status: str = Field(..., description="Status the task last reported")
    desired_status: str = Field(..., description="Status ECS is driving the task towards")
    stopped_reason: str | None = None


class WorkerIdentity(BaseModel):
    """Fleet name of an agent plus the ECS task backing it."""

    model_config = ConfigDict(frozen=True)

    node_name: str
    task_arn: str | None = None
    cluster_arn: str | None = None

    @property
    def is_bound(self) -> bool:
        """True once both task and cluster are known."""
        return bool(self.task_arn) and bool(self.cluster_arn)
