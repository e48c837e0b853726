"""Exceptions raised by the agent lifecycle engine."""


class EcsAgentError(Exception):
    """Base class for all ecs_agents errors."""


class AgentIdentityError(EcsAgentError):
    """Agent identity is missing or conflicts with an earlier assignment."""


class TaskDescribeError(EcsAgentError):
    """Task state could not be read from ECS.

    Never raised for a task that simply no longer exists; that case is
    reported as ``None`` by ``TaskClient.describe_task``.
    """

    def __init__(self, task_arn: str, cluster_arn: str, reason: str):
        super().__init__(f"Failed to describe task {task_arn} in {cluster_arn}: {reason}")
        self.task_arn = task_arn
        self.cluster_arn = cluster_arn
        self.reason = reason


class TaskStopError(EcsAgentError):
    """ECS refused or failed to stop a task.

    ``rejected`` is set when ECS declared the request itself invalid,
    typically because the task is already stopped or gone.
    """

    def __init__(self, task_arn: str, cluster_arn: str, reason: str, rejected: bool = False):
        super().__init__(f"Failed to stop task {task_arn} in {cluster_arn}: {reason}")
        self.task_arn = task_arn
        self.cluster_arn = cluster_arn
        self.reason = reason
        self.rejected = rejected
