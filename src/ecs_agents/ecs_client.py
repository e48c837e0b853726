"""Access to ECS task state.

``EcsTaskClient`` wraps the blocking boto3 client and runs every call in a
thread pool so callers on the event loop are never blocked.
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ecs_agents.config import Settings, get_settings
from ecs_agents.exceptions import TaskDescribeError, TaskStopError
from ecs_agents.models import TaskSnapshot

logger = structlog.get_logger()

# DescribeTasks failure reason for a task ECS does not know about
MISSING_REASON = "MISSING"

# Error codes ECS returns when it considers the request itself invalid
REJECTION_CODES = frozenset({"ClientException", "InvalidParameterException"})

# The cluster is gone, so no task can live in it
NOT_FOUND_CODES = frozenset({"ClusterNotFoundException"})


class TaskClient(ABC):
    """Remote operations the lifecycle engine needs from the orchestrator."""

    @abstractmethod
    async def describe_task(self, task_arn: str, cluster_arn: str) -> TaskSnapshot | None:
        """Fetch the current state of a task.

        Returns:
            A fresh snapshot, or None when the task no longer exists.

        Raises:
            TaskDescribeError: State could not be determined.
        """

    @abstractmethod
    async def stop_task(self, task_arn: str, cluster_arn: str) -> None:
        """Request that a task be stopped.

        Raises:
            TaskStopError: ECS refused or the call failed.
        """

    def close(self) -> None:
        """Release resources held by the client."""


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", "") or str(error)


class EcsTaskClient(TaskClient):
    """TaskClient backed by the boto3 ECS API."""

    def __init__(self, settings: Settings | None = None, client: Any | None = None):
        self.settings = settings or get_settings()
        self._client = client or boto3.client(
            "ecs",
            region_name=self.settings.aws_region,
            endpoint_url=self.settings.endpoint_url,
            config=Config(
                connect_timeout=self.settings.connect_timeout_sec,
                read_timeout=self.settings.read_timeout_sec,
                retries={"max_attempts": self.settings.max_attempts, "mode": "standard"},
            ),
        )
        self._executor = ThreadPoolExecutor(max_workers=self.settings.max_client_workers)

    async def _run(self, func, *args, **kwargs):
        """Run blocking function in thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, lambda: func(*args, **kwargs))

    async def describe_task(self, task_arn: str, cluster_arn: str) -> TaskSnapshot | None:
        try:
            response = await self._run(
                self._client.describe_tasks, cluster=cluster_arn, tasks=[task_arn]
            )
        except ClientError as e:
            code = _error_code(e)
            if code in NOT_FOUND_CODES:
                logger.info("task_cluster_not_found", task_arn=task_arn, cluster_arn=cluster_arn)
                return None
            raise TaskDescribeError(task_arn, cluster_arn, f"{code}: {_error_message(e)}") from e
        except BotoCoreError as e:
            raise TaskDescribeError(task_arn, cluster_arn, str(e)) from e

        tasks = response.get("tasks") or []
        if tasks:
            task = tasks[0]
            return TaskSnapshot(
                task_arn=task.get("taskArn", task_arn),
                last_status=task.get("lastStatus", ""),
                desired_status=task.get("desiredStatus", ""),
                stopped_reason=task.get("stoppedReason"),
            )

        failures = response.get("failures") or []
        other = [f for f in failures if f.get("reason") != MISSING_REASON]
        if other:
            reason = other[0].get("reason", "unknown")
            detail = other[0].get("detail")
            raise TaskDescribeError(
                task_arn, cluster_arn, f"{reason}: {detail}" if detail else reason
            )

        logger.debug("task_not_found", task_arn=task_arn, cluster_arn=cluster_arn)
        return None

    async def stop_task(self, task_arn: str, cluster_arn: str) -> None:
        logger.info("stopping_task", task_arn=task_arn, cluster_arn=cluster_arn)
        try:
            await self._run(
                self._client.stop_task,
                cluster=cluster_arn,
                task=task_arn,
                reason=self.settings.stop_reason,
            )
        except ClientError as e:
            code = _error_code(e)
            raise TaskStopError(
                task_arn,
                cluster_arn,
                f"{code}: {_error_message(e)}",
                rejected=code in REJECTION_CODES,
            ) from e
        except BotoCoreError as e:
            raise TaskStopError(task_arn, cluster_arn, str(e)) from e

    def close(self) -> None:
        self._executor.shutdown(wait=False)
