"""A fleet agent backed by an ECS task."""

import asyncio

import structlog

from ecs_agents.capacity import resolve_executors
from ecs_agents.config import get_settings
from ecs_agents.ecs_client import TaskClient
from ecs_agents.exceptions import AgentIdentityError
from ecs_agents.listener import TaskListener
from ecs_agents.models import AgentState, TaskSnapshot, WorkerIdentity
from ecs_agents.survivability import evaluate

logger = structlog.get_logger()


class EcsAgent:
    """One worker's view onto the ECS task that backs it.

    Survivability is always read fresh from ECS; nothing about the remote
    task is cached between calls. Termination is best effort and never
    raises.
    """

    def __init__(
        self,
        client: TaskClient,
        node_name: str,
        num_executors: int | None = None,
    ):
        """
        Args:
            client: Shared task client, not owned by the agent.
            node_name: Fleet-visible name of the agent.
            num_executors: Requested executor slots. Defaults to the
                fleet setting; values below 1 resolve to a single slot.
        """
        self.client = client
        self._identity = WorkerIdentity(node_name=node_name)
        self._state = AgentState.PROVISIONING

        if num_executors is None:
            num_executors = get_settings().num_executors
        self._num_executors = resolve_executors(num_executors)

    @property
    def identity(self) -> WorkerIdentity:
        return self._identity

    @property
    def node_name(self) -> str:
        return self._identity.node_name

    @property
    def task_arn(self) -> str | None:
        return self._identity.task_arn

    @property
    def cluster_arn(self) -> str | None:
        return self._identity.cluster_arn

    @property
    def num_executors(self) -> int:
        return self._num_executors

    @property
    def state(self) -> AgentState:
        return self._state

    def bind_task(self, task_arn: str, cluster_arn: str) -> None:
        """Attach the ECS task launched for this agent.

        Binding again to the same task is a no-op; binding to another task
        raises AgentIdentityError.
        """
        if not task_arn or not cluster_arn:
            raise AgentIdentityError(
                f"Agent {self.node_name} needs both task and cluster ARN to bind"
            )

        if self._identity.is_bound:
            if (self.task_arn, self.cluster_arn) == (task_arn, cluster_arn):
                return
            raise AgentIdentityError(
                f"Agent {self.node_name} is already bound to {self.task_arn} "
                f"in {self.cluster_arn}"
            )

        self._identity = self._identity.model_copy(
            update={"task_arn": task_arn, "cluster_arn": cluster_arn}
        )
        logger.info(
            "agent_task_bound",
            node_name=self.node_name,
            task_arn=task_arn,
            cluster_arn=cluster_arn,
        )

    def mark_running(self) -> None:
        """Record that the agent connected and can take work."""
        if self._state == AgentState.PROVISIONING:
            self._state = AgentState.RUNNING

    async def inspect_task(self) -> tuple[TaskSnapshot | None, bool]:
        """Fetch the backing task's state and the verdict derived from it.

        Raises:
            AgentIdentityError: No task is bound yet.
            TaskDescribeError: ECS could not be queried; the caller decides
                whether to retry.
        """
        if not self._identity.is_bound:
            raise AgentIdentityError(f"Agent {self.node_name} has no task bound")

        snapshot = await self.client.describe_task(self.task_arn, self.cluster_arn)
        survivable = evaluate(snapshot)

        logger.debug(
            "agent_survivability_checked",
            node_name=self.node_name,
            task_arn=self.task_arn,
            found=snapshot is not None,
            last_status=snapshot.last_status if snapshot else None,
            desired_status=snapshot.desired_status if snapshot else None,
            survivable=survivable,
        )
        return snapshot, survivable

    async def is_survivable(self) -> bool:
        """Check with ECS whether the backing task can keep serving.

        Raises the same errors as ``inspect_task``.
        """
        _, survivable = await self.inspect_task()
        return survivable

    async def terminate(self, listener: TaskListener) -> None:
        """Stop the backing task, absorbing every failure.

        Makes exactly one stop request. Failures are reported to
        ``listener`` and logged; the agent ends up TERMINATED regardless.
        Cancellation is deferred until the stop request has finished and
        is then re-raised.
        """
        self._state = AgentState.RETIRING
        try:
            if not self._identity.is_bound:
                logger.info("agent_terminate_skipped_unbound", node_name=self.node_name)
                return

            stop = asyncio.ensure_future(self._stop_task(listener))
            cancelled = False
            while not stop.done():
                try:
                    await asyncio.shield(stop)
                except asyncio.CancelledError:
                    if not cancelled:
                        logger.info(
                            "agent_terminate_cancel_deferred",
                            node_name=self.node_name,
                            task_arn=self.task_arn,
                        )
                    cancelled = True
            if cancelled:
                raise asyncio.CancelledError()
        finally:
            self._state = AgentState.TERMINATED

    async def _stop_task(self, listener: TaskListener) -> None:
        try:
            await self.client.stop_task(self.task_arn, self.cluster_arn)
            logger.info(
                "agent_task_stopped",
                node_name=self.node_name,
                task_arn=self.task_arn,
                cluster_arn=self.cluster_arn,
            )
        except Exception as e:
            listener.log(f"Failed to stop ECS task {self.task_arn}: {e}")
            logger.warning(
                "agent_task_stop_failed",
                node_name=self.node_name,
                task_arn=self.task_arn,
                cluster_arn=self.cluster_arn,
                error=str(e),
                error_type=type(e).__name__,
            )

    def __repr__(self) -> str:
        return (
            f"EcsAgent(node_name={self.node_name!r}, task_arn={self.task_arn!r}, "
            f"state={self._state.value!r})"
        )
