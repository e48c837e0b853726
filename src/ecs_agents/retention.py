"""Periodic survivability checks and agent retirement."""

import asyncio

import structlog

from ecs_agents.agent import EcsAgent
from ecs_agents.config import get_settings
from ecs_agents.exceptions import AgentIdentityError, TaskDescribeError
from ecs_agents.listener import StructlogTaskListener
from ecs_agents.logging_config import bind_agent_context, clear_agent_context

logger = structlog.get_logger()


class RetentionManager:
    """Keeps registered agents only while their ECS tasks are alive.

    Each cycle asks every agent whether it is survivable and retires the
    ones that are not. An agent whose task state cannot be read is kept
    until the next cycle.
    """

    def __init__(self, check_interval_sec: int | None = None):
        self.settings = get_settings()
        self.check_interval_sec = check_interval_sec or self.settings.check_interval_sec
        self._agents: dict[str, EcsAgent] = {}  # node_name -> agent
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def agents(self) -> list[EcsAgent]:
        return list(self._agents.values())

    def register(self, agent: EcsAgent) -> None:
        if agent.node_name in self._agents:
            raise ValueError(f"Agent {agent.node_name} is already registered")
        self._agents[agent.node_name] = agent
        logger.info("agent_registered", node_name=agent.node_name, task_arn=agent.task_arn)

    def unregister(self, node_name: str) -> EcsAgent | None:
        agent = self._agents.pop(node_name, None)
        if agent:
            logger.info("agent_unregistered", node_name=node_name)
        return agent

    async def retire(self, node_name: str) -> bool:
        """Terminate an agent and drop it from the fleet.

        Returns:
            False if no agent with that name is registered.
        """
        agent = self.unregister(node_name)
        if agent is None:
            return False

        await agent.terminate(StructlogTaskListener(node_name))
        logger.info("agent_retired", node_name=node_name, task_arn=agent.task_arn)
        return True

    async def check_agents(self) -> list[str]:
        """Run one survivability pass.

        Returns:
            Names of the agents retired in this pass.
        """
        retired: list[str] = []

        for node_name, agent in list(self._agents.items()):
            bind_agent_context(node_name, agent.task_arn)
            try:
                if await self._check_agent(agent) is False and await self.retire(node_name):
                    retired.append(node_name)
            finally:
                clear_agent_context()

        if retired:
            logger.info("retention_check_complete", retired=retired, remaining=len(self._agents))
        return retired

    async def _check_agent(self, agent: EcsAgent) -> bool | None:
        """Survivability verdict, or None when it cannot be determined this cycle."""
        try:
            survivable = await agent.is_survivable()
        except (TaskDescribeError, AgentIdentityError) as e:
            logger.warning("agent_check_skipped", error=str(e), error_type=type(e).__name__)
            return None

        if not survivable:
            logger.info("agent_not_survivable")
        return survivable

    async def start(self) -> None:
        """Start the background check loop."""
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("retention_manager_started", interval_sec=self.check_interval_sec)

    async def stop(self, terminate_agents: bool = False) -> None:
        """Stop the check loop, optionally retiring every remaining agent."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if terminate_agents:
            for node_name in list(self._agents):
                await self.retire(node_name)

        logger.info("retention_manager_stopped", remaining=len(self._agents))

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.check_agents()
            except Exception as e:
                logger.error("retention_check_error", error=str(e), exc_info=True)

            await asyncio.sleep(self.check_interval_sec)
