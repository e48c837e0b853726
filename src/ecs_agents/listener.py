"""Sinks for free-form diagnostic messages produced during teardown."""

from abc import ABC, abstractmethod

import structlog


class TaskListener(ABC):
    """Receives human-readable diagnostics for one lifecycle operation."""

    @abstractmethod
    def log(self, message: str) -> None:
        """Record a diagnostic line."""


class StructlogTaskListener(TaskListener):
    """Forwards diagnostics to structlog, tagged with the agent name."""

    def __init__(self, node_name: str | None = None):
        logger = structlog.get_logger()
        self._logger = logger.bind(node_name=node_name) if node_name else logger

    def log(self, message: str) -> None:
        self._logger.warning("task_listener_message", message=message)


class BufferedTaskListener(TaskListener):
    """Keeps diagnostics in memory."""

    def __init__(self):
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)

    def getvalue(self) -> str:
        return "\n".join(self.messages)
