"""Pytest configuration for ecs_agents tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ecs_agents.config import get_settings
from ecs_agents.ecs_client import TaskClient


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Fresh settings per test, unaffected by the developer's environment."""
    monkeypatch.delenv("ECS_AGENTS_NUM_EXECUTORS", raising=False)
    monkeypatch.delenv("ECS_AGENTS_CHECK_INTERVAL_SEC", raising=False)
    monkeypatch.setenv("ECS_AGENTS_AWS_REGION", "us-east-1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def task_client():
    """TaskClient double; configure describe_task/stop_task per test."""
    client = AsyncMock(spec=TaskClient)
    client.stop_task.return_value = None
    client.close = MagicMock()
    return client
