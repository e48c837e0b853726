"""Tests for structured logging configuration."""

import json
import logging
import re

import pytest
import structlog

from ecs_agents.config import get_settings
from ecs_agents.listener import BufferedTaskListener, StructlogTaskListener
from ecs_agents.logging_config import bind_agent_context, clear_agent_context, setup_logging


def strip_ansi(text):
    """Strip ANSI escape sequences from text."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


def parse_json_lines(output):
    lines = output.strip().split("\n")
    return [json.loads(line) for line in lines if line.strip()]


def find_event(output, event):
    return next((e for e in parse_json_lines(output) if e.get("event") == event), None)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration around each test."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestLoggingSetup:
    def test_json_format(self, capsys):
        setup_logging(service_name="test_service", log_format="json", log_level="INFO")

        structlog.get_logger().info("test_event", task_arn="mytaskarn", attempts=1)

        entry = find_event(capsys.readouterr().out, "test_event")
        assert entry is not None
        assert entry["service"] == "test_service"
        assert entry["task_arn"] == "mytaskarn"
        assert entry["attempts"] == 1
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_console_format(self, capsys):
        setup_logging(service_name="test_service", log_format="console", log_level="INFO")

        structlog.get_logger().info("test_event", key1="value1")

        output = strip_ansi(capsys.readouterr().out)
        assert "test_event" in output
        assert "key1=value1" in output

    def test_settings_from_env(self, monkeypatch, capsys):
        monkeypatch.setenv("ECS_AGENTS_SERVICE_NAME", "env_service")
        monkeypatch.setenv("ECS_AGENTS_LOG_FORMAT", "json")
        monkeypatch.setenv("ECS_AGENTS_LOG_LEVEL", "debug")
        get_settings.cache_clear()

        setup_logging()
        structlog.get_logger().debug("debug_event")

        entry = find_event(capsys.readouterr().out, "debug_event")
        assert entry is not None
        assert entry["service"] == "env_service"
        assert entry["level"] == "debug"

    def test_level_filtering(self, capsys):
        setup_logging(service_name="test_service", log_format="console", log_level="WARNING")

        logger = structlog.get_logger()
        logger.info("info_event")
        logger.warning("warning_event")

        output = strip_ansi(capsys.readouterr().out)
        assert "info_event" not in output
        assert "warning_event" in output

    def test_invalid_level_rejected(self, monkeypatch):
        monkeypatch.setenv("ECS_AGENTS_LOG_LEVEL", "LOUD")
        get_settings.cache_clear()

        with pytest.raises(ValueError):
            get_settings()


class TestAgentContext:
    def test_bind_and_clear_agent_context(self, capsys):
        setup_logging(service_name="test_service", log_format="json", log_level="INFO")
        logger = structlog.get_logger()

        bind_agent_context("myagent", "mytaskarn")
        logger.info("with_context")
        clear_agent_context()
        logger.info("without_context")

        output = capsys.readouterr().out
        with_context = find_event(output, "with_context")
        without_context = find_event(output, "without_context")
        assert with_context["node_name"] == "myagent"
        assert with_context["task_arn"] == "mytaskarn"
        assert "node_name" not in without_context
        assert without_context["service"] == "test_service"


class TestListeners:
    def test_structlog_listener_emits_warning(self, capsys):
        setup_logging(service_name="test_service", log_format="json", log_level="INFO")

        StructlogTaskListener("myagent").log("Failed to stop ECS task mytaskarn")

        entry = find_event(capsys.readouterr().out, "task_listener_message")
        assert entry["level"] == "warning"
        assert entry["node_name"] == "myagent"
        assert entry["message"] == "Failed to stop ECS task mytaskarn"

    def test_buffered_listener_keeps_messages(self):
        listener = BufferedTaskListener()

        listener.log("first")
        listener.log("second")

        assert listener.messages == ["first", "second"]
        assert listener.getvalue() == "first\nsecond"
