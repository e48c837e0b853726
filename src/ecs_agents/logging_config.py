"""Structured logging setup.

Outputs JSON (production) or colored console lines (development). Values
not passed explicitly come from ``Settings``.

Usage:
    from ecs_agents.logging_config import setup_logging
    import structlog

    setup_logging()
    logger = structlog.get_logger()
    logger.info("agent_retired", node_name="ecs-agent-1")
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from ecs_agents.config import get_settings


def setup_logging(
    service_name: str | None = None,
    log_format: Literal["json", "console"] | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog on top of the standard library logging module.

    Args:
        service_name: Bound to every event as ``service``.
        log_format: "json" for production, "console" for local runs.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
    """
    settings = get_settings()
    service_name = service_name or settings.service_name
    log_format = log_format or settings.log_format
    log_level = (log_level or settings.log_level).upper()

    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)

    structlog.get_logger().debug(
        "logging_initialized",
        log_format=log_format,
        log_level=log_level,
    )


def bind_agent_context(node_name: str, task_arn: str | None = None) -> None:
    """Attach agent identity to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(node_name=node_name, task_arn=task_arn)


def clear_agent_context() -> None:
    structlog.contextvars.unbind_contextvars("node_name", "task_arn")
