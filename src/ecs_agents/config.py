"""Configuration for the ECS agent lifecycle engine.

Settings are read from the environment (prefix ``ECS_AGENTS_``) or a local
``.env`` file.

Usage:
    from ecs_agents.config import get_settings

    settings = get_settings()
    settings.num_executors
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Agent lifecycle settings.

    All fields are optional with sensible defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ECS_AGENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === AWS ===

    aws_region: str | None = Field(
        default=None,
        description="AWS region; falls back to the boto3 default chain",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Override ECS endpoint (e.g. localstack)",
        examples=["http://localhost:4566"],
    )
    connect_timeout_sec: int = Field(default=10, ge=1)
    read_timeout_sec: int = Field(default=30, ge=1)
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="botocore retry attempts per API call",
    )
    max_client_workers: int = Field(
        default=5,
        ge=1,
        description="Thread pool size for blocking ECS calls",
    )

    # === Fleet ===

    num_executors: int = Field(
        default=0,
        description="Executors per agent; values below 1 resolve to a single slot",
    )
    stop_reason: str = Field(
        default="Agent retired by fleet",
        description="Reason recorded on the ECS task when it is stopped",
    )
    check_interval_sec: int = Field(
        default=60,
        ge=1,
        description="Seconds between survivability checks",
    )

    # === Logging ===

    service_name: str = Field(
        default="ecs_agents",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
