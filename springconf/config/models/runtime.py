"""Runtime configuration models.

Configuration for logging, the config watcher and the config server client.
"""

from typing import Literal

from pydantic import BaseModel, Field

LogFormat = Literal["console", "json"]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    level: str = Field(default="INFO", description="Default log level")
    format: LogFormat = Field(default="console", description="Log output format")
    redact_secrets: bool = Field(
        default=True,
        description="Mask passwords, tokens and URL credentials in log output",
    )


class WatchConfig(BaseModel):
    """Config watcher configuration."""

    interval_ms: int = Field(
        default=60000,
        gt=0,
        description="Default poll interval in milliseconds",
    )


class RemoteClientConfig(BaseModel):
    """Spring Cloud Config Server client configuration."""

    endpoint: str = Field(
        default="http://localhost:8888",
        description="Config server base URL used when bootstrap.yml sets none",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )
