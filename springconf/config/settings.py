"""Root settings model for springconf's own runtime behaviour."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from springconf.config.models.runtime import (
    LoggingConfig,
    RemoteClientConfig,
    WatchConfig,
)


class Settings(BaseSettings):
    """Library settings, overridable through SPRINGCONF_* environment variables.

    Nested sections use ``__`` as delimiter, e.g.
    ``SPRINGCONF_WATCH__INTERVAL_MS=30000``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPRINGCONF_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    watch: WatchConfig = Field(
        default_factory=WatchConfig,
        description="Config watcher configuration",
    )
    remote: RemoteClientConfig = Field(
        default_factory=RemoteClientConfig,
        description="Config server client configuration",
    )
