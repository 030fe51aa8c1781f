"""Load options for a configuration instance."""

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Level names used by Node-style loggers, mapped onto standard levels.
LEVEL_ALIASES: dict[str, str] = {
    "WARN": "WARNING",
    "VERBOSE": "DEBUG",
    "SILLY": "DEBUG",
    "HTTP": "INFO",
    "FATAL": "CRITICAL",
}


class LoadOptions(BaseModel):
    """Options supplied when loading configuration.

    Both snake_case and the camelCase names used by Spring-style clients
    (``configPath``, ``activeProfiles``, ``bootstrapPath``) are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    config_path: Path = Field(
        ...,
        validation_alias=AliasChoices("config_path", "configPath"),
        description="Directory holding application.yml and profile overlays",
    )
    active_profiles: list[str] = Field(
        ...,
        validation_alias=AliasChoices("active_profiles", "activeProfiles"),
        description="Active profile names, in precedence order",
    )
    bootstrap_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("bootstrap_path", "bootstrapPath"),
        description="Directory holding bootstrap.yml (defaults to config_path)",
    )
    level: str | None = Field(
        default=None,
        description="Log level applied when configuration is loaded; unknown names fall back to INFO",
    )

    @field_validator("config_path", mode="before")
    @classmethod
    def _require_config_path(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("config_path must not be empty")
        return value

    @field_validator("active_profiles", mode="before")
    @classmethod
    def _split_profiles(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _normalise_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            name = value.strip().upper()
            return LEVEL_ALIASES.get(name, name) or None
        return value

    @property
    def bootstrap_dir(self) -> Path:
        """Directory bootstrap.yml is read from."""
        return self.bootstrap_path or self.config_path
