"""Remote config fetch contract.

The resolution pipeline talks to the remote config service only through
RemoteConfigFetcher. Implementations return a flat or nested property set,
or raise; the pipeline treats every failure as non-fatal.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RemoteConfigOptions(BaseModel):
    """Remote config options, taken from ``spring.cloud.config`` in bootstrap.yml."""

    model_config = ConfigDict(extra="allow")

    enabled: bool = Field(default=False, description="Fetch remote configuration")
    name: str = Field(default="application", description="Application name for remote lookup")
    profiles: list[str] = Field(
        default_factory=lambda: ["default"],
        description="Profiles requested from the config server",
    )
    endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("endpoint", "uri"),
        description="Config server base URL",
    )
    label: str | None = Field(default=None, description="Config repository label (branch)")

    @field_validator("profiles", mode="before")
    @classmethod
    def _split_profiles(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        if not value:
            return ["default"]
        return value


@runtime_checkable
class RemoteConfigFetcher(Protocol):
    """Protocol for remote config fetchers."""

    async def fetch(self, options: RemoteConfigOptions) -> Mapping[str, Any] | None:
        """Fetch the property set for the application and profiles in options.

        Args:
            options: Remote config options from the bootstrap config

        Returns:
            Flat (dot-separated keys) or nested property set, or None

        Raises:
            RemoteFetchError: If the service can't supply properties
        """
        ...
