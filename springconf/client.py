"""Spring Cloud Config style configuration client.

Resolves an application's configuration from three layers, lowest
precedence first:

1. <bootstrap_path or config_path>/bootstrap.yml
2. <config_path>/application.yml and application-<profile>.yml overlays
3. The remote config server, when spring.cloud.config.enabled is set

Usage:
    from springconf import ConfigEvent, SpringCloudConfig

    async with SpringCloudConfig({"config_path": "config", "active_profiles": ["dev"]}) as config:
        settings = await config.load()
        config.on(ConfigEvent.CONFIG_REFRESH, handle_refresh)
        config.start_watch(30000)
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from springconf.config import get_settings
from springconf.config.models import LoadOptions
from springconf.config.settings import Settings
from springconf.errors import InvalidOptionsError, SpringConfError
from springconf.events import ConfigEvent, EventEmitter, EventListener
from springconf.observability.logging import get_logger, setup_logging
from springconf.pipeline import ResolutionContext, ResolutionPipeline
from springconf.remote.base import RemoteConfigFetcher
from springconf.remote.config_server import ConfigServerClient
from springconf.watcher import ConfigWatcher

logger = get_logger(__name__)


class SpringCloudConfig:
    """One configuration instance: resolved config, watcher and listeners.

    Attributes:
        events: Listener registry for CONFIG_REFRESH and CONFIG_ERROR
    """

    def __init__(
        self,
        options: LoadOptions | Mapping[str, Any] | None = None,
        fetcher: RemoteConfigFetcher | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the configuration instance.

        Args:
            options: Load options (validated when load() runs)
            fetcher: Remote config fetcher; defaults to a ConfigServerClient
            settings: Library settings; defaults to get_settings()
        """
        self._settings = settings or get_settings()
        self._options = options
        self._fetcher = fetcher
        self._owned_fetcher: ConfigServerClient | None = None

        self._context: ResolutionContext | None = None
        self._config: dict[str, Any] | None = None

        self.events = EventEmitter()
        self._watcher = ConfigWatcher(
            resolve=self._resolve,
            on_refresh=self._handle_refresh,
            on_error=self._handle_error,
            interval_ms=self._settings.watch.interval_ms,
        )

    async def __aenter__(self) -> "SpringCloudConfig":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    @property
    def watcher(self) -> ConfigWatcher:
        return self._watcher

    @property
    def bootstrap_config(self) -> dict[str, Any] | None:
        """Bootstrap layer of the last successful pass."""
        return self._context.bootstrap if self._context else None

    @property
    def local_config(self) -> dict[str, Any] | None:
        """Application layer of the last successful pass."""
        return self._context.local if self._context else None

    @property
    def remote_config(self) -> dict[str, Any] | None:
        """Remote layer of the last successful pass."""
        return self._context.remote if self._context else None

    def set_options(self, options: LoadOptions | Mapping[str, Any]) -> None:
        """Replace the load options used by later passes."""
        self._options = options

    def get_config(self) -> dict[str, Any] | None:
        """Return the last composed configuration, or None before the first success."""
        return self._config

    async def load(self) -> dict[str, Any]:
        """Validate options, configure logging and resolve the configuration.

        Returns:
            The composed configuration

        Raises:
            InvalidOptionsError: If config_path or active_profiles are missing
            ResolutionError: If the bootstrap or local stage fails
        """
        options = self._validated_options()
        setup_logging(
            level=options.level or self._settings.logging.level,
            format=self._settings.logging.format,
            redact_secrets=self._settings.logging.redact_secrets,
        )

        try:
            config = await self._resolve()
        except SpringConfError as e:
            logger.error("config_load_failed", error=e.message)
            raise

        logger.info(
            "config_loaded",
            active_profiles=list(options.active_profiles),
            key_count=len(config),
        )
        return config

    def on(self, event: ConfigEvent | str, listener: EventListener) -> None:
        """Register a listener for CONFIG_REFRESH or CONFIG_ERROR."""
        self.events.on(event, listener)

    def off(self, event: ConfigEvent | str, listener: EventListener) -> None:
        """Unregister a listener."""
        self.events.off(event, listener)

    def start_watch(self, interval_ms: int | None = None) -> None:
        """Start polling for configuration changes.

        Must be called from within a running event loop.
        """
        self._watcher.start(interval_ms)

    def end_watch(self) -> None:
        """Stop polling once the current or already-scheduled pass completes."""
        self._watcher.stop()

    async def close(self) -> None:
        """Stop the watcher immediately and release the config server client."""
        await self._watcher.close()
        if self._owned_fetcher is not None:
            await self._owned_fetcher.close()
            self._owned_fetcher = None
            self._fetcher = None

    def _validated_options(self) -> LoadOptions:
        if self._options is None:
            raise InvalidOptionsError("Invalid options supplied: config_path and active_profiles are required")
        if isinstance(self._options, LoadOptions):
            return self._options

        try:
            return LoadOptions.model_validate(self._options)
        except ValidationError as e:
            raise InvalidOptionsError(f"Invalid options supplied: {e}") from e

    def _get_fetcher(self) -> RemoteConfigFetcher:
        if self._fetcher is None:
            self._owned_fetcher = ConfigServerClient(
                default_endpoint=self._settings.remote.endpoint,
                timeout=self._settings.remote.timeout_seconds,
            )
            self._fetcher = self._owned_fetcher
        return self._fetcher

    async def _resolve(self) -> dict[str, Any]:
        """Run one resolution pass and publish its result."""
        options = self._validated_options()
        pipeline = ResolutionPipeline(options, self._get_fetcher())
        context = await pipeline.run()

        composed = context.composed or {}
        self._context = context
        self._config = composed
        return composed

    async def _handle_refresh(self, config: dict[str, Any]) -> None:
        await self.events.emit(ConfigEvent.CONFIG_REFRESH, config)

    async def _handle_error(self, error: Exception) -> None:
        await self.events.emit(ConfigEvent.CONFIG_ERROR, error)


async def load_config(
    options: LoadOptions | Mapping[str, Any],
    fetcher: RemoteConfigFetcher | None = None,
) -> dict[str, Any]:
    """Resolve configuration once and return the composed property set."""
    async with SpringCloudConfig(options, fetcher=fetcher) as config:
        return await config.load()
