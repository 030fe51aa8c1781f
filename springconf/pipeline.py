"""Resolution pipeline: bootstrap -> local -> remote -> compose.

Each stage depends on the previous stage's output and the stages run
strictly in order. Bootstrap and local failures abort the pass; the remote
stage degrades to an empty property set so an unreachable config server
never blocks startup.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from springconf.config.models import LoadOptions
from springconf.documents import BOOTSTRAP_FILE, load_application_config, load_document
from springconf.errors import ResolutionError, SpringConfError
from springconf.observability.logging import get_logger
from springconf.observability.metrics import (
    REMOTE_FETCH_ERRORS,
    RESOLUTION_LATENCY,
    RESOLUTION_PASSES,
)
from springconf.properties import (
    expand_properties,
    flatten_properties,
    get_property,
    merge_properties,
    set_property,
)
from springconf.remote.base import RemoteConfigFetcher, RemoteConfigOptions

logger = get_logger(__name__)

CLOUD_CONFIG_PATH = "spring.cloud.config"
CLOUD_CONFIG_PROFILES_PATH = f"{CLOUD_CONFIG_PATH}.profiles"
CLOUD_CONFIG_NAME_PATH = f"{CLOUD_CONFIG_PATH}.name"


class PipelineStage(str, Enum):
    """Stages of one resolution pass, in execution order."""

    BOOTSTRAP = "bootstrap"
    LOCAL = "local"
    REMOTE = "remote"
    COMPOSE = "compose"


@dataclass
class ResolutionContext:
    """Property sets produced by one resolution pass."""

    active_profiles: tuple[str, ...]
    bootstrap: dict[str, Any] = field(default_factory=dict)
    local: dict[str, Any] = field(default_factory=dict)
    remote: dict[str, Any] = field(default_factory=dict)
    composed: dict[str, Any] | None = None
    stage: PipelineStage = PipelineStage.BOOTSTRAP


class ResolutionPipeline:
    """Runs resolution passes for one set of load options."""

    def __init__(self, options: LoadOptions, fetcher: RemoteConfigFetcher):
        """Initialize pipeline.

        Args:
            options: Validated load options
            fetcher: Remote config fetcher used by the remote stage
        """
        self._options = options
        self._fetcher = fetcher

    async def run(self) -> ResolutionContext:
        """Run one resolution pass.

        Returns:
            Context holding every layer and the composed configuration

        Raises:
            ResolutionError: If the bootstrap or local stage fails
        """
        context = ResolutionContext(active_profiles=tuple(self._options.active_profiles))
        started = time.perf_counter()

        try:
            await self._bootstrap_stage(context)
            await self._local_stage(context)
            await self._remote_stage(context)
            self._compose_stage(context)
        except SpringConfError as e:
            RESOLUTION_PASSES.labels(status="failed").inc()
            logger.error("resolution_failed", stage=context.stage.value, error=e.message)
            raise ResolutionError(context.stage.value, e) from e

        RESOLUTION_PASSES.labels(status="succeeded").inc()
        RESOLUTION_LATENCY.observe(time.perf_counter() - started)
        return context

    async def _bootstrap_stage(self, context: ResolutionContext) -> None:
        context.stage = PipelineStage.BOOTSTRAP
        path = self._options.bootstrap_dir / BOOTSTRAP_FILE
        bootstrap = await load_document(path, context.active_profiles)

        # The remote fetch asks for exactly the profiles requested at load time.
        set_property(bootstrap, CLOUD_CONFIG_PROFILES_PATH, list(context.active_profiles))
        context.bootstrap = bootstrap
        logger.debug("bootstrap_config_loaded", config=bootstrap)

    async def _local_stage(self, context: ResolutionContext) -> None:
        context.stage = PipelineStage.LOCAL
        local = await load_application_config(self._options.config_path, context.active_profiles)
        context.local = local
        logger.debug("application_config_loaded", config=local)

        name = get_property(local, CLOUD_CONFIG_NAME_PATH)
        if name:
            set_property(context.bootstrap, CLOUD_CONFIG_NAME_PATH, name)

    async def _remote_stage(self, context: ResolutionContext) -> None:
        context.stage = PipelineStage.REMOTE
        context.remote = await self.read_remote_config(context.bootstrap)
        logger.debug("remote_config_loaded", config=context.remote)

    def _compose_stage(self, context: ResolutionContext) -> None:
        context.stage = PipelineStage.COMPOSE
        context.composed = merge_properties([context.bootstrap, context.local, context.remote])
        logger.debug("config_composed", config=context.composed)

    async def read_remote_config(self, bootstrap: dict[str, Any]) -> dict[str, Any]:
        """Fetch remote properties described by the bootstrap config.

        Never raises: any failure is logged and yields an empty property set.
        """
        section = get_property(bootstrap, CLOUD_CONFIG_PATH)
        if not isinstance(section, dict) or not section.get("enabled"):
            return {}

        try:
            options = RemoteConfigOptions.model_validate(section)
            logger.debug("remote_config_options", options=options.model_dump())
            properties = await self._fetcher.fetch(options)
        except Exception as e:
            REMOTE_FETCH_ERRORS.inc()
            logger.error("remote_fetch_failed", error=str(e), error_type=type(e).__name__)
            return {}

        if not properties:
            return {}
        return expand_properties(flatten_properties(properties))
