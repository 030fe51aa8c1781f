"""Unit tests for the resolution pipeline."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from springconf.config.models import LoadOptions
from springconf.errors import (
    ConfigParseError,
    RemoteFetchError,
    ResolutionError,
    SourceUnavailableError,
)
from springconf.pipeline import PipelineStage, ResolutionPipeline
from springconf.remote.mock import MockRemoteFetcher

REMOTE_BOOTSTRAP_YAML = """
spring:
  cloud:
    config:
      enabled: true
      name: orders
      endpoint: http://config:8888
server.port: 1000
"""


def make_options(config_dir: Path, profiles: list[str], **kwargs) -> LoadOptions:
    return LoadOptions(config_path=config_dir, active_profiles=profiles, **kwargs)


@pytest.mark.asyncio
class TestResolutionPipeline:
    """Test suite for ResolutionPipeline."""

    async def test_bootstrap_receives_active_profiles(
        self, config_dir: Path, standard_files: None, fetcher: MockRemoteFetcher
    ) -> None:
        context = await ResolutionPipeline(make_options(config_dir, ["dev", "east"]), fetcher).run()

        assert context.bootstrap["spring"]["cloud"]["config"]["profiles"] == ["dev", "east"]
        assert context.stage == PipelineStage.COMPOSE

    async def test_profiles_injected_when_bootstrap_has_no_cloud_section(
        self, config_dir: Path, write_yaml: Callable[..., None], fetcher: MockRemoteFetcher
    ) -> None:
        write_yaml({"bootstrap.yml": "app: 1\n", "application.yml": "b: 2\n"})
        context = await ResolutionPipeline(make_options(config_dir, ["dev"]), fetcher).run()
        assert context.composed == {
            "app": 1,
            "spring": {"cloud": {"config": {"profiles": ["dev"]}}},
            "b": 2,
        }

    async def test_remote_disabled_skips_fetch(
        self, config_dir: Path, standard_files: None, fetcher: MockRemoteFetcher
    ) -> None:
        context = await ResolutionPipeline(make_options(config_dir, []), fetcher).run()

        assert fetcher.call_history == []
        assert context.remote == {}
        assert context.composed == {
            "spring": {"cloud": {"config": {"enabled": False, "name": "orders", "profiles": []}}},
            "server": {"port": 8080},
            "app": {"feature": {"enabled": False}},
        }

    async def test_layers_compose_with_remote_highest(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({
            "bootstrap.yml": REMOTE_BOOTSTRAP_YAML,
            "application.yml": "server.port: 2000\nserver.host: local\nlocal.only: true\n",
        })
        fetcher = MockRemoteFetcher({"server.port": 3000, "remote.only": "yes"})

        context = await ResolutionPipeline(make_options(config_dir, ["dev"]), fetcher).run()

        assert context.composed["server"] == {"port": 3000, "host": "local"}
        assert context.composed["local"] == {"only": True}
        assert context.composed["remote"] == {"only": "yes"}
        assert context.remote == {"server": {"port": 3000}, "remote": {"only": "yes"}}

    async def test_remote_options_built_from_bootstrap(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({"bootstrap.yml": REMOTE_BOOTSTRAP_YAML, "application.yml": "a: 1\n"})
        fetcher = MockRemoteFetcher()

        await ResolutionPipeline(make_options(config_dir, ["dev", "east"]), fetcher).run()

        [options] = fetcher.call_history
        assert options.enabled is True
        assert options.name == "orders"
        assert options.profiles == ["dev", "east"]
        assert options.endpoint == "http://config:8888"

    async def test_local_name_overrides_remote_name(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({
            "bootstrap.yml": REMOTE_BOOTSTRAP_YAML,
            "application.yml": "spring.cloud.config.name: billing\n",
        })
        fetcher = MockRemoteFetcher()

        context = await ResolutionPipeline(make_options(config_dir, []), fetcher).run()

        assert fetcher.call_history[0].name == "billing"
        assert context.bootstrap["spring"]["cloud"]["config"]["name"] == "billing"

    async def test_remote_failure_degrades_to_local(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({
            "bootstrap.yml": REMOTE_BOOTSTRAP_YAML,
            "application.yml": "server.host: local\n",
        })
        failing = MockRemoteFetcher(error=RemoteFetchError("config server down"))
        context = await ResolutionPipeline(make_options(config_dir, []), failing).run()

        assert context.remote == {}
        assert context.composed == {
            "spring": {
                "cloud": {
                    "config": {
                        "enabled": True,
                        "name": "orders",
                        "endpoint": "http://config:8888",
                        "profiles": [],
                    }
                }
            },
            "server": {"port": 1000, "host": "local"},
        }

    async def test_unexpected_fetch_exception_degrades(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({"bootstrap.yml": REMOTE_BOOTSTRAP_YAML, "application.yml": "a: 1\n"})
        failing = MockRemoteFetcher(error=RuntimeError("boom"))

        context = await ResolutionPipeline(make_options(config_dir, []), failing).run()

        assert context.remote == {}
        assert context.composed["a"] == 1

    async def test_nested_remote_payload_expanded(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({"bootstrap.yml": REMOTE_BOOTSTRAP_YAML, "application.yml": "a: 1\n"})
        fetcher = MockRemoteFetcher({"db": {"pool.size": 5}, "db.url": "jdbc:x"})

        context = await ResolutionPipeline(make_options(config_dir, []), fetcher).run()

        assert context.remote == {"db": {"pool": {"size": 5}, "url": "jdbc:x"}}

    async def test_missing_bootstrap_fails_in_bootstrap_stage(
        self, config_dir: Path, write_yaml: Callable[..., None], fetcher: MockRemoteFetcher
    ) -> None:
        write_yaml({"application.yml": "a: 1\n"})

        with pytest.raises(ResolutionError) as exc_info:
            await ResolutionPipeline(make_options(config_dir, []), fetcher).run()

        assert exc_info.value.stage == "bootstrap"
        assert isinstance(exc_info.value.cause, SourceUnavailableError)

    async def test_malformed_application_fails_in_local_stage(
        self, config_dir: Path, write_yaml: Callable[..., None], fetcher: MockRemoteFetcher
    ) -> None:
        write_yaml({"bootstrap.yml": "a: 1\n", "application.yml": "b: [unclosed\n"})

        with pytest.raises(ResolutionError) as exc_info:
            await ResolutionPipeline(make_options(config_dir, []), fetcher).run()

        assert exc_info.value.stage == "local"
        assert isinstance(exc_info.value.cause, ConfigParseError)

    async def test_separate_bootstrap_path(
        self, tmp_path: Path, config_dir: Path, write_yaml: Callable[..., None], fetcher: MockRemoteFetcher
    ) -> None:
        bootstrap_dir = tmp_path / "bootstrap"
        bootstrap_dir.mkdir()
        write_yaml({"bootstrap.yml": "origin: bootstrap-dir\n"}, directory=bootstrap_dir)
        write_yaml({"bootstrap.yml": "origin: config-dir\n", "application.yml": "a: 1\n"})

        options = make_options(config_dir, [], bootstrap_path=bootstrap_dir)
        context = await ResolutionPipeline(options, fetcher).run()

        assert context.bootstrap["origin"] == "bootstrap-dir"

    async def test_missing_overlay_still_succeeds(
        self, config_dir: Path, standard_files: None, fetcher: MockRemoteFetcher
    ) -> None:
        context = await ResolutionPipeline(make_options(config_dir, ["qa"]), fetcher).run()
        assert context.composed["server"] == {"port": 8080}

    async def test_repeated_passes_identical(
        self, config_dir: Path, write_yaml: Callable[..., None]
    ) -> None:
        write_yaml({
            "bootstrap.yml": REMOTE_BOOTSTRAP_YAML,
            "application.yml": "server.host: local\nlist: [1, 2]\n",
            "application-dev.yml": "server.host: dev\n",
        })
        fetcher = MockRemoteFetcher({"remote.key": "value"})
        pipeline = ResolutionPipeline(make_options(config_dir, ["dev"]), fetcher)

        first = await pipeline.run()
        second = await pipeline.run()

        assert json.dumps(first.composed) == json.dumps(second.composed)
