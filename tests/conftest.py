"""Shared test fixtures for the springconf test suite."""

from collections.abc import Callable, Generator
from pathlib import Path
from textwrap import dedent

import pytest

from springconf.remote.mock import MockRemoteFetcher

BOOTSTRAP_YAML = """
spring:
  cloud:
    config:
      enabled: false
      name: orders
"""

APPLICATION_YAML = """
server:
  port: 8080
app.feature.enabled: false
"""


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def write_yaml(config_dir: Path) -> Callable[..., None]:
    """Factory fixture to create YAML files in the test config directory.

    Usage:
        def test_something(write_yaml):
            write_yaml({
                "application.yml": "server.port: 8080",
                "application-dev.yml": "server.port: 9090",
            })
    """

    def _write_yaml(files: dict[str, str], directory: Path | None = None) -> None:
        target = directory or config_dir
        for filename, content in files.items():
            (target / filename).write_text(dedent(content), encoding="utf-8")

    return _write_yaml


@pytest.fixture
def standard_files(write_yaml: Callable[..., None]) -> None:
    """Write a minimal bootstrap.yml and application.yml."""
    write_yaml({"bootstrap.yml": BOOTSTRAP_YAML, "application.yml": APPLICATION_YAML})


@pytest.fixture
def fetcher() -> MockRemoteFetcher:
    """Create a mock remote fetcher returning no properties."""
    return MockRemoteFetcher()


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from springconf.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
