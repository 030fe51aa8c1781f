"""Remote config sources."""

from springconf.remote.base import RemoteConfigFetcher, RemoteConfigOptions
from springconf.remote.config_server import ConfigServerClient, merge_property_sources
from springconf.remote.mock import MockRemoteFetcher

__all__ = [
    "RemoteConfigFetcher",
    "RemoteConfigOptions",
    "ConfigServerClient",
    "MockRemoteFetcher",
    "merge_property_sources",
]
