"""springconf - Spring Cloud Config style configuration for Python applications.

Merges bootstrap.yml, profile-aware application YAML and a remote Spring
Cloud Config Server into one property tree, and optionally keeps it fresh
by polling.
"""

from springconf.client import SpringCloudConfig, load_config
from springconf.config.models import LoadOptions
from springconf.errors import (
    ConfigParseError,
    InvalidOptionsError,
    ProfileOverlayError,
    RemoteFetchError,
    ResolutionError,
    SourceUnavailableError,
    SpringConfError,
)
from springconf.events import ConfigEvent
from springconf.remote import ConfigServerClient, RemoteConfigFetcher, RemoteConfigOptions

__version__ = "2.0.0"

__all__ = [
    # Main API
    "SpringCloudConfig",
    "load_config",
    "LoadOptions",
    "ConfigEvent",
    # Remote
    "ConfigServerClient",
    "RemoteConfigFetcher",
    "RemoteConfigOptions",
    # Exceptions
    "SpringConfError",
    "InvalidOptionsError",
    "SourceUnavailableError",
    "ConfigParseError",
    "ProfileOverlayError",
    "RemoteFetchError",
    "ResolutionError",
]
