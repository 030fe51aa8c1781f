"""Configuration model exports.

    from springconf.config.models import LoadOptions, WatchConfig
"""

from springconf.config.models.options import LEVEL_ALIASES, LoadOptions
from springconf.config.models.runtime import (
    LogFormat,
    LoggingConfig,
    RemoteClientConfig,
    WatchConfig,
)

__all__ = [
    "LoadOptions",
    "LEVEL_ALIASES",
    "LogFormat",
    "LoggingConfig",
    "RemoteClientConfig",
    "WatchConfig",
]
