"""Mock remote fetcher for testing."""

from collections.abc import Mapping
from typing import Any

from springconf.remote.base import RemoteConfigOptions


class MockRemoteFetcher:
    """Mock remote config fetcher for testing.

    Returns configurable properties without network access.
    Useful for unit testing and local development.
    """

    def __init__(
        self,
        properties: Mapping[str, Any] | None = None,
        error: BaseException | None = None,
    ):
        """Initialize mock fetcher.

        Args:
            properties: Property set returned from every fetch
            error: Exception raised from every fetch instead
        """
        self._properties = dict(properties or {})
        self._error = error
        self._call_history: list[RemoteConfigOptions] = []

    @property
    def call_history(self) -> list[RemoteConfigOptions]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        """Replace the properties returned by later fetches."""
        self._properties = dict(properties)
        self._error = None

    def set_error(self, error: BaseException | None) -> None:
        """Make later fetches raise the given error."""
        self._error = error

    async def fetch(self, options: RemoteConfigOptions) -> dict[str, Any]:
        """Return the configured properties or raise the configured error."""
        self._call_history.append(options)
        if self._error is not None:
            raise self._error
        return dict(self._properties)
