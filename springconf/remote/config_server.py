"""Spring Cloud Config Server client.

Fetches a Spring Environment document:

    GET {endpoint}/{name}/{profiles}[/{label}]

    {
        "name": "orders",
        "profiles": ["dev"],
        "label": "main",
        "propertySources": [
            {"name": "orders-dev.yml", "source": {"db.url": "..."}},
            {"name": "orders.yml", "source": {"db.url": "...", "db.pool": 5}}
        ]
    }

Property sources are listed highest precedence first.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from springconf.errors import RemoteFetchError
from springconf.observability.logging import get_logger
from springconf.remote.base import RemoteConfigOptions

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "http://localhost:8888"


def merge_property_sources(environment: Mapping[str, Any]) -> dict[str, Any]:
    """Collapse a Spring Environment's property sources into one flat mapping.

    Raises:
        RemoteFetchError: If the payload isn't a Spring Environment
    """
    sources = environment.get("propertySources")
    if not isinstance(sources, list):
        raise RemoteFetchError("Config server response has no propertySources", details=environment)

    properties: dict[str, Any] = {}
    for source in reversed(sources):
        values = source.get("source") if isinstance(source, Mapping) else None
        if not isinstance(values, Mapping):
            raise RemoteFetchError("Malformed property source in config server response", details=source)
        properties.update(values)
    return properties


class ConfigServerClient:
    """Async client for a Spring Cloud Config Server.

    Attributes:
        default_endpoint: Server URL used when the options carry none
    """

    def __init__(
        self,
        default_endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            default_endpoint: Server URL used when options.endpoint is unset
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests inject a MockTransport here)
        """
        self.default_endpoint = default_endpoint.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "ConfigServerClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, options: RemoteConfigOptions) -> str:
        """Build the environment URL for the given options."""
        endpoint = (options.endpoint or self.default_endpoint).rstrip("/")
        profiles = ",".join(options.profiles) or "default"
        url = f"{endpoint}/{quote(options.name, safe='')}/{quote(profiles, safe=',')}"
        if options.label:
            url = f"{url}/{quote(options.label, safe='')}"
        return url

    async def fetch(self, options: RemoteConfigOptions) -> dict[str, Any]:
        """Fetch the flat property set for the application and profiles.

        Raises:
            RemoteFetchError: On transport errors, non-2xx responses or
                malformed payloads
        """
        url = self.build_url(options)
        logger.debug("config_server_request", url=url)

        try:
            response = await self._client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"Config server request failed: {e}") from e

        if response.status_code >= 400:
            raise RemoteFetchError(
                f"Config server returned HTTP {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            environment = response.json()
        except ValueError as e:
            raise RemoteFetchError(
                "Config server returned invalid JSON",
                status_code=response.status_code,
            ) from e

        if not isinstance(environment, Mapping):
            raise RemoteFetchError("Config server response is not an object", details=environment)

        properties = merge_property_sources(environment)
        logger.debug(
            "config_server_response",
            url=url,
            version=environment.get("version"),
            source_count=len(environment["propertySources"]),
            key_count=len(properties),
        )
        return properties
