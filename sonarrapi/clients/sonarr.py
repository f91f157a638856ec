"""
Sonarr API client.

Async client for the Sonarr v3 REST API. Every call is a single request with
the API key in the X-Api-Key header. Request failures are logged and turned
into a None result (``call_api``) or an ApiResult carrying the typed error
(``request``); missing configuration always raises.
"""

import json
from typing import Any

import httpx

from ..config import Settings
from ..core.models import (
    ApiResult,
    HealthCheck,
    JsonValue,
    RequestDescriptor,
    SeriesDetails,
    Tag,
)
from ..utils.exceptions import (
    NetworkError,
    ResponseDecodeError,
    SonarrApiError,
    TimeoutError,
    parse_api_error,
)
from ..utils.logging import EnhancedStructuredLogger, get_logger


def health_request() -> RequestDescriptor:
    return RequestDescriptor("/health")


def tags_request() -> RequestDescriptor:
    return RequestDescriptor("/tag")


def create_tag_request(label: str) -> RequestDescriptor:
    return RequestDescriptor("/tag", method="POST", body={"label": label})


def series_request(item_id: int) -> RequestDescriptor:
    return RequestDescriptor(f"/series/{item_id}")


class SonarrClient:
    """
    Client for a single Sonarr instance.

    Pass an ``httpx.AsyncClient`` to share a connection pool with the caller,
    or use the client as an async context manager to hold one for its
    lifetime. Otherwise a client is opened and closed around each request.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        logger: EnhancedStructuredLogger | None = None,
        trace_responses: bool | None = None,
    ):
        self.settings = settings
        self._client = client
        self._owns_client = False
        self._logger = logger if logger is not None else get_logger(__name__)
        self.trace_responses = (
            settings.debug if trace_responses is None else trace_responses
        )

    async def __aenter__(self) -> "SonarrClient":
        if self._client is None:
            self._client = self._new_client()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout, follow_redirects=True
        )

    # --- Generic API calls ---

    async def request(self, descriptor: RequestDescriptor) -> ApiResult:
        """
        Send one request to Sonarr and report the outcome.

        Raises:
            ConfigurationError: if the base URL or API key is not configured.
                Raised before any network I/O.
        """
        credentials = self.settings.credentials()
        url = credentials.url_for(descriptor.path)

        should_close_client = self._client is None
        client = self._client or self._new_client()

        try:
            response = await client.request(
                descriptor.method,
                url,
                headers=credentials.headers,
                params=descriptor.query_params or None,
                json=descriptor.body,
            )
            error = self._check_response(response, descriptor)
            if error is None:
                return ApiResult(data=self._decode(response, descriptor))

        except httpx.TimeoutException as e:
            error = TimeoutError(
                f"Request to Sonarr timed out: {e}",
                timeout_duration=self.settings.http_timeout,
                operation=f"{descriptor.method} {descriptor.path}",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = NetworkError(
                f"Failed to reach Sonarr: {e}", host=credentials.base_url
            )
        except ResponseDecodeError as e:
            error = e
        finally:
            if should_close_client:
                await client.aclose()

        self._logger.error(
            "Sonarr request failed",
            error=error,
            method=descriptor.method,
            path=descriptor.path,
            status_code=getattr(error, "status_code", None),
        )
        return ApiResult(error=error)

    async def call_api(self, descriptor: RequestDescriptor) -> JsonValue:
        """Send one request and return the decoded body, or None on failure."""
        result = await self.request(descriptor)
        return result.data

    def _check_response(
        self, response: httpx.Response, descriptor: RequestDescriptor
    ) -> SonarrApiError | None:
        if response.is_success:
            return None
        return parse_api_error(
            response.text,
            response.status_code,
            method=descriptor.method,
            endpoint=descriptor.path,
        )

    @staticmethod
    def _decode(response: httpx.Response, descriptor: RequestDescriptor) -> JsonValue:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(
                f"Sonarr returned a non-JSON body for {descriptor.method} {descriptor.path}",
                content_type=response.headers.get("content-type"),
                body_preview=response.text[:200],
            ) from e

    def trace_response(self, operation: str, data: Any) -> None:
        """Log a decoded response at debug level when tracing is enabled."""
        if self.trace_responses:
            self._logger.debug("Sonarr response", operation=operation, data=data)

    # --- Convenience operations ---

    async def get_health(self) -> list[HealthCheck] | None:
        """Get the health issues currently reported by the server."""
        data = await self.call_api(health_request())
        self.trace_response("get_health", data)
        return data

    async def get_tags(self) -> list[Tag] | None:
        """Get all tags configured on the server."""
        data = await self.call_api(tags_request())
        self.trace_response("get_tags", data)
        return data

    async def create_tag(self, label: str) -> Tag | None:
        """Create a tag and return it with its server-assigned ID."""
        data = await self.call_api(create_tag_request(label))
        self.trace_response("create_tag", data)
        return data

    async def get_media_item(self, item_id: int) -> SeriesDetails | None:
        """Get the full record for one series."""
        data = await self.call_api(series_request(item_id))
        self.trace_response("get_media_item", data)
        return data
