"""RapidAPI people-search client built on httpx.

Raw request/response wrapper only. Status-code failures are translated into
the pipeline error taxonomy; nothing is retried here.
"""

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from candidate_discovery.core.config import UpstreamConfig, UpstreamCredentials
from candidate_discovery.core.errors import (
    FetchFailed,
    InitiateRejected,
    StatusCheckFailed,
    UpstreamUnavailable,
)
from candidate_discovery.core.schemas import SearchRequest, SearchResults, SearchStatus
from candidate_discovery.upstream.base import SearchUpstream

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search-employees"
STATUS_PATH = "/check-search-status"
RESULTS_PATH = "/get-search-results"


class RapidApiSearchClient(SearchUpstream):
    """Async context manager that owns one httpx.AsyncClient.

    Usage::

        async with RapidApiSearchClient(credentials) as client:
            handle = await client.initiate(request)
    """

    def __init__(
        self,
        credentials: UpstreamCredentials,
        config: UpstreamConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._config = config or UpstreamConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "RapidApiSearchClient not entered - use 'async with'"
            raise RuntimeError(msg)
        return self._client

    async def __aenter__(self) -> "RapidApiSearchClient":
        self._client = httpx.AsyncClient(
            base_url=f"https://{self._credentials.host}",
            headers={
                "x-rapidapi-host": self._credentials.host,
                "x-rapidapi-key": self._credentials.api_key,
            },
            timeout=self._config.request_timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def initiate(self, request: SearchRequest) -> str:
        response = await self._send("POST", SEARCH_PATH, json=request.to_upstream_body())
        if response.is_error:
            raise InitiateRejected(response.status_code, response.text)
        data = _json_object(response)
        request_id = data.get("request_id") if data is not None else None
        if not request_id:
            raise InitiateRejected(response.status_code, "response missing request_id")
        logger.info("Search initiated with request_id %s", request_id)
        return str(request_id)

    async def check_status(self, handle: str) -> SearchStatus:
        response = await self._send("GET", STATUS_PATH, params={"request_id": handle})
        if response.is_error:
            raise StatusCheckFailed(response.status_code, response.text)
        data = _json_object(response)
        if data is None:
            raise StatusCheckFailed(response.status_code, "response is not a JSON object")
        return SearchStatus.model_validate(data)

    async def fetch_results(self, handle: str) -> SearchResults:
        response = await self._send("GET", RESULTS_PATH, params={"request_id": handle})
        if response.is_error:
            raise FetchFailed(response.status_code, response.text)
        data = _json_object(response)
        if data is None:
            raise FetchFailed(response.status_code, "response is not a JSON object")
        try:
            return SearchResults.model_validate(data)
        except ValidationError as e:
            raise FetchFailed(response.status_code, f"malformed results: {e}") from e

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            msg = f"Upstream unreachable on {method} {path}: {e}"
            raise UpstreamUnavailable(msg) from e


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    """Parse a JSON object body, or None when it is not one."""
    try:
        data = response.json()
    except ValueError:
        logger.debug("Non-JSON body from upstream: %.200s", response.text)
        return None
    return data if isinstance(data, dict) else None
