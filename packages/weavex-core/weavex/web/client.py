"""HTTP client for the hosted web search / fetch API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from weavex.config import WebConfig
from weavex.errors import ApiError, MalformedResponse, WebRequestError
from weavex.models.web import FetchResponse, SearchResponse

logger = logging.getLogger(__name__)

_ResponseT = TypeVar("_ResponseT", bound=BaseModel)


class WebClient:
    """Sync httpx client for ``/web_search`` and ``/web_fetch``.

    Usage::

        with WebClient(WebConfig.from_env()) as client:
            hits = client.search("rust async runtimes", max_results=5)
            page = client.fetch(hits.results[0].url)
    """

    def __init__(self, config: WebConfig, transport: httpx.BaseTransport | None = None) -> None:
        self._config = config
        self._client = httpx.Client(
            timeout=config.timeout,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @property
    def config(self) -> WebConfig:
        return self._config

    def search(self, query: str, max_results: int | None = None) -> SearchResponse:
        """Run a web search.

        *max_results* falls back to the configured default; when both are
        unset the server decides.
        """
        payload: dict[str, Any] = {"query": query}
        limit = max_results if max_results is not None else self._config.max_results
        if limit is not None:
            payload["max_results"] = limit
        return self._post("web_search", payload, SearchResponse)

    def fetch(self, url: str) -> FetchResponse:
        """Fetch a page and return its extracted title, text and links."""
        return self._post("web_fetch", {"url": url}, FetchResponse)

    def _post(self, endpoint: str, payload: dict[str, Any], model: type[_ResponseT]) -> _ResponseT:
        url = f"{self._config.base_url}/{endpoint}"
        logger.debug("Sending %s request to: %s", endpoint, url)

        try:
            response = self._client.post(url, json=payload)
        except httpx.TransportError as exc:
            raise WebRequestError(f"HTTP request failed: {exc}") from exc

        if response.is_error:
            raise ApiError(response.status_code, response.text or "Unknown error")

        # Decode, JSON and validation failures are all ValueError subclasses
        try:
            return model.model_validate(response.json())
        except ValueError as exc:
            raise MalformedResponse(f"Failed to parse {endpoint} response: {exc}") from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> WebClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
