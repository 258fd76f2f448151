"""JSON-over-HTTP transport shared by the endpoint services.

Wraps a single ``httpx.AsyncClient``. Every response is checked for a 2xx
status and validated against a pydantic schema. There is no retry here;
failures surface as TransportError carrying the request URL.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pkce_oidc.models.errors import TransportError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonFetcher:
    """Fetches JSON documents and validates them against a response schema."""

    def __init__(self, timeout: float = 30.0):
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds
        """
        self.timeout = timeout
        self._http_client = httpx.AsyncClient(timeout=timeout)

    async def fetch_json(
        self,
        url: str,
        schema: type[ModelT],
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, str] | None = None,
    ) -> ModelT:
        """Send a request and parse the JSON response into ``schema``.

        Args:
            url: Request URL
            schema: Pydantic model the response must satisfy
            method: HTTP method
            headers: Extra request headers
            body: Form fields, sent application/x-www-form-urlencoded

        Returns:
            The validated response model

        Raises:
            TransportError: On network failure, non-2xx status, malformed
                JSON or schema violation
        """
        request_headers = {"Accept": "application/json", **(headers or {})}

        logger.debug(f"{method} {url}")

        try:
            response = await self._http_client.request(
                method,
                url,
                headers=request_headers,
                data=dict(body) if body is not None else None,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch from {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"{method} {url} returned {response.status_code}")
            raise TransportError(
                f"HTTP {response.status_code} {response.reason_phrase}: "
                f"Failed to fetch from {url}"
            )

        try:
            return schema.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Failed to fetch from {url}: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._http_client.aclose()
