"""Pushed Authorization Request service (RFC 9126)."""

from __future__ import annotations

import logging

from pkce_oidc.models.errors import ProtocolError
from pkce_oidc.models.flow import ParRequest
from pkce_oidc.models.par import ParResponse
from pkce_oidc.primitives.transport import JsonFetcher

logger = logging.getLogger(__name__)


class ParClient:
    """Pushes prepared authorization requests to a PAR endpoint."""

    def __init__(self, fetcher: JsonFetcher | None = None, timeout: float = 30.0):
        self._fetcher = fetcher or JsonFetcher(timeout=timeout)

    async def push_authorization_request(
        self, endpoint: str, par_request: ParRequest
    ) -> ParResponse:
        """POST the prepared request and return the issued ``request_uri``.

        Args:
            endpoint: PAR endpoint URL
            par_request: Body and headers from prepare_par_request

        Returns:
            ParResponse: Response carrying ``request_uri`` and ``expires_in``

        Raises:
            TransportError: If the request fails or the response is invalid
            ProtocolError: If the server answered with an error member
        """
        logger.debug(f"Pushing authorization request to {endpoint}")

        response = await self._fetcher.fetch_json(
            endpoint,
            ParResponse,
            method="POST",
            headers=par_request.headers,
            body=par_request.body,
        )

        if response.error:
            raise ProtocolError(
                f"PAR error: {response.error} {response.error_description}"
            )

        logger.info(f"PAR request accepted, expires in {response.expires_in}s")
        return response

    async def close(self) -> None:
        await self._fetcher.close()
