"""OAuth 2.1 token endpoint service.

Implements the RFC 6749 authorization code exchange with PKCE (RFC 7636).
Client authentication follows the same selector as PAR requests.
"""

from __future__ import annotations

import logging

from pkce_oidc.models.errors import ProtocolError
from pkce_oidc.models.tokens import TokenRequest, TokenResponse
from pkce_oidc.primitives.transport import JsonFetcher

logger = logging.getLogger(__name__)


class TokenClient:
    """Exchanges authorization codes for tokens.

    Uses application/x-www-form-urlencoded encoding as required by OAuth 2.1.
    """

    def __init__(self, fetcher: JsonFetcher | None = None, timeout: float = 30.0):
        """Initialize the token client.

        Args:
            fetcher: Shared JSON transport; created when omitted
            timeout: HTTP request timeout in seconds for a created fetcher
        """
        self._fetcher = fetcher or JsonFetcher(timeout=timeout)

    async def fetch_token(self, token_request: TokenRequest) -> TokenResponse:
        """Exchange an authorization code for tokens.

        Args:
            token_request: Token exchange request parameters

        Returns:
            TokenResponse: Validated token response

        Raises:
            TransportError: On network failure, non-2xx status or a response
                missing access_token/token_type
            ProtocolError: If a 2xx response carries an error member
        """
        logger.debug(f"Exchanging authorization code at {token_request.token_endpoint}")

        form_data, headers = token_request.to_form_request()

        # Log request details (without sensitive data)
        logger.debug(
            f"Token request: grant_type={form_data['grant_type']}, "
            f"client_id={token_request.client_auth.client_id}, "
            f"basic_auth={'Authorization' in headers}"
        )

        response = await self._fetcher.fetch_json(
            token_request.token_endpoint,
            TokenResponse,
            method="POST",
            headers=headers,
            body=form_data,
        )

        if response.error:
            raise ProtocolError(
                f"Token error: {response.error} {response.error_description}"
            )

        logger.info("Token exchange successful")
        return response

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._fetcher.close()
