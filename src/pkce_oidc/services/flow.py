"""OAuth 2.1 authorization flow service.

Builds authorization and Pushed Authorization Requests with PKCE, state
and nonce, and verifies the redirect that comes back against the values
bound at request time.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Mapping
from urllib.parse import SplitResult, parse_qs, urlencode, urlunsplit

from pkce_oidc.models.errors import (
    BindingMismatchError,
    MissingFieldError,
    ProtocolError,
    StateValidationError,
)
from pkce_oidc.models.flow import (
    AuthorizationParams,
    AuthorizationRequest,
    AuthorizationResponse,
    ExpectedResponseContext,
    ParRequest,
)
from pkce_oidc.models.security import ClientAuth
from pkce_oidc.primitives.encoding import ByteSource
from pkce_oidc.primitives.params import (
    apply_additional_params,
    apply_client_auth,
    prepare_authorization_params,
)
from pkce_oidc.primitives.urls import origin_and_path, parse_url, validate_issuer

logger = logging.getLogger(__name__)


class AuthorizationFlowManager:
    """Prepares authorization requests and verifies authorization responses.

    Holds no per-flow state: every prepared request returns its own secrets,
    and the caller hands the matching ExpectedResponseContext back for
    verification. Concurrent flows are independent as long as each keeps
    its own request object.
    """

    def __init__(self, random_bytes: ByteSource = secrets.token_bytes):
        """Initialize the flow manager.

        Args:
            random_bytes: Source of cryptographically secure random bytes
        """
        self._random_bytes = random_bytes

    def prepare_authorization_request(
        self,
        endpoint: str,
        client_id: str,
        authorization_params: AuthorizationParams,
        additional_params: Mapping[str, str] | None = None,
    ) -> AuthorizationRequest:
        """Build a front-channel authorization URL.

        Any query string already on ``endpoint`` is replaced.

        Args:
            endpoint: Authorization endpoint URL
            client_id: Client identifier
            authorization_params: Redirect URI, scope and response type
            additional_params: Extension parameters, applied last

        Returns:
            AuthorizationRequest: URL plus the secrets to keep for this flow

        Raises:
            MalformedInputError: If the endpoint is not a valid URL
        """
        endpoint_parts = parse_url(endpoint, "authorization endpoint")
        prepared = prepare_authorization_params(authorization_params, self._random_bytes)

        params = prepared.params
        params["client_id"] = client_id
        apply_additional_params(params, additional_params)

        url = urlunsplit(endpoint_parts._replace(query=urlencode(params)))

        logger.info(f"Prepared authorization request for client {client_id}")

        return AuthorizationRequest(
            url=url,
            code_verifier=prepared.code_verifier,
            state=prepared.state,
            scope=prepared.scope,
            nonce=prepared.nonce,
        )

    def prepare_par_request(
        self,
        client_auth: ClientAuth,
        authorization_params: AuthorizationParams,
        additional_params: Mapping[str, str] | None = None,
    ) -> ParRequest:
        """Build the body and headers for a Pushed Authorization Request (RFC 9126).

        Args:
            client_auth: Client credentials for the PAR endpoint
            authorization_params: Redirect URI, scope and response type
            additional_params: Extension parameters, applied last

        Returns:
            ParRequest: Form body, headers and the secrets to keep for this flow
        """
        prepared = prepare_authorization_params(authorization_params, self._random_bytes)

        body = prepared.params
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        apply_client_auth(body, headers, client_auth)
        apply_additional_params(body, additional_params)

        logger.info(f"Prepared PAR request for client {client_auth.client_id}")

        return ParRequest(
            body=body,
            headers=headers,
            code_verifier=prepared.code_verifier,
            state=prepared.state,
            scope=prepared.scope,
            nonce=prepared.nonce,
        )

    def verify_authorization_response(
        self, location: str, expected: ExpectedResponseContext
    ) -> str:
        """Verify the redirect from the authorization server and extract the code.

        Checks run in a fixed order and stop at the first failure: URL
        syntax, error response, redirect URI, state, code, issuer (RFC 9207,
        only when present), client_id (only when present).

        Args:
            location: Full URL the user agent was redirected to
            expected: Values bound when the request was made

        Returns:
            The authorization code

        Raises:
            MalformedInputError: If either URL cannot be parsed
            ProtocolError: If the server returned an error
            BindingMismatchError: If redirect URI, issuer or client_id differ
            StateValidationError: If the state differs
            MissingFieldError: If state or code is missing
        """
        location_parts = parse_url(location, "location URL")
        expected_parts = parse_url(expected.redirect_uri, "expected redirect URI")

        response = self._parse_callback_url(location_parts)

        if response.is_error():
            logger.warning(
                f"Authorization response contained error: {response.error} - "
                f"{response.error_description}"
            )
            description = response.error_description
            see_also = f" See: {response.error_uri}" if response.error_uri else ""
            raise ProtocolError(
                f"Authorization error: {response.error} "
                f"{description if description is not None else 'null'}{see_also}"
            )

        received_origin, received_path = origin_and_path(location_parts)
        expected_origin, expected_path = origin_and_path(expected_parts)
        if (received_origin, received_path) != (expected_origin, expected_path):
            raise BindingMismatchError(
                f'Redirect URI mismatch: received "{received_origin}{received_path}" '
                f'but expected "{expected_origin}{expected_path}"'
            )

        if not response.state:
            raise MissingFieldError("State is missing in the authorization response")

        if response.state != expected.state:
            raise StateValidationError(
                f'State mismatch: received "{response.state}" '
                f'but expected "{expected.state}"'
            )

        if not response.code:
            raise MissingFieldError("Code is missing in the authorization response")

        if response.iss:
            validate_issuer(response.iss, expected.issuer)

        if response.client_id and response.client_id != expected.client_id:
            raise BindingMismatchError(
                f'Client ID mismatch: received "{response.client_id}" '
                f'but expected "{expected.client_id}"'
            )

        logger.info("Authorization response verified - received authorization code")
        return response.code

    def _parse_callback_url(self, parts: SplitResult) -> AuthorizationResponse:
        """Extract the response parameters from the callback query string."""
        query_params = parse_qs(parts.query, keep_blank_values=True)

        def get_single_param(key: str) -> str | None:
            values = query_params.get(key, [])
            return values[0] if values else None

        return AuthorizationResponse(
            code=get_single_param("code"),
            state=get_single_param("state"),
            iss=get_single_param("iss"),
            client_id=get_single_param("client_id"),
            error=get_single_param("error"),
            error_description=get_single_param("error_description"),
            error_uri=get_single_param("error_uri"),
        )
