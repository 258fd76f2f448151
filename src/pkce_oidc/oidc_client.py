"""Complete OpenID Connect authorization code client.

Coordinates discovery, request preparation (front channel or PAR),
response verification, token exchange and token validation.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

from pkce_oidc.models.discovery import OpenIdConfiguration
from pkce_oidc.models.flow import AuthorizationParams, ExpectedResponseContext
from pkce_oidc.models.security import ClientAuth
from pkce_oidc.models.tokens import IdTokenValidationResult, TokenRequest, TokenResponse
from pkce_oidc.primitives.encoding import ByteSource
from pkce_oidc.primitives.jws import JwsVerifier
from pkce_oidc.primitives.transport import JsonFetcher
from pkce_oidc.services.discovery import OpenIdDiscovery, adapt_for_local_environment
from pkce_oidc.services.flow import AuthorizationFlowManager
from pkce_oidc.services.par import ParClient
from pkce_oidc.services.tokens import TokenClient
from pkce_oidc.services.validation import TokenValidator
from pkce_oidc.settings import get_settings

logger = logging.getLogger(__name__)


class AuthorizationHandler(Protocol):
    """Protocol for handling the user authorization step.

    Allows different strategies for browser interaction:
    - Manual (print URL, paste back the redirect)
    - Browser automation (open browser + local server)
    - Custom UI integration
    """

    async def handle_authorization(self, auth_url: str) -> str:
        """Send the user to ``auth_url`` and return the URL they were redirected to."""
        ...


class ManualAuthorizationHandler:
    """Authorization handler that delegates to a caller-supplied coroutine.

    Suitable for CLI tools where the user pastes the redirected URL.
    """

    def __init__(self, callback_handler: Callable[[str], Awaitable[str]] | None = None):
        """Initialize manual authorization handler.

        Args:
            callback_handler: Coroutine called with the auth URL, returning
                the redirected URL
        """
        self.callback_handler = callback_handler

    async def handle_authorization(self, auth_url: str) -> str:
        """Handle authorization by delegating to callback handler or raising."""
        if self.callback_handler:
            return await self.callback_handler(auth_url)
        raise NotImplementedError(
            f"Please visit {auth_url} and provide the redirected URL"
        )


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of a completed flow."""

    token_response: TokenResponse
    id_token: IdTokenValidationResult | None = None


class OIDCClient:
    """OpenID Connect client for one provider.

    Each call to ``authenticate`` owns its own state, nonce and code
    verifier, so concurrent flows on one client do not interfere.
    """

    def __init__(
        self,
        issuer: str,
        client_auth: ClientAuth,
        redirect_uri: str,
        authorization_handler: AuthorizationHandler | None = None,
        random_bytes: ByteSource = secrets.token_bytes,
        verifier: JwsVerifier | None = None,
        use_par: bool = True,
        environment: str | None = None,
        clock_tolerance: float | None = None,
        timeout: float | None = None,
    ):
        """Initialize the client.

        Args:
            issuer: Provider issuer URL (or the local issuer in tests)
            client_auth: Client credentials
            redirect_uri: Registered redirect URI
            authorization_handler: Handler for the user authorization step
            random_bytes: Source of cryptographically secure random bytes
            verifier: JWS verification capability
            use_par: Push requests when the provider offers a PAR endpoint
            environment: Deployment environment; defaults to settings
            clock_tolerance: Leeway for ID token times; defaults to settings
            timeout: HTTP request timeout; defaults to settings
        """
        settings = get_settings()

        self.issuer = issuer
        self.client_auth = client_auth
        self.redirect_uri = redirect_uri
        self.authorization_handler = (
            authorization_handler or ManualAuthorizationHandler()
        )
        self.use_par = use_par
        self.environment = environment or settings.environment
        self.clock_tolerance = (
            clock_tolerance if clock_tolerance is not None else settings.clock_tolerance
        )

        # Initialize service components over one shared transport
        self._fetcher = JsonFetcher(timeout=timeout or settings.http_timeout)
        self.discovery = OpenIdDiscovery(self._fetcher)
        self.flow_manager = AuthorizationFlowManager(random_bytes)
        self.par_client = ParClient(self._fetcher)
        self.token_client = TokenClient(self._fetcher)
        self.validator = TokenValidator(verifier)

    async def discover(self) -> OpenIdConfiguration:
        """Fetch provider metadata, adapted for a local deployment if needed."""
        config = await self.discovery.fetch_openid_configuration(self.issuer)
        return adapt_for_local_environment(config, self.issuer, self.environment)

    async def authenticate(
        self,
        scope: str = "openid",
        additional_params: Mapping[str, str] | None = None,
    ) -> AuthenticationResult:
        """Run the authorization code flow end to end.

        1. Discover provider configuration
        2. Prepare the authorization request (PAR when available)
        3. Hand the URL to the authorization handler
        4. Verify the redirect and extract the code
        5. Exchange the code for tokens
        6. Validate granted scope and ID token

        Args:
            scope: Space-delimited scope to request
            additional_params: Extension parameters for the authorization request

        Returns:
            AuthenticationResult: Token response and validated ID token

        Raises:
            Various OAuth2Error subclasses if any step fails
        """
        logger.info(f"Starting authorization code flow with {self.issuer}")

        config = await self.discover()
        client_id = self.client_auth.client_id
        authorization_params = AuthorizationParams(
            redirect_uri=self.redirect_uri, scope=scope
        )

        par_endpoint = config.pushed_authorization_request_endpoint
        if self.use_par and par_endpoint:
            logger.debug("Preparing pushed authorization request")
            par_request = self.flow_manager.prepare_par_request(
                self.client_auth, authorization_params, additional_params
            )
            par_response = await self.par_client.push_authorization_request(
                par_endpoint, par_request
            )
            auth_url = par_response.build_authorization_url(
                config.authorization_endpoint, client_id
            )
            bound = par_request
        else:
            logger.debug("Preparing front-channel authorization request")
            auth_request = self.flow_manager.prepare_authorization_request(
                config.authorization_endpoint,
                client_id,
                authorization_params,
                additional_params,
            )
            auth_url = auth_request.url
            bound = auth_request

        logger.debug("Handling user authorization")
        location = await self.authorization_handler.handle_authorization(auth_url)

        code = self.flow_manager.verify_authorization_response(
            location,
            ExpectedResponseContext(
                state=bound.state,
                issuer=config.expected_issuer,
                client_id=client_id,
                redirect_uri=self.redirect_uri,
            ),
        )

        logger.debug("Exchanging authorization code for tokens")
        token_response = await self.token_client.fetch_token(
            TokenRequest(
                token_endpoint=config.token_endpoint,
                code=code,
                redirect_uri=self.redirect_uri,
                code_verifier=bound.code_verifier,
                client_auth=self.client_auth,
            )
        )

        jwks = []
        if token_response.id_token:
            jwks = await self.discovery.fetch_jwks(config.jwks_uri)

        id_token = self.validator.validate_token_response(
            token_response,
            requested_scope=bound.scope,
            jwks=jwks,
            issuer=config.expected_issuer,
            audience=client_id,
            nonce=bound.nonce or "",
            state=bound.state,
            clock_tolerance=self.clock_tolerance,
        )

        logger.info(f"Authorization code flow with {self.issuer} completed")
        return AuthenticationResult(token_response=token_response, id_token=id_token)

    async def close(self) -> None:
        """Close all service connections."""
        await self._fetcher.close()
