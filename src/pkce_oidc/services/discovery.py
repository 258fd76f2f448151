"""OpenID Provider discovery and key set retrieval.

Fetches ``/.well-known/openid-configuration`` and the provider JWKS, and
rewrites provider endpoints onto a local issuer when running against a
local test deployment.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from pkce_oidc.models.discovery import OpenIdConfiguration
from pkce_oidc.models.errors import DiscoveryError, TransportError
from pkce_oidc.models.jwks import EcJwk, JwksResponse, OkpJwk, RsaJwk
from pkce_oidc.primitives.transport import JsonFetcher
from pkce_oidc.primitives.urls import concat_url_paths
from pkce_oidc.settings import get_settings

logger = logging.getLogger(__name__)

OPENID_CONFIGURATION_PATH = "/.well-known/openid-configuration"

_LOCAL_ENVIRONMENTS = ("test", "development")


def is_local_environment(issuer: str, environment: str | None = None) -> bool:
    """Check whether ``issuer`` points at a local deployment in a local environment.

    Args:
        issuer: Issuer URL
        environment: Deployment environment; read from settings when omitted
    """
    if not issuer or not isinstance(issuer, str):
        return False

    if environment is None:
        environment = get_settings().environment

    return (
        issuer.strip().startswith("http://localhost:")
        and environment in _LOCAL_ENVIRONMENTS
    )


def adapt_for_local_environment(
    config: OpenIdConfiguration, issuer: str, environment: str | None = None
) -> OpenIdConfiguration:
    """Point every provider endpoint at ``issuer`` when running locally.

    Path and query of each ``*_endpoint`` / ``*_uri`` member are kept, the
    origin is replaced. The provider's own issuer is preserved in
    ``original_issuer`` so authorization responses can still be checked
    against it.
    """
    if not is_local_environment(issuer, environment):
        return config

    adapted: dict[str, object] = {}
    for key, value in config.model_dump().items():
        if (key.endswith("_endpoint") or key.endswith("_uri")) and isinstance(value, str):
            parts = urlsplit(value)
            path = f"{parts.path}?{parts.query}" if parts.query else parts.path
            adapted[key] = urljoin(issuer, path)
        elif key == "issuer":
            adapted["issuer"] = issuer
            if value != issuer:
                adapted["original_issuer"] = value
        elif key == "original_issuer":
            adapted.setdefault(key, value)
        else:
            adapted[key] = value

    logger.debug(f"Adapted OpenID configuration for local issuer {issuer}")
    return OpenIdConfiguration.model_validate(adapted)


class OpenIdDiscovery:
    """Fetches OpenID Provider metadata and signing keys."""

    def __init__(self, fetcher: JsonFetcher | None = None, timeout: float = 30.0):
        """Initialize discovery.

        Args:
            fetcher: Shared JSON transport; created when omitted
            timeout: HTTP request timeout in seconds for a created fetcher
        """
        self._fetcher = fetcher or JsonFetcher(timeout=timeout)

    async def fetch_openid_configuration(self, issuer: str) -> OpenIdConfiguration:
        """Fetch the provider configuration document for ``issuer``.

        Raises:
            DiscoveryError: If the document cannot be fetched or is invalid
        """
        url = concat_url_paths(issuer, OPENID_CONFIGURATION_PATH)
        try:
            config = await self._fetcher.fetch_json(url, OpenIdConfiguration)
        except TransportError as e:
            raise DiscoveryError(str(e)) from e

        logger.info(f"Discovered OpenID configuration for {config.issuer}")
        return config

    async def fetch_jwks(self, jwks_uri: str) -> list[RsaJwk | EcJwk | OkpJwk]:
        """Fetch the provider's JSON Web Key Set.

        Raises:
            TransportError: If the key set cannot be fetched or is invalid
        """
        response = await self._fetcher.fetch_json(jwks_uri, JwksResponse)
        logger.debug(f"Fetched {len(response.keys)} JWK(s) from {jwks_uri}")
        return response.keys

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._fetcher.close()
