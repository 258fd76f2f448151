"""Tests for provider discovery, key set retrieval and local environment rewriting."""

from unittest.mock import AsyncMock

import pytest

from helpers import json_response
from pkce_oidc.models.discovery import OpenIdConfiguration
from pkce_oidc.models.errors import DiscoveryError, TransportError
from pkce_oidc.models.jwks import EcJwk, RsaJwk
from pkce_oidc.services.discovery import (
    OpenIdDiscovery,
    adapt_for_local_environment,
    is_local_environment,
)
from pkce_oidc.settings import get_settings

PROVIDER_METADATA = {
    "issuer": "https://op.example.com",
    "authorization_endpoint": "https://op.example.com/authorize",
    "token_endpoint": "https://op.example.com/token",
    "jwks_uri": "https://op.example.com/jwks.json",
    "pushed_authorization_request_endpoint": "https://op.example.com/par?tenant=a",
    "scopes_supported": ["openid", "profile"],
}


class TestFetchOpenIdConfiguration:
    def setup_method(self):
        # Arrange
        self.discovery = OpenIdDiscovery()
        self.discovery._fetcher._http_client = AsyncMock()

    async def test_fetches_well_known_document(self):
        # Arrange
        self.discovery._fetcher._http_client.request.return_value = json_response(
            PROVIDER_METADATA
        )

        # Act
        config = await self.discovery.fetch_openid_configuration("https://op.example.com/")

        # Assert
        assert config.issuer == "https://op.example.com"
        assert config.token_endpoint == "https://op.example.com/token"
        assert config.expected_issuer == "https://op.example.com"
        # Unknown members pass through
        assert config.model_extra["scopes_supported"] == ["openid", "profile"]

        call_args = self.discovery._fetcher._http_client.request.call_args
        assert call_args[0] == (
            "GET",
            "https://op.example.com/.well-known/openid-configuration",
        )

    async def test_http_error_becomes_discovery_error(self):
        # Arrange
        self.discovery._fetcher._http_client.request.return_value = json_response(
            {}, status_code=404, reason_phrase="Not Found"
        )

        # Act
        with pytest.raises(DiscoveryError) as exc_info:
            await self.discovery.fetch_openid_configuration("https://op.example.com")

        # Assert
        assert "HTTP 404 Not Found" in str(exc_info.value)
        assert isinstance(exc_info.value, TransportError)

    async def test_invalid_endpoint_url_is_rejected(self):
        # Arrange
        self.discovery._fetcher._http_client.request.return_value = json_response(
            {**PROVIDER_METADATA, "token_endpoint": "not-a-url"}
        )

        # Act / Assert
        with pytest.raises(DiscoveryError, match="Invalid URL: not-a-url"):
            await self.discovery.fetch_openid_configuration("https://op.example.com")

    async def test_missing_required_member_is_rejected(self):
        metadata = {k: v for k, v in PROVIDER_METADATA.items() if k != "jwks_uri"}
        self.discovery._fetcher._http_client.request.return_value = json_response(metadata)

        with pytest.raises(DiscoveryError, match="jwks_uri"):
            await self.discovery.fetch_openid_configuration("https://op.example.com")


class TestFetchJwks:
    def setup_method(self):
        # Arrange
        self.discovery = OpenIdDiscovery()
        self.discovery._fetcher._http_client = AsyncMock()

    async def test_returns_typed_keys(self, ec_signing_key, rsa_signing_key):
        # Arrange
        self.discovery._fetcher._http_client.request.return_value = json_response(
            {"keys": [ec_signing_key.public_jwk, rsa_signing_key.public_jwk]}
        )

        # Act
        keys = await self.discovery.fetch_jwks("https://op.example.com/jwks.json")

        # Assert
        assert [type(key) for key in keys] == [EcJwk, RsaJwk]
        assert [key.kid for key in keys] == ["ec-key", "rsa-key"]

    async def test_unknown_key_type_is_rejected(self):
        self.discovery._fetcher._http_client.request.return_value = json_response(
            {"keys": [{"kty": "oct", "k": "c2VjcmV0"}]}
        )

        with pytest.raises(TransportError):
            await self.discovery.fetch_jwks("https://op.example.com/jwks.json")

    async def test_close(self):
        await self.discovery.close()

        self.discovery._fetcher._http_client.aclose.assert_awaited_once()


class TestLocalEnvironment:
    @pytest.mark.parametrize(
        "issuer, environment, expected",
        [
            ("http://localhost:8080", "test", True),
            ("http://localhost:8080", "development", True),
            ("http://localhost:8080", "production", False),
            ("https://localhost:8080", "test", False),
            ("http://localhost", "test", False),
            ("https://op.example.com", "test", False),
            ("", "test", False),
        ],
    )
    def test_is_local_environment(self, issuer, environment, expected):
        assert is_local_environment(issuer, environment) is expected

    def test_environment_defaults_to_settings(self, monkeypatch):
        # Arrange
        monkeypatch.setenv("OIDC_ENVIRONMENT", "development")
        get_settings.cache_clear()

        try:
            # Act / Assert
            assert is_local_environment("http://localhost:8080")
        finally:
            get_settings.cache_clear()

    def test_endpoints_are_rewritten_onto_local_issuer(self):
        # Arrange
        config = OpenIdConfiguration.model_validate(PROVIDER_METADATA)

        # Act
        adapted = adapt_for_local_environment(config, "http://localhost:8080", "test")

        # Assert
        assert adapted.issuer == "http://localhost:8080"
        assert adapted.original_issuer == "https://op.example.com"
        assert adapted.expected_issuer == "https://op.example.com"
        assert adapted.authorization_endpoint == "http://localhost:8080/authorize"
        assert adapted.token_endpoint == "http://localhost:8080/token"
        assert adapted.jwks_uri == "http://localhost:8080/jwks.json"
        assert (
            adapted.pushed_authorization_request_endpoint
            == "http://localhost:8080/par?tenant=a"
        )
        assert adapted.model_extra["scopes_supported"] == ["openid", "profile"]

    def test_production_configuration_is_untouched(self):
        config = OpenIdConfiguration.model_validate(PROVIDER_METADATA)

        adapted = adapt_for_local_environment(config, "http://localhost:8080", "production")

        assert adapted is config
