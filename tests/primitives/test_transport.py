"""Tests for the JSON transport: status, JSON and schema failures map to TransportError."""

from unittest.mock import AsyncMock

import httpx
import pytest

from helpers import json_response
from pkce_oidc.models.errors import TransportError
from pkce_oidc.models.par import ParResponse
from pkce_oidc.models.tokens import TokenResponse
from pkce_oidc.primitives.transport import JsonFetcher


class TestJsonFetcher:
    def setup_method(self):
        # Arrange
        self.fetcher = JsonFetcher(timeout=5.0)
        self.fetcher._http_client = AsyncMock()

    async def test_get_parses_response_into_schema(self):
        # Arrange
        self.fetcher._http_client.request.return_value = json_response(
            {"request_uri": "urn:example:abc", "expires_in": 60}
        )

        # Act
        result = await self.fetcher.fetch_json("https://op.example.com/par", ParResponse)

        # Assert
        assert isinstance(result, ParResponse)
        assert result.request_uri == "urn:example:abc"

        call_args = self.fetcher._http_client.request.call_args
        assert call_args[0] == ("GET", "https://op.example.com/par")
        assert call_args[1]["headers"] == {"Accept": "application/json"}
        assert call_args[1]["data"] is None

    async def test_post_sends_form_body_and_merged_headers(self):
        # Arrange
        self.fetcher._http_client.request.return_value = json_response(
            {"request_uri": "urn:example:abc", "expires_in": 60}
        )

        # Act
        await self.fetcher.fetch_json(
            "https://op.example.com/par",
            ParResponse,
            method="POST",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            body={"client_id": "client-123"},
        )

        # Assert
        call_args = self.fetcher._http_client.request.call_args
        assert call_args[0][0] == "POST"
        assert call_args[1]["headers"] == {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        assert call_args[1]["data"] == {"client_id": "client-123"}

    async def test_network_failure(self):
        # Arrange
        self.fetcher._http_client.request.side_effect = httpx.ConnectError("refused")

        # Act / Assert
        with pytest.raises(TransportError, match="Failed to fetch from https://op.example.com/x"):
            await self.fetcher.fetch_json("https://op.example.com/x", ParResponse)

    async def test_non_2xx_status(self):
        # Arrange
        self.fetcher._http_client.request.return_value = json_response(
            {"error": "server_error"}, status_code=503, reason_phrase="Service Unavailable"
        )

        # Act
        with pytest.raises(TransportError) as exc_info:
            await self.fetcher.fetch_json("https://op.example.com/x", ParResponse)

        # Assert
        assert str(exc_info.value) == (
            "HTTP 503 Service Unavailable: Failed to fetch from https://op.example.com/x"
        )

    async def test_malformed_json(self):
        # Arrange
        response = json_response(None)
        response.json.side_effect = ValueError("Expecting value")
        self.fetcher._http_client.request.return_value = response

        # Act / Assert
        with pytest.raises(TransportError, match="Failed to fetch"):
            await self.fetcher.fetch_json("https://op.example.com/x", ParResponse)

    async def test_schema_violation(self):
        # Arrange - token responses require access_token and token_type
        self.fetcher._http_client.request.return_value = json_response(
            {"token_type": "Bearer"}
        )

        # Act / Assert
        with pytest.raises(TransportError, match="access_token"):
            await self.fetcher.fetch_json("https://op.example.com/token", TokenResponse)

    async def test_close_closes_http_client(self):
        await self.fetcher.close()

        self.fetcher._http_client.aclose.assert_awaited_once()
