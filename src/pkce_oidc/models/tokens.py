"""Token endpoint models for OAuth 2.1 / OpenID Connect.

Contains the token request, the token response schema and the result
of ID token validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from pkce_oidc.models.security import ClientAuth
from pkce_oidc.primitives.params import apply_additional_params, apply_client_auth


@dataclass(frozen=True)
class TokenRequest:
    """Authorization code exchange request (RFC 6749 Section 4.1.3).

    Includes the PKCE code_verifier (RFC 7636). Client authentication is
    applied through the same selector used for PAR requests.
    """

    # Required fields first
    token_endpoint: str
    code: str
    redirect_uri: str
    code_verifier: str
    client_auth: ClientAuth

    # Optional fields with defaults last
    grant_type: str = "authorization_code"
    additional_params: dict[str, str] = field(default_factory=dict, compare=False)

    def to_form_request(self) -> tuple[dict[str, str], dict[str, str]]:
        """Build the form body and headers for the token endpoint.

        Token requests must use form encoding, not JSON (RFC 6749 Section 4.1.3).

        Returns:
            Tuple of (form_data, headers)
        """
        data = {
            "grant_type": self.grant_type,
            "code": self.code,
            "code_verifier": self.code_verifier,
            "redirect_uri": self.redirect_uri,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        apply_client_auth(data, headers, self.client_auth)
        apply_additional_params(data, self.additional_params)

        return data, headers


class TokenResponse(BaseModel):
    """Successful token endpoint response (RFC 6749 Section 5.1, OIDC Core 3.1.3.3).

    Members not declared here are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str | None = None

    # Some servers echo error members on 200 responses
    error: str | None = None
    error_description: str | None = None


@dataclass(frozen=True)
class IdTokenValidationResult:
    """Claims and protected header of a validated ID token."""

    payload: dict[str, Any]
    protected_header: dict[str, Any]
