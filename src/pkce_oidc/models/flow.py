"""Authorization flow models for OAuth 2.1 / OpenID Connect.

Contains the inputs and outputs of authorization and PAR request
preparation, and the values needed to verify the authorization response.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthorizationParams:
    """Caller-supplied inputs for an authorization or PAR request."""

    redirect_uri: str
    scope: str = "openid"
    response_type: str = "code"


@dataclass(frozen=True)
class PreparedAuthorizationParams:
    """Protocol parameters plus the secrets bound to one authorization attempt.

    ``params`` is insertion ordered; assigning an existing key replaces its
    value in place. ``code_verifier`` and ``state`` are single-use and must be
    kept by the caller until the response is verified and the code exchanged.
    ``nonce`` is only present when the scope contains ``openid``.
    """

    params: dict[str, str] = field(compare=False)
    code_verifier: str
    state: str
    scope: str
    nonce: str | None = None


@dataclass(frozen=True)
class AuthorizationRequest:
    """A ready-to-redirect authorization URL with its bound secrets."""

    url: str
    code_verifier: str
    state: str
    scope: str
    nonce: str | None = None


@dataclass(frozen=True)
class ParRequest:
    """A Pushed Authorization Request body and headers with its bound secrets (RFC 9126)."""

    body: dict[str, str] = field(compare=False)
    headers: dict[str, str] = field(compare=False)
    code_verifier: str
    state: str
    scope: str
    nonce: str | None = None


@dataclass(frozen=True)
class ExpectedResponseContext:
    """Values bound at request time, used to validate the authorization response."""

    state: str
    issuer: str
    client_id: str
    redirect_uri: str


@dataclass(frozen=True)
class AuthorizationResponse:
    """Parameters carried on the redirect back from the authorization server.

    Empty query values are kept as empty strings; absent ones are ``None``.
    """

    code: str | None = None
    state: str | None = None
    iss: str | None = None
    client_id: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    def is_error(self) -> bool:
        return bool(self.error)
