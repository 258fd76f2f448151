"""Security-related models for OAuth 2.1 authentication.

Contains PKCE parameters and client credentials needed for secure flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PKCEParameters:
    """PKCE (Proof Key for Code Exchange) parameters for OAuth 2.1 security.

    Immutable parameters generated for each authorization flow to prevent
    authorization code interception attacks (RFC 7636). Only the S256
    method exists; OAuth 2.1 forbids plain challenges.
    """

    code_verifier: str = field()
    code_challenge: str = field()
    code_challenge_method: str = field(default="S256")

    def __post_init__(self) -> None:
        if self.code_challenge_method != "S256":
            raise ValueError("Only S256 code challenge method is supported")


@dataclass(frozen=True)
class ClientAuth:
    """Client authentication material for token and PAR requests.

    ``client_secret`` distinguishes "not provided" (``None``) from
    "provided but empty" (``""``); the latter still selects HTTP Basic.
    """

    client_id: str
    client_secret: str | None = None
    client_assertion: str | None = None
    client_assertion_type: str | None = None
