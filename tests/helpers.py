import time
from typing import Any

import jwt

ISSUER = "https://op.example.com"
CLIENT_ID = "client-123"
REDIRECT_URI = "https://client.com/callback"


class SequentialBytes:
    """Deterministic ByteSource: the Nth call returns N repeated ``length`` times."""

    def __init__(self):
        self.calls = 0

    def __call__(self, length: int) -> bytes:
        self.calls += 1
        return bytes([self.calls]) * length


class SigningKey:
    """A private key plus its public JWK, used to mint test ID tokens."""

    def __init__(self, private_key: Any, public_jwk: dict[str, Any], algorithm: str):
        self.private_key = private_key
        self.public_jwk = public_jwk
        self.algorithm = algorithm

    @property
    def kid(self) -> str:
        return self.public_jwk["kid"]

    def sign(self, payload: dict[str, Any], headers: dict[str, Any] | None = None) -> str:
        return jwt.encode(
            payload,
            self.private_key,
            algorithm=self.algorithm,
            headers={"kid": self.kid, **(headers or {})},
        )


def id_token_claims(**overrides: Any) -> dict[str, Any]:
    """Valid ID token claims; pass ``name=None`` to drop a claim."""
    now = int(time.time())
    claims = {
        "iss": ISSUER,
        "aud": CLIENT_ID,
        "sub": "user-42",
        "iat": now,
        "exp": now + 300,
        "nonce": "nonce-abc",
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def json_response(payload: Any, status_code: int = 200, reason_phrase: str = "OK"):
    """Build a MagicMock standing in for an httpx.Response."""
    from unittest.mock import MagicMock

    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = reason_phrase
    response.json.return_value = payload
    return response
