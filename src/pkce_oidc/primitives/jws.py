"""JWS verification primitive with typed failures.

Signature and registered-claim checking (``iss``, ``aud``, ``exp``, ``nbf``)
is delegated to PyJWT. Its exceptions are translated into a small set of
failure reasons so callers never match on message text.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

import jwt

from pkce_oidc.models.jwks import EcJwk, OkpJwk, RsaJwk

logger = logging.getLogger(__name__)


class JwsFailureReason(Enum):
    SIGNATURE_INVALID = "signature_invalid"
    CLAIM_EXPIRED = "claim_expired"
    CLAIM_NOT_YET_VALID = "claim_not_yet_valid"
    ISSUER_MISMATCH = "issuer_mismatch"
    AUDIENCE_MISMATCH = "audience_mismatch"
    ALGORITHM_MISMATCH = "algorithm_mismatch"


class JwsVerificationFailure(Exception):
    """A JWS was rejected for one of the known reasons.

    ``claims`` holds the unverified payload so callers can quote the
    offending values; it is never trusted for anything else.
    """

    def __init__(
        self,
        reason: JwsFailureReason,
        message: str,
        claims: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.claims = claims or {}


class JwsVerifier(Protocol):
    """Capability that verifies a compact JWS against one public key."""

    def verify(
        self,
        token: str,
        jwk: RsaJwk | EcJwk | OkpJwk,
        *,
        algorithm: str,
        issuer: str,
        audience: str,
        clock_tolerance: float,
    ) -> dict[str, Any]:
        """Verify signature and registered claims, returning the payload.

        Raises:
            JwsVerificationFailure: For a recognized rejection
        """
        ...


_FAILURE_REASONS: list[tuple[type[Exception], JwsFailureReason]] = [
    (jwt.InvalidSignatureError, JwsFailureReason.SIGNATURE_INVALID),
    (jwt.ExpiredSignatureError, JwsFailureReason.CLAIM_EXPIRED),
    (jwt.ImmatureSignatureError, JwsFailureReason.CLAIM_NOT_YET_VALID),
    (jwt.InvalidIssuerError, JwsFailureReason.ISSUER_MISMATCH),
    (jwt.InvalidAudienceError, JwsFailureReason.AUDIENCE_MISMATCH),
]


def algorithms_for_key(jwk: RsaJwk | EcJwk | OkpJwk) -> tuple[str, ...]:
    """Return the JWS algorithms a key of this type may verify."""
    if isinstance(jwk, RsaJwk):
        return ("RS256", "RS384", "RS512", "PS256", "PS384", "PS512")
    if isinstance(jwk, EcJwk):
        return ("ES256", "ES384", "ES512", "ES256K")
    if isinstance(jwk, OkpJwk):
        return ("EdDSA",)
    raise TypeError(f"Unsupported JWK type: {type(jwk).__name__}")


def decode_protected_header(token: str) -> dict[str, Any]:
    """Decode the JOSE header without verifying the signature."""
    return jwt.get_unverified_header(token)


class PyJWTVerifier:
    """JwsVerifier backed by PyJWT with the ``cryptography`` backend."""

    def verify(
        self,
        token: str,
        jwk: RsaJwk | EcJwk | OkpJwk,
        *,
        algorithm: str,
        issuer: str,
        audience: str,
        clock_tolerance: float,
    ) -> dict[str, Any]:
        if algorithm not in algorithms_for_key(jwk):
            raise JwsVerificationFailure(
                JwsFailureReason.ALGORITHM_MISMATCH,
                f'Algorithm "{algorithm}" cannot be used with a "{jwk.kty}" key',
            )

        key = jwt.PyJWK(jwk.to_dict(), algorithm=algorithm)

        try:
            return jwt.decode(
                token,
                key.key,
                algorithms=[algorithm],
                audience=audience,
                issuer=issuer,
                leeway=clock_tolerance,
            )
        except jwt.InvalidTokenError as e:
            for error_type, reason in _FAILURE_REASONS:
                if isinstance(e, error_type):
                    logger.debug(f"JWS rejected ({reason.value}): {e}")
                    raise JwsVerificationFailure(
                        reason, str(e), _unverified_claims(token)
                    ) from e
            raise


def _unverified_claims(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.DecodeError:
        return {}
