"""ID token and token response validation (OpenID Connect Core 3.1.3.7).

Signature and registered-claim checks go through an injected JwsVerifier.
Everything OIDC adds on top (``iat``, ``sub``, ``nonce``, ``s_hash``) and
the granted-scope check are done here. Every check fails fast.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pkce_oidc.models.errors import (
    BindingMismatchError,
    IdTokenVerificationError,
    MissingFieldError,
)
from pkce_oidc.models.jwks import EcJwk, OkpJwk, RsaJwk
from pkce_oidc.models.tokens import IdTokenValidationResult, TokenResponse
from pkce_oidc.primitives.hashes import validate_left_most_half_hash
from pkce_oidc.primitives.jwks import select_jwk
from pkce_oidc.primitives.jws import (
    JwsFailureReason,
    JwsVerificationFailure,
    JwsVerifier,
    PyJWTVerifier,
    decode_protected_header,
)
from pkce_oidc.primitives.scope import validate_granted_scope

logger = logging.getLogger(__name__)

DEFAULT_CLOCK_TOLERANCE = 30


class TokenValidator:
    """Validates token endpoint responses and the ID tokens they carry."""

    def __init__(self, verifier: JwsVerifier | None = None):
        """Initialize the validator.

        Args:
            verifier: JWS verification capability, PyJWT-backed by default
        """
        self._verifier = verifier or PyJWTVerifier()

    def validate_id_token(
        self,
        id_token: str,
        jwks: Sequence[RsaJwk | EcJwk | OkpJwk],
        issuer: str,
        audience: str,
        nonce: str,
        state: str | None = None,
        clock_tolerance: float = DEFAULT_CLOCK_TOLERANCE,
    ) -> IdTokenValidationResult:
        """Validate an ID token end to end.

        Args:
            id_token: Compact-serialized ID token
            jwks: Provider signing keys; selected by the header ``kid``
            issuer: Expected ``iss``
            audience: Expected ``aud`` (the client_id)
            nonce: Nonce sent in the authorization request
            state: State sent in the authorization request, checked
                against ``s_hash`` when that claim is present
            clock_tolerance: Seconds of leeway for ``exp``/``nbf``

        Returns:
            IdTokenValidationResult: Verified claims and protected header

        Raises:
            MissingFieldError: If ``alg``, ``iat``, ``sub`` or ``nonce`` is absent
            KeySelectionError: If no signing key matches
            IdTokenVerificationError: If signature, issuer, audience, expiry
                or not-before checks fail
            BindingMismatchError: If the nonce differs
            HashBindingError: If ``s_hash`` does not match the state
        """
        protected_header = decode_protected_header(id_token)
        alg = protected_header.get("alg")
        if not alg:
            raise MissingFieldError('ID token header is missing the "alg" parameter')

        jwk = select_jwk(jwks, protected_header.get("kid"))

        try:
            payload = self._verifier.verify(
                id_token,
                jwk,
                algorithm=alg,
                issuer=issuer,
                audience=audience,
                clock_tolerance=clock_tolerance,
            )
        except JwsVerificationFailure as e:
            raise IdTokenVerificationError(
                self._describe_failure(e, issuer, audience, alg, jwk)
            ) from e

        if not payload.get("iat"):
            raise MissingFieldError('ID token is missing the "iat" (issued at) claim')

        if not payload.get("sub"):
            raise MissingFieldError('ID token is missing the "sub" (subject) claim')

        if not payload.get("nonce"):
            raise MissingFieldError(
                'ID token is missing the "nonce" claim required for replay protection'
            )

        if payload["nonce"] != nonce:
            raise BindingMismatchError(
                f'ID token nonce "{payload["nonce"]}" does not match '
                f'expected value "{nonce}"'
            )

        if "s_hash" in payload:
            if state is None:
                raise MissingFieldError(
                    "ID token carries an s_hash claim but no state was supplied"
                )
            validate_left_most_half_hash(payload["s_hash"], state, alg)

        logger.info(f"ID token validated for subject {payload['sub']}")
        return IdTokenValidationResult(payload=payload, protected_header=protected_header)

    def validate_token_response(
        self,
        token_response: TokenResponse,
        requested_scope: str,
        jwks: Sequence[RsaJwk | EcJwk | OkpJwk],
        issuer: str,
        audience: str,
        nonce: str,
        state: str | None = None,
        clock_tolerance: float = DEFAULT_CLOCK_TOLERANCE,
    ) -> IdTokenValidationResult | None:
        """Validate granted scope and, when present, the ID token.

        Returns:
            The ID token validation result, or None when the response
            carries no ID token (plain OAuth flows)

        Raises:
            ScopeViolationError: If more scope was granted than requested
            Any error raised by validate_id_token
        """
        if token_response.scope:
            validate_granted_scope(requested_scope, token_response.scope)

        if token_response.id_token:
            return self.validate_id_token(
                token_response.id_token,
                jwks,
                issuer=issuer,
                audience=audience,
                nonce=nonce,
                state=state,
                clock_tolerance=clock_tolerance,
            )

        logger.debug("Token response carries no ID token")
        return None

    def _describe_failure(
        self,
        failure: JwsVerificationFailure,
        issuer: str,
        audience: str,
        alg: str,
        jwk: RsaJwk | EcJwk | OkpJwk,
    ) -> str:
        claims: dict[str, Any] = failure.claims
        reason = failure.reason

        if reason is JwsFailureReason.ISSUER_MISMATCH:
            return (
                f'ID token issuer "{claims.get("iss")}" does not match '
                f'expected issuer "{issuer}"'
            )
        if reason is JwsFailureReason.AUDIENCE_MISMATCH:
            return (
                f'ID token audience "{claims.get("aud")}" does not match '
                f'expected audience "{audience}"'
            )
        if reason is JwsFailureReason.CLAIM_EXPIRED:
            return f'ID token has expired (exp {claims.get("exp")})'
        if reason is JwsFailureReason.CLAIM_NOT_YET_VALID:
            return (
                "ID token is not yet valid "
                f'(nbf {claims.get("nbf")}, iat {claims.get("iat")})'
            )
        if reason is JwsFailureReason.SIGNATURE_INVALID:
            return f'ID token signature verification failed for kid "{jwk.kid}"'
        if reason is JwsFailureReason.ALGORITHM_MISMATCH:
            return f'ID token algorithm "{alg}" cannot be verified with a "{jwk.kty}" key'

        raise ValueError(f"Unhandled JWS failure reason: {reason}")
