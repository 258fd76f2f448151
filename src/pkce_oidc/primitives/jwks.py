"""Signing key selection from a JSON Web Key Set."""

from __future__ import annotations

from collections.abc import Sequence

from pkce_oidc.models.errors import KeySelectionError
from pkce_oidc.models.jwks import EcJwk, OkpJwk, RsaJwk


def select_jwk(
    keys: Sequence[RsaJwk | EcJwk | OkpJwk], kid: str | None
) -> RsaJwk | EcJwk | OkpJwk:
    """Pick the verification key for a token.

    Without a ``kid`` the set must hold exactly one key. With a ``kid``
    (even an empty one) the first exact match wins, and a singleton set
    is not used as a fallback.

    Raises:
        KeySelectionError: If no key can be selected unambiguously
    """
    if kid is None:
        if len(keys) == 1:
            return keys[0]
        raise KeySelectionError(
            f"No kid provided and {len(keys)} JWKs found; ambiguous selection without kid"
        )

    for jwk in keys:
        if jwk.kid == kid:
            return jwk

    raise KeySelectionError(f'JWK with kid "{kid}" not found')
