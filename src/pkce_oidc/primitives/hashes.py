"""Left-most half hash used by ``s_hash``, ``at_hash`` and ``c_hash`` claims.

OpenID Connect Core 3.1.3.6 / FAPI: hash the ASCII value with the digest
of the ID token's ``alg``, keep the left-most half, base64url-encode it.
"""

from __future__ import annotations

from typing import Any

from pkce_oidc.models.errors import HashBindingError
from pkce_oidc.primitives.encoding import encode_base64url, get_sha_func_from_alg


def left_most_half_hash(data: str, alg: str) -> str:
    """Compute the left-most half hash of ``data`` for a JWS algorithm.

    Result lengths: 22 characters for SHA-256 algorithms, 32 for SHA-384,
    43 for SHA-512 and EdDSA.

    Raises:
        HashBindingError: If the algorithm is invalid or unsupported
    """
    sha_func = get_sha_func_from_alg(alg)
    digest = sha_func(data.encode("utf-8"))
    return encode_base64url(digest[: len(digest) // 2])


def validate_left_most_half_hash(hash: Any, data: str, alg: str) -> None:
    """Check a claimed hash against the value recomputed from ``data``.

    Raises:
        HashBindingError: If the hash is missing, not a string, or different
    """
    if not hash:
        raise HashBindingError("hash is missing")

    if not isinstance(hash, str):
        raise HashBindingError("hash must be a string")

    expected_hash = left_most_half_hash(data, alg)

    if hash != expected_hash:
        raise HashBindingError(
            f'Hash validation failed for data: "{data}" and algorithm: "{alg}"\n'
            f'Expected: "{expected_hash}"\n'
            f'Received: "{hash}"'
        )
