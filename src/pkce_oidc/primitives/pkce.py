"""PKCE (Proof Key for Code Exchange) generation for OAuth 2.1 security.

Implements RFC 7636 with the S256 method only. The verifier is the
Base64URL encoding of random bytes drawn from an injected ByteSource, so
a fixed source yields a fixed verifier.
"""

from __future__ import annotations

import hashlib

from pkce_oidc.models.security import PKCEParameters
from pkce_oidc.primitives.encoding import ByteSource, encode_base64url


def generate_code_verifier(random_bytes: ByteSource, byte_length: int = 32) -> str:
    """Generate a code verifier from ``byte_length`` random bytes.

    RFC 7636 Section 4.1: 32 bytes encode to a 43-character verifier.

    Args:
        random_bytes: Source of cryptographically secure random bytes
        byte_length: Number of random bytes to draw

    Returns:
        Base64url-encoded code verifier
    """
    return encode_base64url(random_bytes(byte_length))


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge from a code verifier.

    RFC 7636 Section 4.2: BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return encode_base64url(digest)


def generate_pkce(random_bytes: ByteSource, byte_length: int = 32) -> PKCEParameters:
    """Generate a code verifier and its S256 challenge.

    The challenge is always 43 characters since it encodes a SHA-256 digest,
    whatever ``byte_length`` is.
    """
    code_verifier = generate_code_verifier(random_bytes, byte_length)
    return PKCEParameters(
        code_verifier=code_verifier,
        code_challenge=generate_code_challenge(code_verifier),
        code_challenge_method="S256",
    )
