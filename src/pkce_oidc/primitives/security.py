"""CSRF and replay protection values for OAuth 2.1 / OIDC flows.

``state`` binds the authorization response to the request (CSRF) and
``nonce`` binds the ID token to it (replay). Each value comes from its own
draw on the ByteSource.
"""

from __future__ import annotations

from pkce_oidc.primitives.encoding import ByteSource, encode_base64url


def random_base64url(random_bytes: ByteSource, byte_length: int = 32) -> str:
    return encode_base64url(random_bytes(byte_length))


def generate_state(random_bytes: ByteSource, byte_length: int = 32) -> str:
    """Generate an unguessable state parameter."""
    return random_base64url(random_bytes, byte_length)


def generate_nonce(random_bytes: ByteSource, byte_length: int = 32) -> str:
    """Generate an ID token nonce. Only requested when scope contains ``openid``."""
    return random_base64url(random_bytes, byte_length)
