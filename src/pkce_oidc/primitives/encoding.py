"""Byte encodings and digest selection shared by the OAuth primitives.

Base64URL output is always unpadded (RFC 7515 Section 2).
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
from collections.abc import Callable

from pkce_oidc.models.errors import HashBindingError

ByteSource = Callable[[int], bytes]
"""Returns N cryptographically random bytes. ``secrets.token_bytes`` in production."""

ShaFunc = Callable[[bytes], bytes]

_KEY_BITS_PATTERN = re.compile(r"(\d{3})(?!.*\d)")


def encode_base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def encode_hex(data: bytes) -> str:
    return data.hex()


def build_basic_credentials(user_id: str, password: str = "") -> str:
    """Build an HTTP Basic ``Authorization`` header value (RFC 7617)."""
    credentials = f"{user_id}:{password}".encode("utf-8")
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def parse_basic_credentials(auth_header: str) -> tuple[str | None, str | None]:
    """Parse an HTTP Basic ``Authorization`` header value.

    The password may itself contain colons; only the first one separates.

    Returns:
        Tuple of (user_id, password), or (None, None) if the header is not
        valid Basic credentials
    """
    if not auth_header.startswith("Basic "):
        return None, None

    try:
        credentials = base64.b64decode(auth_header[6:], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None, None

    user_id, sep, password = credentials.partition(":")
    if not sep:
        return None, None
    return user_id, password


def extract_key_bits_from_alg(alg: str) -> int:
    """Extract the digest size in bits from a JWS algorithm name.

    Uses the last run of three digits in the name (``ES256K`` -> 256).
    EdDSA algorithms are pinned to 512.

    Raises:
        HashBindingError: If the name carries no three-digit run
    """
    if alg in ("EdDSA", "Ed25519"):
        return 512

    match = _KEY_BITS_PATTERN.search(alg)
    if not match:
        raise HashBindingError(f"Invalid algorithm: {alg}")

    return int(match.group(1))


def get_sha_func_from_alg(alg: str) -> ShaFunc:
    """Return the SHA-2 digest function matching a JWS algorithm.

    Raises:
        HashBindingError: If the algorithm is invalid or its size unsupported
    """
    if alg in ("EdDSA", "Ed25519"):
        return _sha512

    key_bits = extract_key_bits_from_alg(alg)
    if key_bits == 256:
        return _sha256
    if key_bits == 384:
        return _sha384
    if key_bits == 512:
        return _sha512

    raise HashBindingError(f"Unsupported key size: {key_bits} bits")


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _sha384(data: bytes) -> bytes:
    return hashlib.sha384(data).digest()


def _sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()
