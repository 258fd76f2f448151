"""URL parsing and comparison helpers for redirect and issuer checks."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from pkce_oidc.models.errors import BindingMismatchError, MalformedInputError

_DEFAULT_PORTS = {"http": 80, "https": 443}
_DUPLICATE_SLASHES = re.compile(r"([^:])/+")


def parse_url(url: str, label: str) -> SplitResult:
    """Parse an absolute URL.

    Raises:
        MalformedInputError: Naming ``label`` and quoting the input
    """
    try:
        parts = urlsplit(url)
        # Non-numeric or out of range ports raise ValueError
        port = parts.port
    except ValueError as e:
        raise MalformedInputError(f"Invalid {label}: {url} ({e})") from e

    if not parts.scheme:
        raise MalformedInputError(f"Invalid {label}: {url} (missing scheme)")

    if parts.scheme.lower() in _DEFAULT_PORTS and not parts.hostname:
        raise MalformedInputError(f"Invalid {label}: {url} (missing host)")

    if port is not None and not parts.hostname:
        raise MalformedInputError(f"Invalid {label}: {url} (port without host)")

    return parts


def origin_and_path(parts: SplitResult) -> tuple[str, str]:
    """Return the (scheme://host[:port], path) pair used for redirect matching.

    Scheme and host are lowercased and default ports dropped. Query and
    fragment take no part in the comparison.
    """
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    path = parts.path
    if not path and scheme in _DEFAULT_PORTS:
        path = "/"

    return f"{scheme}://{host}", path


def validate_issuer(received_issuer: str, expected_issuer: str) -> None:
    """Compare issuers after stripping trailing slashes from both sides.

    No other normalization is applied (case, default ports).

    Raises:
        BindingMismatchError: If the issuers differ
    """
    normalized_received = received_issuer.rstrip("/")
    normalized_expected = expected_issuer.rstrip("/")

    if normalized_received != normalized_expected:
        raise BindingMismatchError(
            f'Issuer mismatch: received "{normalized_received}" '
            f'but expected "{normalized_expected}"'
        )


def concat_url_paths(*paths: str) -> str:
    """Join URL segments, collapsing repeated slashes but keeping ``://``.

    ``concat_url_paths("https://as.example.com/", "/.well-known/x")``
    gives ``"https://as.example.com/.well-known/x"``.
    """
    return _DUPLICATE_SLASHES.sub(r"\1/", "/".join(paths))
