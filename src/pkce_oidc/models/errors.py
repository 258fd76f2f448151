"""Exception hierarchy for OAuth 2.1 / OpenID Connect client errors.

Every failure is terminal for the current call. Callers should abort the
flow on any of these rather than retry, since they indicate either a
forged/replayed response or a misconfigured client.
"""

from __future__ import annotations


class OAuth2Error(Exception):
    """Base exception for all OAuth 2.1 related errors."""

    pass


class MalformedInputError(OAuth2Error):
    """Raised when a URL (response location or redirect URI) cannot be parsed."""

    pass


class ProtocolError(OAuth2Error):
    """Raised when the authorization server returns an error response."""

    pass


class BindingMismatchError(OAuth2Error):
    """Raised when a response value does not match the value bound at request time.

    Covers redirect URI, state, issuer and client_id mismatches.
    """

    pass


class StateValidationError(BindingMismatchError):
    """Raised when the state parameter does not match the expected value.

    A mismatch indicates either a CSRF attempt or a response that belongs
    to a different authorization request.
    """

    pass


class MissingFieldError(OAuth2Error):
    """Raised when a required parameter or claim is absent."""

    pass


class ScopeViolationError(OAuth2Error):
    """Raised when the granted scope exceeds the requested scope."""

    pass


class KeySelectionError(OAuth2Error):
    """Raised when no JWK can be selected unambiguously from a key set."""

    pass


class IdTokenVerificationError(OAuth2Error):
    """Raised when the ID token signature or a time/issuer/audience claim is rejected."""

    pass


class HashBindingError(OAuth2Error):
    """Raised when an s_hash/at_hash claim fails validation or its algorithm is unusable."""

    pass


class TransportError(OAuth2Error):
    """Raised when an HTTP call fails, returns non-2xx, or returns malformed JSON."""

    pass


class DiscoveryError(TransportError):
    """Raised when OpenID Provider metadata discovery fails."""

    pass
