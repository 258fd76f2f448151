"""Scope string parsing and granted-scope checks (RFC 6749 Section 3.3)."""

from __future__ import annotations

from pkce_oidc.models.errors import ScopeViolationError


def parse_scope(scope: str) -> list[str]:
    """Split a scope string on runs of whitespace, dropping empty tokens."""
    return scope.split()


def has_openid_scope(scope: str) -> bool:
    return "openid" in parse_scope(scope)


def validate_granted_scope(requested: str, granted: str) -> None:
    """Ensure every granted scope token was requested.

    Raises:
        ScopeViolationError: Listing unrequested tokens in granted order
    """
    requested_scopes = set(parse_scope(requested))
    invalid_scopes = [s for s in parse_scope(granted) if s not in requested_scopes]

    if invalid_scopes:
        raise ScopeViolationError(
            "Granted scope contains scopes not in requested scope: "
            f"{', '.join(invalid_scopes)}"
        )
