"""Authorization request parameter assembly and client authentication.

Shared by the authorization endpoint, PAR endpoint and token endpoint
builders. Parameter maps are plain insertion-ordered dicts; setting an
existing key overwrites it in place.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping

from pkce_oidc.models.flow import AuthorizationParams, PreparedAuthorizationParams
from pkce_oidc.models.security import ClientAuth
from pkce_oidc.primitives.encoding import ByteSource, build_basic_credentials
from pkce_oidc.primitives.pkce import generate_pkce
from pkce_oidc.primitives.scope import has_openid_scope
from pkce_oidc.primitives.security import generate_nonce, generate_state


def prepare_authorization_params(
    authorization_params: AuthorizationParams, random_bytes: ByteSource
) -> PreparedAuthorizationParams:
    """Assemble the protocol parameters for an authorization or PAR request.

    Draws state, then the PKCE verifier, then (for OpenID requests) the
    nonce from ``random_bytes``; a fixed source therefore yields fixed
    output.

    Args:
        authorization_params: Redirect URI, scope and response type
        random_bytes: Source of cryptographically secure random bytes

    Returns:
        PreparedAuthorizationParams: Parameters plus the secrets to retain
    """
    scope = authorization_params.scope
    state = generate_state(random_bytes)
    pkce = generate_pkce(random_bytes)

    params = {
        "response_type": authorization_params.response_type,
        "redirect_uri": authorization_params.redirect_uri,
        "scope": scope,
        "state": state,
        "code_challenge": pkce.code_challenge,
        "code_challenge_method": pkce.code_challenge_method,
    }

    nonce = None
    if has_openid_scope(scope):
        nonce = generate_nonce(random_bytes)
        params["nonce"] = nonce

    return PreparedAuthorizationParams(
        params=params,
        code_verifier=pkce.code_verifier,
        state=state,
        scope=scope,
        nonce=nonce,
    )


def apply_additional_params(
    params: MutableMapping[str, str],
    additional_params: Mapping[str, str] | None = None,
) -> None:
    """Copy extension parameters over ``params``; the last write wins."""
    for key, value in (additional_params or {}).items():
        params[key] = value


def apply_client_auth(
    params: MutableMapping[str, str],
    headers: MutableMapping[str, str],
    client_auth: ClientAuth,
) -> None:
    """Apply client authentication to an outgoing request (RFC 6749 Section 2.3).

    A client secret, even an empty one, selects HTTP Basic and keeps every
    client field out of the body. Otherwise ``client_id`` goes into the body
    together with a non-empty client assertion (RFC 7521) if one is given.
    """
    if client_auth.client_secret is not None:
        headers["Authorization"] = build_basic_credentials(
            client_auth.client_id, client_auth.client_secret
        )
        return

    params["client_id"] = client_auth.client_id

    if client_auth.client_assertion:
        if client_auth.client_assertion_type:
            params["client_assertion_type"] = client_auth.client_assertion_type
        params["client_assertion"] = client_auth.client_assertion
