"""OpenID Provider metadata models (OpenID Connect Discovery 1.0)."""

from __future__ import annotations

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator

_url_adapter: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


class OpenIdConfiguration(BaseModel):
    """OpenID Provider configuration document.

    Unknown members pass through untouched. ``original_issuer`` is only set
    after the document has been rewritten for a local test environment.
    """

    model_config = ConfigDict(extra="allow")

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    jwks_uri: str
    userinfo_endpoint: str | None = None
    pushed_authorization_request_endpoint: str | None = None
    revocation_endpoint: str | None = None
    introspection_endpoint: str | None = None
    original_issuer: str | None = None

    @field_validator(
        "issuer",
        "authorization_endpoint",
        "token_endpoint",
        "jwks_uri",
        "userinfo_endpoint",
        "pushed_authorization_request_endpoint",
        "revocation_endpoint",
        "introspection_endpoint",
    )
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                _url_adapter.validate_python(v)
            except ValidationError as e:
                raise ValueError(f"Invalid URL: {v}") from e
        return v

    @property
    def expected_issuer(self) -> str:
        """Issuer to compare against ``iss`` in authorization responses."""
        return self.original_issuer or self.issuer
