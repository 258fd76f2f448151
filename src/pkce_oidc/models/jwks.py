"""JSON Web Key models (RFC 7517, RFC 7518, RFC 8037).

A JWK is a tagged union keyed by ``kty``. Each variant declares the
members that key type requires; unknown key types fail validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _BaseJwk(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    use: Literal["sig", "enc"] | None = None
    kid: str | None = None
    alg: str | None = None
    x5c: list[str] | None = None
    x5t: str | None = None
    x5t_s256: str | None = Field(default=None, alias="x5t#S256")
    x5u: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Dump to the JSON member names, omitting absent members."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RsaJwk(_BaseJwk):
    kty: Literal["RSA"]
    n: str
    e: str
    # Private key members
    d: str | None = None
    p: str | None = None
    q: str | None = None
    dp: str | None = None
    dq: str | None = None
    qi: str | None = None


class EcJwk(_BaseJwk):
    kty: Literal["EC"]
    crv: Literal["P-256", "P-384", "P-521", "secp256k1"]
    x: str
    y: str
    d: str | None = None


class OkpJwk(_BaseJwk):
    kty: Literal["OKP"]
    crv: Literal["Ed25519", "Ed448", "X25519", "X448"]
    x: str
    d: str | None = None


Jwk = Annotated[Union[RsaJwk, EcJwk, OkpJwk], Field(discriminator="kty")]


class JwksResponse(BaseModel):
    """JSON Web Key Set document as served from a ``jwks_uri``."""

    keys: list[Jwk]


_jwk_adapter: TypeAdapter[RsaJwk | EcJwk | OkpJwk] = TypeAdapter(Jwk)


def parse_jwk(data: dict[str, Any]) -> RsaJwk | EcJwk | OkpJwk:
    """Validate a single JWK mapping into its typed variant."""
    return _jwk_adapter.validate_python(data)
