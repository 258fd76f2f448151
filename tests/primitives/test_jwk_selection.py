import pytest

from pkce_oidc.models.errors import KeySelectionError
from pkce_oidc.models.jwks import parse_jwk
from pkce_oidc.primitives.jwks import select_jwk


def _ec_jwk(kid: str | None, x: str = "x-coordinate"):
    data = {"kty": "EC", "crv": "P-256", "x": x, "y": "y-coordinate"}
    if kid is not None:
        data["kid"] = kid
    return parse_jwk(data)


class TestSelectJwk:
    def test_single_key_without_kid(self) -> None:
        # Arrange
        key = _ec_jwk(None)

        # Act / Assert
        assert select_jwk([key], None) is key

    def test_multiple_keys_without_kid_is_ambiguous(self) -> None:
        with pytest.raises(KeySelectionError) as exc_info:
            select_jwk([_ec_jwk("a"), _ec_jwk("b")], None)

        assert str(exc_info.value) == (
            "No kid provided and 2 JWKs found; ambiguous selection without kid"
        )

    def test_empty_set_without_kid_is_an_error(self) -> None:
        with pytest.raises(KeySelectionError, match="0 JWKs found"):
            select_jwk([], None)

    def test_kid_selects_first_exact_match(self) -> None:
        # Arrange
        first = _ec_jwk("b", x="first")
        second = _ec_jwk("b", x="second")

        # Act
        selected = select_jwk([_ec_jwk("a"), first, second], "b")

        # Assert
        assert selected is first

    def test_unknown_kid_is_not_found(self) -> None:
        with pytest.raises(KeySelectionError, match='JWK with kid "c" not found'):
            select_jwk([_ec_jwk("a"), _ec_jwk("b")], "c")

    def test_kid_does_not_fall_back_to_singleton(self) -> None:
        with pytest.raises(KeySelectionError, match="not found"):
            select_jwk([_ec_jwk("a")], "b")

    def test_empty_kid_is_a_real_identifier(self) -> None:
        # A key without kid does not match an explicit empty kid
        with pytest.raises(KeySelectionError):
            select_jwk([_ec_jwk(None)], "")

        # ...but a key whose kid is empty does
        key = _ec_jwk("")
        assert select_jwk([key], "") is key
