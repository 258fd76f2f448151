import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from jwt.algorithms import ECAlgorithm, OKPAlgorithm, RSAAlgorithm

from helpers import SequentialBytes, SigningKey


@pytest.fixture
def sequential_bytes() -> SequentialBytes:
    return SequentialBytes()


@pytest.fixture(scope="session")
def ec_signing_key() -> SigningKey:
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_jwk = ECAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    public_jwk["kid"] = "ec-key"
    return SigningKey(private_key, public_jwk, "ES256")


@pytest.fixture(scope="session")
def rsa_signing_key() -> SigningKey:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    public_jwk = RSAAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    public_jwk["kid"] = "rsa-key"
    return SigningKey(private_key, public_jwk, "RS256")


@pytest.fixture(scope="session")
def ed_signing_key() -> SigningKey:
    private_key = ed25519.Ed25519PrivateKey.generate()
    public_jwk = OKPAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    public_jwk["kid"] = "ed-key"
    return SigningKey(private_key, public_jwk, "EdDSA")
