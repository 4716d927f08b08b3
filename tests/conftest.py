import itertools
from collections.abc import Callable

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from qrsign.common.config import Config
from qrsign.core.context import CryptoContext


@pytest.fixture(scope="session")
def rsa_keys() -> list[rsa.RSAPrivateKey]:
    """A few 2048-bit keys generated once; RSA key generation is slow."""
    return [
        rsa.generate_private_key(public_exponent=65537, key_size=2048)
        for _ in range(3)
    ]


@pytest.fixture
def key_factory(rsa_keys: list[rsa.RSAPrivateKey]) -> Callable[[], rsa.RSAPrivateKey]:
    """Hand out the pre-generated keys in turn."""
    keys = itertools.cycle(rsa_keys)
    return lambda: next(keys)


@pytest.fixture
def context(key_factory: Callable[[], rsa.RSAPrivateKey]) -> CryptoContext:
    return CryptoContext(config=Config(), key_factory=key_factory)
