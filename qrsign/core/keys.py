"""
RSA key pair lifecycle.

Private keys live inside ``SigningKeyHandle`` objects owned by the
``KeyManager`` registry. A handle can sign and nothing else: it has no
accessor for key material and refuses to be pickled or copied. Callers refer
to private keys only by key id.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
import time
from collections.abc import Callable
from typing import NoReturn

from cryptography.exceptions import InternalError, InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from qrsign.common.config import Config
from qrsign.common.exceptions import (
    InvalidKeyEncoding,
    KeyExportRefused,
    KeyGenerationFailed,
    KeyNotFound,
    SigningFailed,
)
from qrsign.common.interfaces import IRandomGenerator
from qrsign.common.models import KeyPair
from qrsign.core.csprng import hex_encode

logger = logging.getLogger(__name__)

PEM_HEADER = "-----BEGIN PUBLIC KEY-----"
PEM_FOOTER = "-----END PUBLIC KEY-----"

KeyFactory = Callable[[], rsa.RSAPrivateKey]


class SigningKeyHandle:
    """Opaque capability that signs with a private key it never reveals."""

    __slots__ = ("__key",)

    def __init__(self, private_key: rsa.RSAPrivateKey):
        self.__key = private_key

    def sign(self, message: bytes) -> bytes:
        """RSASSA-PKCS1-v1_5 signature over ``message`` with SHA-256."""
        try:
            return self.__key.sign(message, padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as err:
            msg = f"signature primitive failed: {err}"
            raise SigningFailed(msg) from err

    def public_key(self) -> VerificationKey:
        return VerificationKey(self.__key.public_key())

    def __repr__(self) -> str:
        return "<SigningKeyHandle (private key hidden)>"

    def __reduce__(self) -> NoReturn:
        msg = "signing key handles cannot be serialized"
        raise TypeError(msg)

    def __copy__(self) -> NoReturn:
        msg = "signing key handles cannot be copied"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict) -> NoReturn:
        msg = "signing key handles cannot be copied"
        raise TypeError(msg)


class VerificationKey:
    """Public-key-only handle restricted to signature verification."""

    def __init__(self, public_key: rsa.RSAPublicKey):
        self._key = public_key

    @property
    def key_size(self) -> int:
        return self._key.key_size

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Return whether ``signature`` is a valid PKCS#1 v1.5/SHA-256 signature."""
        try:
            self._key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True

    def to_pem(self) -> str:
        return export_public_key(self._key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerificationKey):
            return NotImplemented
        return self._key.public_numbers() == other._key.public_numbers()

    def __hash__(self) -> int:
        return hash(self._key.public_numbers())


def export_public_key(public_key: rsa.RSAPublicKey) -> str:
    """Header line, one base64 line of DER SubjectPublicKeyInfo, footer line."""
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    body = base64.b64encode(der).decode("ascii")
    return f"{PEM_HEADER}\n{body}\n{PEM_FOOTER}"


def import_public_key(pem: str) -> VerificationKey:
    """Parse a PEM public key block, tolerating arbitrary whitespace."""
    contents = pem.replace(PEM_HEADER, "").replace(PEM_FOOTER, "")
    contents = "".join(contents.split())
    if not contents:
        msg = "public key is empty"
        raise InvalidKeyEncoding(msg)
    try:
        der = base64.b64decode(contents, validate=True)
    except (binascii.Error, ValueError) as err:
        msg = f"public key is not valid base64: {err}"
        raise InvalidKeyEncoding(msg) from err
    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as err:
        msg = f"public key structure rejected: {err}"
        raise InvalidKeyEncoding(msg) from err
    if not isinstance(key, rsa.RSAPublicKey):
        msg = f"expected an RSA public key, got {type(key).__name__}"
        raise InvalidKeyEncoding(msg)
    return VerificationKey(key)


class KeyManager:
    """Generates key pairs and keeps their private halves in a registry."""

    def __init__(
        self,
        rng: IRandomGenerator,
        config: Config | None = None,
        key_factory: KeyFactory | None = None,
    ):
        self.config = config or Config()
        self.rng = rng
        self.key_factory = key_factory or self._generate_private_key
        self._registry: dict[str, tuple[KeyPair, SigningKeyHandle]] = {}
        self._lock = threading.Lock()

    def _generate_private_key(self) -> rsa.RSAPrivateKey:
        return rsa.generate_private_key(
            public_exponent=self.config.RSA_PUBLIC_EXPONENT,
            key_size=self.config.RSA_KEY_SIZE,
        )

    def __contains__(self, key_id: object) -> bool:
        with self._lock:
            return key_id in self._registry

    def __len__(self) -> int:
        with self._lock:
            return len(self._registry)

    def generate_key_pair(self) -> KeyPair:
        """Create, register and return a new key pair."""
        try:
            private_key = self.key_factory()
        except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as err:
            msg = f"key provider failed: {err}"
            raise KeyGenerationFailed(msg) from err

        handle = SigningKeyHandle(private_key)
        public_key_pem = export_public_key(private_key.public_key())
        del private_key

        with self._lock:
            key_id = self._new_key_id()
            pair = KeyPair(
                id=key_id,
                created_at=int(time.time() * 1000),
                public_key_pem=public_key_pem,
                algorithm=self.config.KEY_ALGORITHM,
            )
            self._registry[key_id] = (pair, handle)

        logger.info("Generated %s key pair %s", pair.algorithm, key_id)
        return pair

    def _new_key_id(self) -> str:
        # Caller holds the lock so the collision check and insertion are atomic
        while True:
            key_id = hex_encode(self.rng.random_bytes(self.config.KEY_ID_BYTES))
            if key_id not in self._registry:
                return key_id
            logger.debug("Key id %s already in use, drawing another", key_id)

    def _entry(self, key_id: str) -> tuple[KeyPair, SigningKeyHandle]:
        with self._lock:
            entry = self._registry.get(key_id)
        if entry is None:
            raise KeyNotFound(key_id)
        return entry

    def get(self, key_id: str) -> KeyPair:
        return self._entry(key_id)[0]

    def list_keys(self) -> list[KeyPair]:
        """All registered key pairs, newest first."""
        with self._lock:
            pairs = [pair for pair, _ in self._registry.values()]
        return list(reversed(pairs))

    def public_key(self, key_id: str) -> VerificationKey:
        return self._entry(key_id)[1].public_key()

    def sign_with(self, key_id: str, message: bytes) -> bytes:
        """Sign ``message`` with the private key registered under ``key_id``."""
        return self._entry(key_id)[1].sign(message)

    def export_private_key(self, key_id: str) -> NoReturn:
        """Private keys are not exportable; this always raises."""
        self._entry(key_id)
        logger.warning("Refused private key export for %s", key_id)
        raise KeyExportRefused(key_id)

    import_public_key = staticmethod(import_public_key)
