# QR Document Signing

from __future__ import annotations

from collections.abc import Iterable

from qrsign.common.exceptions import (
    EntropyNotSeeded,
    InvalidKeyEncoding,
    KeyExportRefused,
    KeyGenerationFailed,
    KeyNotFound,
    MalformedHex,
    MalformedPayload,
    QRSignError,
    RandomnessUnavailable,
    SigningFailed,
)
from qrsign.common.models import KeyPair, SignedDocument, WirePayload
from qrsign.core.context import CryptoContext, default_context
from qrsign.core.keys import VerificationKey, import_public_key
from qrsign.core.signing import encode_qr_envelope, encode_wire_payload, hash_document
from qrsign.core.verification import decode_qr_envelope, decode_wire_payload


def add_entropy(samples: Iterable[int]) -> None:
    """Feed samples into the default context's entropy pool."""
    default_context().add_entropy(samples)


def generate_key_pair() -> KeyPair:
    """Generate and register a key pair in the default context."""
    return default_context().generate_key_pair()


def sign(key_id: str, document: bytes, file_name: str = "") -> SignedDocument:
    """Sign ``document`` with a key registered in the default context."""
    return default_context().sign(key_id, document, file_name)


def verify(public_key: VerificationKey, document: bytes, payload: str) -> bool:
    """Verify a wire payload; False for any legitimate mismatch."""
    return default_context().verify(public_key, document, payload)


__all__ = [
    "CryptoContext",
    "EntropyNotSeeded",
    "InvalidKeyEncoding",
    "KeyExportRefused",
    "KeyGenerationFailed",
    "KeyNotFound",
    "KeyPair",
    "MalformedHex",
    "MalformedPayload",
    "QRSignError",
    "RandomnessUnavailable",
    "SignedDocument",
    "SigningFailed",
    "VerificationKey",
    "WirePayload",
    "add_entropy",
    "decode_qr_envelope",
    "decode_wire_payload",
    "default_context",
    "encode_qr_envelope",
    "encode_wire_payload",
    "generate_key_pair",
    "hash_document",
    "import_public_key",
    "sign",
    "verify",
]
