"""
Hash-then-sign protocol and wire payload encoding.

The signed message is the UTF-8 text of the document hash followed directly
by the salt, both as hex, with no separator. A fresh salt per signing keeps
two signatures over the same document with the same key distinct.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
import uuid

from qrsign.common.config import Config
from qrsign.common.exceptions import KeyNotFound
from qrsign.common.interfaces import IMessageSigner, IRandomGenerator
from qrsign.common.models import SignedDocument
from qrsign.core.csprng import hex_encode

logger = logging.getLogger(__name__)

WIRE_DELIMITER = "|"
QR_ENVELOPE_FIELD = "d"


def hash_document(data: bytes) -> str:
    """SHA-256 of the raw bytes as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()


def signed_message(file_hash: str, salt: str) -> bytes:
    return (file_hash + salt).encode("utf-8")


def encode_wire_payload(doc: SignedDocument) -> str:
    """``hash|salt|signature``; hex fields never contain the delimiter."""
    return WIRE_DELIMITER.join((doc.file_hash, doc.salt, doc.signature))


def encode_qr_envelope(doc: SignedDocument) -> str:
    """JSON object carried by the QR code: ``{"d": "<wire payload>"}``."""
    return json.dumps({QR_ENVELOPE_FIELD: encode_wire_payload(doc)}, separators=(",", ":"))


class SigningProtocol:
    """Signs documents with keys held by a KeyManager."""

    def __init__(
        self,
        keys: IMessageSigner,
        rng: IRandomGenerator,
        config: Config | None = None,
    ):
        self.config = config or Config()
        self.keys = keys
        self.rng = rng

    hash_document = staticmethod(hash_document)
    encode_wire_payload = staticmethod(encode_wire_payload)
    encode_qr_envelope = staticmethod(encode_qr_envelope)

    def sign(self, key_id: str, document: bytes, file_name: str = "") -> SignedDocument:
        """Sign ``document`` with the key registered under ``key_id``."""
        if key_id not in self.keys:
            raise KeyNotFound(key_id)

        file_hash = hash_document(document)
        salt = self.rng.generate_salt()
        signature = self.keys.sign_with(key_id, signed_message(file_hash, salt))

        doc = SignedDocument(
            id=str(uuid.uuid4()),
            file_name=file_name,
            file_hash=file_hash,
            salt=salt,
            signature=hex_encode(signature),
            timestamp=int(time.time() * 1000),
            public_key_fingerprint=key_id,
        )
        logger.info("Signed document %s (hash %s) with key %s", doc.id, file_hash, key_id)
        return doc
