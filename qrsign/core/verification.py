"""
Wire payload decoding and signature verification.
"""

from __future__ import annotations

import json
import logging

from qrsign.common.exceptions import InvalidKeyEncoding, MalformedPayload
from qrsign.common.models import WirePayload
from qrsign.core.csprng import hex_decode, is_hex
from qrsign.core.keys import VerificationKey
from qrsign.core.signing import (
    QR_ENVELOPE_FIELD,
    WIRE_DELIMITER,
    hash_document,
    signed_message,
)

logger = logging.getLogger(__name__)


def decode_wire_payload(text: str) -> WirePayload:
    """Split ``hash|salt|signature`` into its three hex fields."""
    parts = text.split(WIRE_DELIMITER)
    if len(parts) != len(WirePayload._fields):
        msg = f"expected 3 '|'-separated fields, got {len(parts)}"
        raise MalformedPayload(msg)
    for name, value in zip(WirePayload._fields, parts):
        if not value:
            msg = f"payload field '{name}' is empty"
            raise MalformedPayload(msg)
        if not is_hex(value):
            msg = f"payload field '{name}' is not valid hex"
            raise MalformedPayload(msg)
    return WirePayload(*parts)


def decode_qr_envelope(text: str) -> WirePayload:
    """Decode QR content: a ``{"d": ...}`` JSON object or a bare wire payload."""
    text = text.strip()
    if not text.startswith("{"):
        return decode_wire_payload(text)
    try:
        envelope = json.loads(text)
    except json.JSONDecodeError as err:
        msg = f"QR envelope is not valid JSON: {err}"
        raise MalformedPayload(msg) from err
    payload = envelope.get(QR_ENVELOPE_FIELD) if isinstance(envelope, dict) else None
    if not isinstance(payload, str):
        msg = f"QR envelope has no string field '{QR_ENVELOPE_FIELD}'"
        raise MalformedPayload(msg)
    return decode_wire_payload(payload)


class VerificationProtocol:
    """Stateless verifier; depends only on hashing and RSA verify."""

    decode_wire_payload = staticmethod(decode_wire_payload)
    decode_qr_envelope = staticmethod(decode_qr_envelope)

    def verify(self, public_key: VerificationKey, document: bytes, payload: str) -> bool:
        """Check ``payload`` against ``document`` and ``public_key``.

        A mismatching document, tampered signature or wrong key gives False.
        Only structurally invalid input raises.
        """
        if not isinstance(public_key, VerificationKey):
            msg = f"expected a VerificationKey, got {type(public_key).__name__}"
            raise InvalidKeyEncoding(msg)

        fields = decode_wire_payload(payload)
        actual_hash = hash_document(document)
        if actual_hash != fields.file_hash:
            logger.info("Document hash %s does not match signed hash", actual_hash)
            return False

        valid = public_key.verify(
            hex_decode(fields.signature),
            signed_message(fields.file_hash, fields.salt),
        )
        logger.info("Signature over %s is %s", actual_hash, "valid" if valid else "invalid")
        return valid
