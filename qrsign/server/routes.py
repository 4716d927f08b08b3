"""
Routes for the signing server.
"""

from __future__ import annotations

import base64
import binascii
import time
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException

from qrsign.common.exceptions import EntropyNotSeeded, QRSignError
from qrsign.common.models import (
    EntropyRequest,
    EntropyStatus,
    KeyPair,
    SignRequest,
    SignResponse,
    VerifyRequest,
    VerifyResponse,
)
from qrsign.core.signing import (
    WIRE_DELIMITER,
    encode_qr_envelope,
    encode_wire_payload,
    hash_document,
)
from qrsign.core.verification import decode_qr_envelope

if TYPE_CHECKING:
    import logging

    from qrsign.core.context import CryptoContext


class SigningRoutes:
    """Handles FastAPI routes for the signing server."""

    def __init__(
        self,
        context: CryptoContext,
        logger: logging.Logger,
        max_document_bytes: int,
        recent_samples: int,
        *,
        require_seeded_entropy: bool = False,
    ):
        self.context = context
        self.logger = logger
        self.max_document_bytes = max_document_bytes
        self.recent_samples = recent_samples
        self.require_seeded_entropy = require_seeded_entropy

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""

        app.get("/health")(self.health)
        app.get("/entropy")(self.entropy_status)
        app.post("/entropy")(self.add_entropy)
        app.post("/keys", status_code=201)(self.generate_key)
        app.get("/keys")(self.list_keys)
        app.get("/keys/{key_id}")(self.get_key)
        app.get("/keys/{key_id}/private")(self.export_private_key)
        app.post("/sign")(self.sign)
        app.post("/verify")(self.verify)

    def _decode_content(self, content: str) -> bytes:
        try:
            data = base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as err:
            raise HTTPException(400, "content is not valid base64") from err
        if len(data) > self.max_document_bytes:
            raise HTTPException(413, "document too large")
        return data

    def _status(self) -> EntropyStatus:
        pool = self.context.pool
        return EntropyStatus(
            size=len(pool),
            capacity=pool.capacity,
            level=pool.level,
            seeded=pool.seeded,
            recent=pool.recent(self.recent_samples),
        )

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return {"status": "ok", "timestamp": int(time.time())}

    async def entropy_status(self) -> EntropyStatus:
        """Handle GET /entropy endpoint."""
        return self._status()

    async def add_entropy(self, req: EntropyRequest) -> EntropyStatus:
        """Handle POST /entropy endpoint."""
        self.context.add_entropy(req.samples)
        return self._status()

    async def generate_key(self) -> KeyPair:
        """Handle POST /keys endpoint."""
        try:
            if self.require_seeded_entropy and not self.context.pool.seeded:
                msg = f"entropy pool not seeded ({self.context.pool.level:.1f}%)"
                raise EntropyNotSeeded(msg)
            return await self.context.agenerate_key_pair()
        except QRSignError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def list_keys(self) -> list[KeyPair]:
        """Handle GET /keys endpoint."""
        return self.context.keys.list_keys()

    async def get_key(self, key_id: str) -> KeyPair:
        """Handle GET /keys/{key_id} endpoint."""
        try:
            return self.context.keys.get(key_id)
        except QRSignError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def export_private_key(self, key_id: str) -> None:
        """Handle GET /keys/{key_id}/private endpoint; always refused."""
        try:
            self.context.keys.export_private_key(key_id)
        except QRSignError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def sign(self, req: SignRequest) -> SignResponse:
        """Handle /sign endpoint."""
        document = self._decode_content(req.content)
        try:
            doc = await self.context.asign(req.key_id, document, req.file_name)
        except QRSignError as e:
            raise HTTPException(e.status_code, str(e)) from e
        return SignResponse(
            document=doc,
            payload=encode_wire_payload(doc),
            qr=encode_qr_envelope(doc),
        )

    async def verify(self, req: VerifyRequest) -> VerifyResponse:
        """Handle /verify endpoint."""
        document = self._decode_content(req.content)
        try:
            public_key = self.context.import_public_key(req.public_key_pem)
            payload = WIRE_DELIMITER.join(decode_qr_envelope(req.payload))
            valid = await self.context.averify(public_key, document, payload)
        except QRSignError as e:
            raise HTTPException(e.status_code, str(e)) from e
        self.logger.info("Verification request: %s", "valid" if valid else "invalid")
        return VerifyResponse(valid=valid, file_hash=hash_document(document))
