"""
Pydantic models for signing results and request/response validation.
"""

from __future__ import annotations

from typing import Annotated, NamedTuple

from pydantic import BaseModel, Field

from qrsign.common.config import ENTROPY_POOL_CAPACITY

EntropySample = Annotated[int, Field(ge=0, le=255)]


class KeyPair(BaseModel):
    """Public description of a registered key pair.

    The private half never appears here; it stays in the KeyManager registry.
    """

    id: str
    created_at: int
    public_key_pem: str
    algorithm: str = "RSA-2048"


class SignedDocument(BaseModel):
    id: str
    file_name: str
    file_hash: str
    salt: str
    signature: str
    timestamp: int
    public_key_fingerprint: str


class WirePayload(NamedTuple):
    file_hash: str
    salt: str
    signature: str


class EntropyRequest(BaseModel):
    samples: list[EntropySample] = Field(
        default_factory=list, max_length=ENTROPY_POOL_CAPACITY
    )


class EntropyStatus(BaseModel):
    size: int
    capacity: int
    level: float
    seeded: bool
    recent: list[int] = Field(default_factory=list)


class SignRequest(BaseModel):
    key_id: str
    content: str  # base64 document bytes
    file_name: str = ""


class SignResponse(BaseModel):
    document: SignedDocument
    payload: str
    qr: str


class VerifyRequest(BaseModel):
    public_key_pem: str
    content: str  # base64 document bytes
    payload: str


class VerifyResponse(BaseModel):
    valid: bool
    file_hash: str
