"""
Custom exceptions for the signing core.
"""

from __future__ import annotations


class QRSignError(Exception):
    """Base exception carrying the HTTP status code used by the server."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class RandomnessUnavailable(QRSignError):
    """The platform CSPRNG could not supply bytes."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class KeyGenerationFailed(QRSignError):
    """The key provider failed to produce a key pair."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class KeyNotFound(QRSignError):
    """No key pair is registered under the requested id."""

    def __init__(self, key_id: str) -> None:
        super().__init__(f"key not found: {key_id}", 404)
        self.key_id = key_id


class KeyExportRefused(QRSignError):
    """Private key material is never handed out."""

    def __init__(self, key_id: str) -> None:
        super().__init__(f"private key {key_id} is not exportable", 403)
        self.key_id = key_id


class InvalidKeyEncoding(QRSignError):
    """A public key could not be decoded or has the wrong type."""


class MalformedHex(QRSignError):
    """A hex string has odd length or non-hex characters."""


class MalformedPayload(QRSignError):
    """A wire payload does not have three non-empty hex fields."""


class SigningFailed(QRSignError):
    """The signature primitive raised during signing."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class EntropyNotSeeded(QRSignError):
    """Key generation was requested before enough entropy was collected."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
