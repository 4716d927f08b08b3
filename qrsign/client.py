"""
HTTP client for the signing server.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import requests

from qrsign.common.config import Config
from qrsign.common.models import EntropyStatus, KeyPair, SignResponse, VerifyResponse

logger = logging.getLogger(__name__)


class SigningClient:
    """Thin wrapper over the signing server's JSON API."""

    def __init__(
        self,
        server_url: str | None = None,
        server_host: str | None = None,
        server_port: int | None = None,
        timeout: float = 10.0,
    ):
        if server_host and server_port:
            self.server_url = f"http://{server_host}:{server_port}"
        else:
            self.server_url = server_url or Config().SERVER_URL
        self.server_url = self.server_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str) -> Any:
        response = requests.get(f"{self.server_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        response = requests.post(
            f"{self.server_url}{path}", json=body or {}, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _encode(content: bytes) -> str:
        return base64.b64encode(content).decode("ascii")

    def health(self) -> dict[str, Any]:
        return self._get("/health")

    def entropy_status(self) -> EntropyStatus:
        return EntropyStatus(**self._get("/entropy"))

    def add_entropy(self, samples: list[int]) -> EntropyStatus:
        return EntropyStatus(**self._post("/entropy", {"samples": list(samples)}))

    def generate_key(self) -> KeyPair:
        pair = KeyPair(**self._post("/keys"))
        logger.info("Server generated key %s", pair.id)
        return pair

    def list_keys(self) -> list[KeyPair]:
        return [KeyPair(**item) for item in self._get("/keys")]

    def get_key(self, key_id: str) -> KeyPair:
        return KeyPair(**self._get(f"/keys/{key_id}"))

    def sign(self, key_id: str, content: bytes, file_name: str = "") -> SignResponse:
        """Ask the server to sign ``content``; returns the document and payloads."""
        body = {
            "key_id": key_id,
            "content": self._encode(content),
            "file_name": file_name,
        }
        return SignResponse(**self._post("/sign", body))

    def verify(self, public_key_pem: str, content: bytes, payload: str) -> bool:
        """Ask the server to verify ``payload`` (wire string or QR envelope)."""
        body = {
            "public_key_pem": public_key_pem,
            "content": self._encode(content),
            "payload": payload,
        }
        return VerifyResponse(**self._post("/verify", body)).valid
