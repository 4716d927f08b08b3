"""
CSPRNG facade over the platform random source.
"""

from __future__ import annotations

import logging
import os
import re

from qrsign.common.config import Config
from qrsign.common.exceptions import MalformedHex, RandomnessUnavailable
from qrsign.common.interfaces import IEntropyMixer, RandomSource

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def hex_encode(data: bytes | bytearray) -> str:
    """Two lowercase hex digits per byte, in input order."""
    return bytes(data).hex()


def hex_decode(text: str) -> bytes:
    """Decode hex of either case; odd length or stray characters raise MalformedHex."""
    if len(text) % 2:
        msg = f"hex string has odd length {len(text)}"
        raise MalformedHex(msg)
    if not _HEX_RE.fullmatch(text):
        msg = "hex string contains non-hex characters"
        raise MalformedHex(msg)
    return bytes.fromhex(text)


def is_hex(text: str) -> bool:
    return len(text) % 2 == 0 and _HEX_RE.fullmatch(text) is not None


def _check_salt_length(length: int) -> None:
    if length < 1:
        msg = f"salt length must be at least 1 byte, got {length}"
        raise ValueError(msg)


class CSPRNG:
    """Draws platform random bytes and runs them through the entropy pool mix."""

    hex_encode = staticmethod(hex_encode)
    hex_decode = staticmethod(hex_decode)

    def __init__(
        self,
        pool: IEntropyMixer | None = None,
        source: RandomSource | None = None,
        salt_length: int | None = None,
        config: Config | None = None,
    ):
        config = config or Config()
        self.pool = pool
        self.source: RandomSource = source or os.urandom
        self.salt_length = salt_length if salt_length is not None else config.SALT_LENGTH
        _check_salt_length(self.salt_length)

    def _draw(self, length: int) -> bytes:
        try:
            data = self.source(length)
        except (NotImplementedError, OSError) as err:
            msg = f"platform random source unavailable: {err}"
            raise RandomnessUnavailable(msg) from err
        if len(data) != length:
            msg = f"platform random source returned {len(data)} of {length} bytes"
            raise RandomnessUnavailable(msg)
        return data

    def random_bytes(self, length: int) -> bytes:
        """Return exactly ``length`` random bytes, mixed with the entropy pool."""
        if length < 0:
            msg = "length must be non-negative"
            raise ValueError(msg)
        buffer = bytearray(self._draw(length))
        if self.pool is not None:
            self.pool.mix(buffer)
        return bytes(buffer)

    def generate_salt(self, length: int | None = None) -> str:
        """Hex-encoded nonce of ``length`` bytes (default from config)."""
        if length is None:
            length = self.salt_length
        _check_salt_length(length)
        return hex_encode(self.random_bytes(length))

    def is_available(self) -> bool:
        """Check that the platform source can produce bytes."""
        try:
            self._draw(1)
        except RandomnessUnavailable:
            logger.warning("Platform random source is unavailable")
            return False
        return True
