"""
Configuration settings for the document signing system.
"""

from __future__ import annotations

import os

from qrsign.common.logging_utils import parse_log_level

_TRUE_VALUES = {"1", "true", "yes", "on"}

ENTROPY_POOL_CAPACITY = 2048


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # Entropy pool
        self.ENTROPY_POOL_CAPACITY: int = ENTROPY_POOL_CAPACITY
        self.ENTROPY_TARGET_SAMPLES: int = 200  # Samples until the pool counts as seeded
        self.ENTROPY_RECENT_SAMPLES: int = 50

        # Nonce and key settings
        self.SALT_LENGTH: int = int(os.getenv("QRSIGN_SALT_LENGTH", "32"))
        if self.SALT_LENGTH < 1:
            msg = f"QRSIGN_SALT_LENGTH must be at least 1, got {self.SALT_LENGTH}"
            raise ValueError(msg)
        self.RSA_KEY_SIZE: int = 2048
        self.RSA_PUBLIC_EXPONENT: int = 65537
        self.KEY_ID_BYTES: int = 4  # 8 hex chars
        self.KEY_ALGORITHM: str = "RSA-2048"

        # Server settings
        self.SERVER_HOST: str = os.getenv("QRSIGN_SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = int(os.getenv("QRSIGN_SERVER_PORT", "8000"))
        self.SERVER_URL: str = f"http://{self.SERVER_HOST}:{self.SERVER_PORT}"
        self.MAX_DOCUMENT_BYTES: int = int(
            os.getenv("QRSIGN_MAX_DOCUMENT_BYTES", str(10 * 1024 * 1024))
        )
        self.REQUIRE_SEEDED_ENTROPY: bool = (
            os.getenv("QRSIGN_REQUIRE_SEEDED_ENTROPY", "").lower() in _TRUE_VALUES
        )

        # Logging
        self.LOG_LEVEL: int = parse_log_level(os.getenv("QRSIGN_LOG_LEVEL", "INFO"))
