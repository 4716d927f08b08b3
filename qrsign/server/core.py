"""
Signing server exposing the core API over HTTP with FastAPI.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI

from qrsign.common.config import Config
from qrsign.common.logging_utils import setup_logger
from qrsign.common.mixins import Configurable
from qrsign.core.context import CryptoContext

from .routes import SigningRoutes


class SigningServer(Configurable):
    """Main signing server class wiring a CryptoContext to HTTP routes."""

    server_host: str
    server_port: int
    max_document_bytes: int
    require_seeded_entropy: bool
    log_level: int

    def __init__(
        self,
        config: Config | None = None,
        context: CryptoContext | None = None,
        **overrides: Any,
    ):
        self.config = config or Config()
        self.apply_overrides(
            overrides,
            self.config,
            [
                "server_host",
                "server_port",
                "max_document_bytes",
                "require_seeded_entropy",
                "log_level",
            ],
        )
        self.logger = logging.getLogger(__name__)
        setup_logger(self.logger, self.log_level)

        self.context = context if context is not None else CryptoContext(config=self.config)
        self.app = FastAPI(title="qrsign")
        self.routes = SigningRoutes(
            self.context,
            self.logger,
            self.max_document_bytes,
            self.config.ENTROPY_RECENT_SAMPLES,
            require_seeded_entropy=self.require_seeded_entropy,
        )
        self.routes.setup_routes(self.app)

        if not self.context.rng.is_available():
            self.logger.error("Platform CSPRNG unavailable; key generation will fail")
        self.logger.info(
            "Signing server configured for http://%s:%s",
            self.server_host,
            self.server_port,
        )
