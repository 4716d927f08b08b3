"""
Entry point for the signing server.
"""

from __future__ import annotations

import logging
from typing import Any

import uvicorn

from qrsign.common.config import Config

from .core import SigningServer


def start_server(config: Config | None = None, **overrides: Any) -> None:
    """Start the signing server."""
    if config is None:
        config = Config()
    logging.basicConfig(level=config.LOG_LEVEL)
    server = SigningServer(config=config, **overrides)
    uvicorn.run(server.app, host=server.server_host, port=server.server_port)


__all__ = ["SigningServer", "start_server"]
