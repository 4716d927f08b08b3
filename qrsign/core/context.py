"""
Explicit context object bundling the signing core's shared state.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable

from qrsign.common.config import Config
from qrsign.common.interfaces import RandomSource
from qrsign.common.models import KeyPair, SignedDocument
from qrsign.core.csprng import CSPRNG
from qrsign.core.entropy import EntropyPool
from qrsign.core.keys import KeyFactory, KeyManager, VerificationKey, import_public_key
from qrsign.core.signing import SigningProtocol
from qrsign.core.verification import VerificationProtocol

logger = logging.getLogger(__name__)


class CryptoContext:
    """Owns one entropy pool, CSPRNG facade, key registry, signer and verifier."""

    def __init__(
        self,
        config: Config | None = None,
        pool: EntropyPool | None = None,
        source: RandomSource | None = None,
        key_factory: KeyFactory | None = None,
    ):
        self.config = config or Config()
        self.pool = pool if pool is not None else EntropyPool(config=self.config)
        self.rng = CSPRNG(pool=self.pool, source=source, config=self.config)
        self.keys = KeyManager(self.rng, config=self.config, key_factory=key_factory)
        self.signer = SigningProtocol(self.keys, self.rng, config=self.config)
        self.verifier = VerificationProtocol()

    def add_entropy(self, samples: Iterable[int]) -> None:
        self.pool.add_entropy(samples)

    def generate_key_pair(self) -> KeyPair:
        return self.keys.generate_key_pair()

    def import_public_key(self, pem: str) -> VerificationKey:
        return import_public_key(pem)

    def sign(self, key_id: str, document: bytes, file_name: str = "") -> SignedDocument:
        return self.signer.sign(key_id, document, file_name)

    def verify(self, public_key: VerificationKey, document: bytes, payload: str) -> bool:
        return self.verifier.verify(public_key, document, payload)

    # Async variants run the CPU-bound primitives off the event loop.

    async def agenerate_key_pair(self) -> KeyPair:
        return await asyncio.to_thread(self.generate_key_pair)

    async def asign(
        self, key_id: str, document: bytes, file_name: str = ""
    ) -> SignedDocument:
        return await asyncio.to_thread(self.sign, key_id, document, file_name)

    async def averify(
        self, public_key: VerificationKey, document: bytes, payload: str
    ) -> bool:
        return await asyncio.to_thread(self.verify, public_key, document, payload)


_default_context: CryptoContext | None = None
_default_lock = threading.Lock()


def default_context() -> CryptoContext:
    """Process-wide context, created on first use."""
    global _default_context  # noqa: PLW0603
    with _default_lock:
        if _default_context is None:
            logger.debug("Creating default crypto context")
            _default_context = CryptoContext()
        return _default_context


def set_default_context(context: CryptoContext | None) -> None:
    """Replace the process-wide context; None makes the next use create a fresh one."""
    global _default_context  # noqa: PLW0603
    with _default_lock:
        _default_context = context
