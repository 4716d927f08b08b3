"""
Entropy pool fed with externally observed randomness.

Samples (mouse movements, sensor readings and so on) are stored in a bounded
FIFO and XORed over fresh CSPRNG output by ``mix``. The mix makes the
influence of collected samples observable; it does not add strength to bytes
that already come from the platform CSPRNG.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from qrsign.common.config import Config

logger = logging.getLogger(__name__)


class EntropyPool:
    """Bounded, thread-safe pool of integer samples with a persistent cursor."""

    def __init__(
        self,
        capacity: int | None = None,
        target_samples: int | None = None,
        config: Config | None = None,
    ):
        config = config or Config()
        self.capacity = capacity if capacity is not None else config.ENTROPY_POOL_CAPACITY
        self.target_samples = (
            target_samples
            if target_samples is not None
            else config.ENTROPY_TARGET_SAMPLES
        )
        if self.capacity <= 0:
            msg = "capacity must be positive"
            raise ValueError(msg)
        self._samples: list[int] = []
        self._cursor = 0
        self._total_added = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def add_entropy(self, samples: Iterable[int]) -> None:
        """Append samples in order, evicting the oldest beyond capacity."""
        new = [int(s) for s in samples]
        if not new:
            return
        with self._lock:
            self._samples.extend(new)
            overflow = len(self._samples) - self.capacity
            if overflow > 0:
                del self._samples[:overflow]
            self._total_added += len(new)
            size = len(self._samples)
        logger.debug("Added %d entropy samples (pool size %d)", len(new), size)

    def mix(self, buffer: bytearray) -> None:
        """XOR pool samples over ``buffer`` in place; no-op while the pool is empty."""
        with self._lock:
            if not self._samples:
                return
            for i in range(len(buffer)):
                size = len(self._samples)
                self._cursor %= size
                buffer[i] ^= self._samples[self._cursor] & 0xFF
                self._cursor = (self._cursor + 1) % size

    @property
    def level(self) -> float:
        """Collection progress in percent, capped at 100."""
        if self.target_samples <= 0:
            return 100.0
        with self._lock:
            total = self._total_added
        return min(100.0, total * 100.0 / self.target_samples)

    @property
    def seeded(self) -> bool:
        return self.level >= 100.0

    def recent(self, count: int = 50) -> list[int]:
        """Return the last ``count`` samples, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            return self._samples[-count:]
