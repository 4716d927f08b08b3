"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

RandomSource = Callable[[int], bytes]


class IEntropyMixer(Protocol):
    """Protocol for anything that can perturb freshly drawn random bytes."""

    def add_entropy(self, samples: Iterable[int]) -> None: ...

    def mix(self, buffer: bytearray) -> None: ...


class IRandomGenerator(Protocol):
    """Protocol for the CSPRNG facade."""

    def random_bytes(self, length: int) -> bytes: ...

    def generate_salt(self, length: int | None = None) -> str: ...


class IMessageSigner(Protocol):
    """Protocol for signing with a registered key, addressed only by id."""

    def __contains__(self, key_id: object) -> bool: ...

    def sign_with(self, key_id: str, message: bytes) -> bytes: ...
