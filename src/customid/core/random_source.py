"""Injectable sources of randomness for identifier generation."""

from __future__ import annotations

import random
import uuid
from typing import Protocol


class RandomSource(Protocol):
    """Protocol defining the randomness needed by the generator."""

    def randbits(self, k: int) -> int: ...

    def randint(self, a: int, b: int) -> int: ...


class SystemRandomSource:
    """Draws from the operating system's entropy pool."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def randbits(self, k: int) -> int:
        return self._rng.getrandbits(k)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


class SeededRandomSource:
    """Deterministic source for tests. Records every draw for assertions."""

    def __init__(self, seed: int | str | None = 0) -> None:
        self._rng = random.Random(seed)
        self._draws: list[int] = []

    def randbits(self, k: int) -> int:
        value = self._rng.getrandbits(k)
        self._draws.append(value)
        return value

    def randint(self, a: int, b: int) -> int:
        value = self._rng.randint(a, b)
        self._draws.append(value)
        return value

    @property
    def draws(self) -> list[int]:
        return self._draws


def uuid4_from(source: RandomSource) -> uuid.UUID:
    """Build a version-4 UUID from 128 random bits of *source*."""
    return uuid.UUID(int=source.randbits(128), version=4)
