from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def next_index(self, n: int) -> int: ...

    def next_code(self, alphabet: str, length: int) -> str: ...


class PythonRandom:
    """RandomSource backed by ``random.Random``; pass a seed for repeatable draws."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def next_index(self, n: int) -> int:
        if n <= 0:
            raise ValueError("n must be positive")
        return self._random.randrange(n)

    def next_code(self, alphabet: str, length: int) -> str:
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        return "".join(self._random.choice(alphabet) for _ in range(length))
