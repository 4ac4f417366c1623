"""
Seedable pseudo-random source.
Same seed, same sequence: map generation and tests rely on it.
String seeds are hashed with 32-bit FNV-1a, then fed to a mulberry32 generator.
"""

import secrets

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MULBERRY_INCREMENT = 0x6D2B79F5


def hash_seed(seed: str) -> int:
    """Hash a string seed to a 32-bit integer (FNV-1a over UTF-8 bytes)."""
    h = FNV_OFFSET_BASIS
    for byte in seed.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & MASK_32
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


class SeededRandom:
    """
    Deterministic, non-cryptographic generator with a single 32-bit state word.

    random() returns floats uniformly distributed in [0, 1).
    Without a seed, the state is drawn from the OS entropy source.
    """

    def __init__(self, seed: str | int | None = None):
        if seed is None:
            seed = secrets.randbits(32)
        self.seed = seed
        if isinstance(seed, str):
            self._state = hash_seed(seed)
        else:
            self._state = int(seed) & MASK_32

    def random(self) -> float:
        self._state = (self._state + MULBERRY_INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & MASK_32)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / 4294967296

    def randrange(self, n: int) -> int:
        """Integer in [0, n)."""
        return int(self.random() * n)

    def shuffle(self, items: list) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]
