"""Random sources for lottery draws and reel rendering.

Each session owns its RNG instances exclusively; they are never shared
between sessions.
"""
import random
import secrets
from abc import ABC, abstractmethod

# Seed offset for the renderer stream so it never mirrors the lottery stream.
RENDER_SEED_SALT = 0x5EED


class RNGBase(ABC):
    """Uniform source used by the lottery and the renderer."""

    @abstractmethod
    def random(self) -> float:
        """Uniform float in [0, 1)."""
        pass

    @abstractmethod
    def randint(self, a: int, b: int) -> int:
        """Uniform int in [a, b] inclusive."""
        pass

    def chance(self, p: float) -> bool:
        """Consume one sample; True with probability p (p >= 1 always passes)."""
        return self.random() < p


class ProductionRNG(RNGBase):
    """
    Live session RNG.

    Backed by the OS secure source; sessions created without a seed use it
    for both lottery and reels.
    """

    def random(self) -> float:
        return secrets.randbelow(2**32) / (2**32)

    def randint(self, a: int, b: int) -> int:
        return secrets.randbelow(b - a + 1) + a


class SeededRNG(RNGBase):
    """Reproducible RNG for tests, simulation and seeded sessions."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


def make_rng(seed: int | None = None) -> RNGBase:
    """Lottery stream: seeded when a seed is given, secure otherwise."""
    if seed is None:
        return ProductionRNG()
    return SeededRNG(seed)


def make_render_rng(seed: int | None = None) -> RNGBase:
    """Reel stream, independent of the lottery stream for the same seed."""
    if seed is None:
        return ProductionRNG()
    return SeededRNG(seed ^ RENDER_SEED_SALT)
