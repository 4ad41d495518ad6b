"""Reel rendering for lottery results."""
from typing import Generic, Sequence, TypeVar

from pachislo.errors import invalid_configuration
from pachislo.logic.models import Lose, LoseKind, Win
from pachislo.logic.rng import ProductionRNG, RNGBase


S = TypeVar("S")

DEFAULT_REEL_COUNT = 3
DEFAULT_SYMBOLS = tuple(range(1, 8))


class SlotRenderer(Generic[S]):
    """
    Turns a lottery result into displayed reel symbols.

    - Win (any kind): every reel shows the same symbol
    - Lose(Default): every reel shows a different symbol
    - Lose(FakeLose): all reels but the last match, the last one stops on a
      neighbouring symbol (near miss)

    Symbol identity comes from the renderer's own RNG, never from the
    lottery stream.
    """

    def __init__(
        self,
        reel_count: int = DEFAULT_REEL_COUNT,
        symbols: Sequence[S] = DEFAULT_SYMBOLS,
        rng: RNGBase | None = None,
    ):
        symbols = tuple(symbols)
        if reel_count < 2:
            raise invalid_configuration(f"reel_count must be at least 2, got {reel_count}")
        if len(set(symbols)) != len(symbols):
            raise invalid_configuration("Slot symbols must be unique")
        if len(symbols) < reel_count:
            raise invalid_configuration(
                f"Need at least {reel_count} symbols for {reel_count} reels, got {len(symbols)}"
            )
        self.reel_count = reel_count
        self.symbols = symbols
        self.rng = rng or ProductionRNG()

    def produce(self, result: Win | Lose) -> list[S]:
        if result.is_win():
            return self._matching()
        if result.kind == LoseKind.FAKE_LOSE:
            return self._near_miss()
        return self._scattered()

    def _pick_index(self) -> int:
        return self.rng.randint(0, len(self.symbols) - 1)

    def _matching(self) -> list[S]:
        return [self.symbols[self._pick_index()]] * self.reel_count

    def _near_miss(self) -> list[S]:
        idx = self._pick_index()
        step = 1 if self.rng.chance(0.5) else -1
        neighbour = self.symbols[(idx + step) % len(self.symbols)]
        return [self.symbols[idx]] * (self.reel_count - 1) + [neighbour]

    def _scattered(self) -> list[S]:
        # Partial Fisher-Yates over indices
        indices = list(range(len(self.symbols)))
        for i in range(self.reel_count):
            j = self.rng.randint(i, len(indices) - 1)
            indices[i], indices[j] = indices[j], indices[i]
        return [self.symbols[i] for i in indices[: self.reel_count]]
