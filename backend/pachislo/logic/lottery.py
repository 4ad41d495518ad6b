"""Lottery draws against cumulative probability thresholds."""
import logging
from dataclasses import dataclass

from pachislo.logic.models import (
    Lose,
    LoseKind,
    LotteryMode,
    SlotProbability,
    Win,
    WinKind,
)
from pachislo.logic.probability import ProbabilityModel
from pachislo.logic.rng import RNGBase


logger = logging.getLogger(__name__)


def classify(u: float, table: SlotProbability) -> Win | Lose:
    """
    Map one uniform sample to a result.

    Thresholds are scanned in the fixed order win, fake_win, fake_lose and
    the first one that u falls under decides the result.
    """
    win_cut, fake_win_cut, fake_lose_cut = table.thresholds()
    if u < win_cut:
        return Win(kind=WinKind.DEFAULT)
    if u < fake_win_cut:
        return Win(kind=WinKind.FAKE_WIN)
    if u < fake_lose_cut:
        return Lose(kind=LoseKind.FAKE_LOSE)
    return Lose(kind=LoseKind.DEFAULT)


def draw(table: SlotProbability, rng: RNGBase) -> Win | Lose:
    """Draw one sample from rng and classify it against table."""
    return classify(rng.random(), table)


@dataclass(frozen=True)
class ContinuationDraw:
    """Outcome of a rush continuation decision."""

    result: Win | Lose
    eligible: bool
    probability: float

    @property
    def granted(self) -> bool:
        return self.eligible and self.result.is_win()


class LotteryEngine:
    """
    Draws lottery results for one session.

    Owns the session's lottery RNG exclusively.
    """

    def __init__(self, probability: ProbabilityModel, rng: RNGBase):
        self.probability = probability
        self.rng = rng

    def draw(self, mode: LotteryMode) -> Win | Lose:
        """Draw against the table selected by mode."""
        result = draw(self.probability.table(mode), self.rng)
        logger.debug("Lottery %s -> %s(%s)", mode.value, result.outcome, result.kind.value)
        return result

    def draw_continuation(self, n: int) -> ContinuationDraw:
        """
        Eligibility gate, then outcome draw.

        The gate passes when a fresh sample falls under rush_continue_fn(n).
        A failed gate still draws a presentation result, but only from the
        losing categories so the shown result never contradicts the denial.
        """
        p = self.probability.evaluate_rush_continue(n)
        eligible = self.rng.chance(p)
        table = self.probability.table(LotteryMode.RUSH_CONTINUE)
        if not eligible:
            table = table.model_copy(update={"win": 0.0, "fake_win": 0.0})
        result = draw(table, self.rng)
        logger.debug(
            "Rush continuation n=%d p=%.4f eligible=%s -> %s(%s)",
            n,
            p,
            eligible,
            result.outcome,
            result.kind.value,
        )
        return ContinuationDraw(result=result, eligible=eligible, probability=p)
