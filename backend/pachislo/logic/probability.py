"""Probability tables and the rush continuation function."""
import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from pachislo.errors import ErrorCode, PachisloError
from pachislo.logic.models import LotteryMode, Probability, SlotProbability


logger = logging.getLogger(__name__)


class RushContinueCurve(BaseModel):
    """
    Geometric decay: max(floor, initial * decay ** n).

    Serializable stand-in for a host-supplied continuation function;
    non-increasing in n whenever decay <= 1.
    """

    model_config = ConfigDict(frozen=True)

    initial: float = Field(default=0.8, ge=0.0, le=1.0)
    decay: float = Field(default=0.9, ge=0.0, le=1.0)
    floor: float = Field(default=0.0, ge=0.0, le=1.0)

    def __call__(self, n: int) -> float:
        return max(self.floor, self.initial * self.decay**n)


class ProbabilityModel:
    """Read-only view over a Probability config for one session."""

    def __init__(self, probability: Probability):
        self._probability = probability

    def table(self, mode: LotteryMode) -> SlotProbability:
        if mode == LotteryMode.NORMAL:
            return self._probability.normal
        if mode == LotteryMode.RUSH:
            return self._probability.rush
        return self._probability.rush_continue

    def evaluate_rush_continue(self, n: int) -> float:
        """
        Evaluate the continuation function for the current count.

        Failures of the supplied function surface as HOST_CALLBACK_FAILURE.
        """
        try:
            value = self._probability.rush_continue_fn(n)
        except Exception as e:
            raise PachisloError(
                ErrorCode.HOST_CALLBACK_FAILURE,
                f"rush_continue_fn({n}) raised: {e}",
            ) from e

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PachisloError(
                ErrorCode.HOST_CALLBACK_FAILURE,
                f"rush_continue_fn({n}) returned non-numeric {value!r}",
            )
        if math.isnan(value):
            raise PachisloError(
                ErrorCode.HOST_CALLBACK_FAILURE,
                f"rush_continue_fn({n}) returned NaN",
            )
        logger.debug("rush_continue_fn(%d) = %.4f", n, value)
        return float(value)
