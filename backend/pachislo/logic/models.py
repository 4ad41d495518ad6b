"""Game state, commands, lottery results and configuration models."""
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from pachislo.errors import invalid_configuration


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# === Game state ===


class UninitializedState(_Frozen):
    """No session started yet."""

    kind: Literal["Uninitialized"] = "Uninitialized"


class NormalState(_Frozen):
    """Standard mode; balls is the player's remaining ball count."""

    kind: Literal["Normal"] = "Normal"
    balls: NonNegativeInt


class RushState(_Frozen):
    """
    Bonus mode.

    rush_balls holds balls earned during the rush; n counts granted
    continuations within the current rush episode.
    """

    kind: Literal["Rush"] = "Rush"
    balls: NonNegativeInt
    rush_balls: NonNegativeInt
    n: NonNegativeInt = 0


GameState = Annotated[
    Union[UninitializedState, NormalState, RushState],
    Field(discriminator="kind"),
]


class Transition(_Frozen):
    """State change record; before is None only on a session's first transition."""

    before: Optional[GameState] = None
    after: GameState


# === Commands ===


class Command(str, Enum):
    """Commands accepted by the state machine."""

    START_GAME = "StartGame"
    LAUNCH_BALL = "LaunchBall"
    CAUSE_LOTTERY = "CauseLottery"
    FINISH_GAME = "FinishGame"


class ControlFlow(str, Enum):
    """Signal returned to the caller after each command."""

    CONTINUE = "Continue"
    BREAK = "Break"


# === Lottery results ===


class LotteryMode(str, Enum):
    """Which table a draw is made against."""

    NORMAL = "Normal"
    RUSH = "Rush"
    RUSH_CONTINUE = "RushContinue"


class WinKind(str, Enum):
    DEFAULT = "Default"
    FAKE_WIN = "FakeWin"


class LoseKind(str, Enum):
    DEFAULT = "Default"
    FAKE_LOSE = "FakeLose"


class Win(_Frozen):
    """Winning draw. FakeWin still counts as a win."""

    outcome: Literal["Win"] = "Win"
    kind: WinKind = WinKind.DEFAULT

    def is_win(self) -> bool:
        return True


class Lose(_Frozen):
    """Losing draw. FakeLose is presented as a near miss."""

    outcome: Literal["Lose"] = "Lose"
    kind: LoseKind = LoseKind.DEFAULT

    def is_win(self) -> bool:
        return False


LotteryResult = Annotated[Union[Win, Lose], Field(discriminator="outcome")]


def is_win(result: Win | Lose) -> bool:
    """True for both Win kinds, False for both Lose kinds."""
    return result.is_win()


# === Configuration ===


class SlotProbability(_Frozen):
    """
    Per-mode odds.

    Values are cumulative thresholds scanned in the order win, fake_win,
    fake_lose; they do not have to sum to 1.
    """

    win: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    fake_win: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    fake_lose: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)

    @classmethod
    def from_tuple(cls, values: tuple[float, float, float]) -> "SlotProbability":
        win, fake_win, fake_lose = values
        return cls(win=win, fake_win=fake_win, fake_lose=fake_lose)

    def thresholds(self) -> tuple[float, float, float]:
        """Cumulative cut points for a single uniform sample."""
        first = self.win
        second = first + self.fake_win
        return first, second, second + self.fake_lose


class BallsConfig(_Frozen):
    """Starting balls, balls per normal win, balls per rush entry/continuation."""

    init_balls: NonNegativeInt
    incremental_balls: NonNegativeInt
    incremental_rush: NonNegativeInt


class Probability(_Frozen):
    """Full probability configuration."""

    normal: SlotProbability
    rush: SlotProbability
    rush_continue: SlotProbability
    rush_continue_fn: Callable[[int], float] = Field(exclude=True)


class GameConfig(_Frozen):
    """Immutable session configuration."""

    balls: BallsConfig
    probability: Probability

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameConfig":
        """Validate a plain mapping, failing fast with INVALID_CONFIGURATION."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise invalid_configuration(f"Invalid game configuration: {e}") from e
