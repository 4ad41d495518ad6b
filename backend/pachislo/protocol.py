"""HTTP protocol models."""
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from pachislo.config import settings
from pachislo.errors import invalid_configuration
from pachislo.logic.models import ControlFlow, GameConfig
from pachislo.logic.probability import RushContinueCurve


# === Request Models ===
#
# Request fields are plain numbers; range checks happen when the GameConfig
# is built so every bad value surfaces as INVALID_CONFIGURATION.


class BallsRequest(BaseModel):
    """Ball economy overrides."""

    init_balls: int = settings.init_balls
    incremental_balls: int = settings.incremental_balls
    incremental_rush: int = settings.incremental_rush


class TableRequest(BaseModel):
    """One probability table (win, fake_win, fake_lose)."""

    win: float = 0.0
    fake_win: float = 0.0
    fake_lose: float = 0.0

    @classmethod
    def from_tuple(cls, values: tuple[float, float, float]) -> "TableRequest":
        win, fake_win, fake_lose = values
        return cls(win=win, fake_win=fake_win, fake_lose=fake_lose)


class CurveRequest(BaseModel):
    """Rush continuation curve parameters."""

    initial: float = settings.rush_continue_initial
    decay: float = settings.rush_continue_decay
    floor: float = settings.rush_continue_floor


class ProbabilityRequest(BaseModel):
    """Probability overrides; continuation is a decay curve over HTTP."""

    normal: TableRequest = Field(
        default_factory=lambda: TableRequest.from_tuple(settings.normal_probability)
    )
    rush: TableRequest = Field(
        default_factory=lambda: TableRequest.from_tuple(settings.rush_probability)
    )
    rush_continue: TableRequest = Field(
        default_factory=lambda: TableRequest.from_tuple(settings.rush_continue_probability)
    )
    rush_continue_curve: CurveRequest = Field(default_factory=CurveRequest)


class CreateSessionRequest(BaseModel):
    """POST /sessions request body."""

    balls: BallsRequest = Field(default_factory=BallsRequest)
    probability: ProbabilityRequest = Field(default_factory=ProbabilityRequest)
    seed: int | None = Field(default=None, description="Fixed seed for reproducible draws")

    def to_game_config(self) -> GameConfig:
        """
        Build the session config.

        Raises INVALID_CONFIGURATION for any out-of-range value.
        """
        try:
            curve = RushContinueCurve.model_validate(
                self.probability.rush_continue_curve.model_dump()
            )
        except ValidationError as e:
            raise invalid_configuration(f"Invalid rush_continue_curve: {e}") from e

        return GameConfig.from_mapping(
            {
                "balls": self.balls.model_dump(),
                "probability": {
                    "normal": self.probability.normal.model_dump(),
                    "rush": self.probability.rush.model_dump(),
                    "rush_continue": self.probability.rush_continue.model_dump(),
                    "rush_continue_fn": curve,
                },
            }
        )


class CommandRequest(BaseModel):
    """POST /sessions/{id}/commands request body."""

    command: str = Field(..., description="StartGame | LaunchBall | CauseLottery | FinishGame | Finish")


# === Response Models ===


class SessionResponse(BaseModel):
    """POST /sessions and GET /sessions/{id} response."""

    protocolVersion: str = settings.protocol_version
    sessionId: str
    configHash: str
    state: Any
    finished: bool = False


class CommandResponse(BaseModel):
    """POST /sessions/{id}/commands response."""

    protocolVersion: str = settings.protocol_version
    control: ControlFlow
    state: Any
    events: list[dict[str, Any]] = Field(default_factory=list)
